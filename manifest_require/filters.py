"""Inclusion/exclusion rules deciding which keys an asset type handles."""

import re
from collections.abc import Iterable

from .models import AssetType
from .models import Rule


def rule_matches(rule: Rule, key: str) -> bool:
    """Evaluate one rule: compiled pattern, predicate, or exact string."""
    if isinstance(rule, re.Pattern):
        return rule.search(key) is not None
    if callable(rule):
        return bool(rule(key))
    return rule == key


def _any_match(rules: Iterable[Rule], key: str) -> bool:
    return any(rule_matches(rule, key) for rule in rules)


def includes(key: str, asset_type: AssetType) -> bool:
    """No include rules means everything is included."""
    if asset_type.include is None:
        return True
    return _any_match(asset_type.include, key)


def excludes(key: str, asset_type: AssetType) -> bool:
    """No exclude rules means nothing is excluded."""
    if asset_type.exclude is None:
        return False
    return _any_match(asset_type.exclude, key)


def is_handled(key: str, asset_type: AssetType) -> bool:
    """True when the asset type should intercept this canonical key."""
    return includes(key, asset_type) and not excludes(key, asset_type)
