"""
Manifest lookup with dependency-directory folding.

The bundler may write "node_modules" path segments as "~" in manifest keys,
and whether it did so for a given segment cannot be recovered from the
filesystem path. A key with N such segments therefore has 2^N possible
manifest spellings; all of them are tried, most-folded first.

N is the nesting depth of dependency directories in the path (rarely more
than three), so no cap is applied to the enumeration.
"""

import itertools
import logging
from collections.abc import Iterator
from collections.abc import Mapping
from typing import Any

from .errors import AssetNotFound

logger = logging.getLogger(__name__)

DEPENDENCY_DIRECTORY = "node_modules"
FOLDED_MARKER = "~"


def _marker_positions(segments: list[str]) -> list[int]:
    # The final segment is the file itself, never a folded directory
    return [
        index
        for index, segment in enumerate(segments[:-1])
        if segment == DEPENDENCY_DIRECTORY
    ]


def candidate_keys(canonical_key: str) -> Iterator[str]:
    """
    Yield every manifest key the canonical key may have been written as.

    Order is stable: combinations are enumerated like binary counting where
    "folded" sorts before "kept", so the first candidate folds every marker
    and the last one is the key unchanged.

    Args:
        canonical_key: Project-relative key, e.g. "./node_modules/a/b.css"

    Yields:
        Candidate manifest keys (exactly one when the key has no markers)
    """
    segments = canonical_key.split("/")
    positions = _marker_positions(segments)

    if not positions:
        yield canonical_key
        return

    for folding in itertools.product((True, False), repeat=len(positions)):
        candidate = list(segments)
        for position, folded in zip(positions, folding):
            if folded:
                candidate[position] = FOLDED_MARKER
        yield "/".join(candidate)


class AssetResolver:
    """Finds artifact descriptors in a manifest's "assets" section."""

    def resolve(self, canonical_key: str, manifest: Mapping[str, Any]) -> Any | None:
        """
        Return the first matching descriptor, or None when nothing matches.

        A descriptor that is itself None counts as missing.
        """
        try:
            return self.lookup(canonical_key, manifest)
        except AssetNotFound:
            return None

    def lookup(self, canonical_key: str, manifest: Mapping[str, Any]) -> Any:
        """
        Like resolve() but raises AssetNotFound on a miss.

        Raises:
            AssetNotFound: No candidate key is present in the manifest
        """
        assets = manifest.get("assets") or {}
        candidates = list(candidate_keys(canonical_key))

        logger.debug(f"Looking up {canonical_key}")
        for candidate in candidates:
            if len(candidates) > 1:
                logger.debug(f'  trying "{candidate}"')

            asset = assets.get(candidate)
            if asset is not None:
                return asset

        raise AssetNotFound(
            f"asset not found: {canonical_key}",
            key=canonical_key,
            candidates=candidates,
        )
