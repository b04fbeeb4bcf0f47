"""
==============================================================================
Variant De-duplication and Ordering
==============================================================================

Pure functions over snapshots of variant rows.

A variant record is either a mapping (a row dict from the remote store) or
any object exposing the same attributes (an ORM instance, a schema).

Uniqueness:
----------
Two variants are the same when their (name, image_url) pair is equal.
Identifier, price, stock and position do not take part. The first
occurrence in input order wins; later copies are dropped.

    [S/a.png, M/b.png, S/a.png, S/None, S/None]
        -> [S/a.png, M/b.png, S/None]

Ordering:
--------
- sort_variants_by_name: stable, case- and accent-insensitive
- sort_variants_by_rank: ascending position, unranked last
- compute_ranks: contiguous zero-based ranks from an ordered id list

==============================================================================
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Mapping
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple


# Module logger
logger = logging.getLogger(__name__)

VariantKey = Callable[[Any], Hashable]


def field_value(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute from an object."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


# =============================================================================
# KEYS
# =============================================================================

def variant_key(variant: Any) -> Tuple[str, Optional[str]]:
    """
    Identity key of a variant within one product: (name, image_url).

    A missing name counts as "". A missing image stays None, so two
    image-less variants with the same name share a key.
    """
    return (field_value(variant, "name") or "", field_value(variant, "image_url"))


def store_variant_key(variant: Any) -> Tuple[Optional[str], str, Optional[str]]:
    """Identity key across the whole store: (product_id, name, image_url)."""
    return (field_value(variant, "product_id"),) + variant_key(variant)


# =============================================================================
# DE-DUPLICATION
# =============================================================================

def deduplicate_variants(variants: Iterable[Any], key: VariantKey = variant_key) -> List[Any]:
    """
    Collapse variants sharing a key, keeping the first occurrence.

    Args:
        variants: Variant records in store order
        key: Identity function (defaults to name + image_url)

    Returns:
        New list of the surviving records, input order preserved
    """
    seen = set()
    unique = []

    for variant in variants:
        identity = key(variant)
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(variant)

    return unique


def find_duplicate_variants(variants: Iterable[Any], key: VariantKey = variant_key) -> List[Any]:
    """
    Return the records deduplicate_variants would drop.

    Together with deduplicate_variants this partitions the input.
    """
    seen = set()
    duplicates = []

    for variant in variants:
        identity = key(variant)
        if identity in seen:
            duplicates.append(variant)
        else:
            seen.add(identity)

    return duplicates


# =============================================================================
# ORDERING
# =============================================================================

def _collation_key(name: Optional[str]) -> str:
    # NFKD splits accented letters into base letter + combining mark
    decomposed = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def sort_variants_by_name(variants: Iterable[Any]) -> List[Any]:
    """
    Sort variants by display name, ignoring case and accents.

    Python's sort is stable, so equal names keep their relative order.

    Example:
        >>> sort_variants_by_name([{"name": "b"}, {"name": "A"}])
        [{'name': 'A'}, {'name': 'b'}]
    """
    return sorted(variants, key=lambda variant: _collation_key(field_value(variant, "name")))


def sort_variants_by_rank(variants: Iterable[Any]) -> List[Any]:
    """Sort by ascending position; variants without one go last, in input order."""
    def rank(variant: Any) -> Tuple[int, int]:
        position = field_value(variant, "position")
        if position is None:
            return (1, 0)
        return (0, position)

    return sorted(variants, key=rank)


def compute_ranks(ordered_ids: Sequence[str]) -> Dict[str, int]:
    """
    Map each id to its zero-based index.

    Raises:
        ValueError: if an id appears more than once
    """
    ranks: Dict[str, int] = {}
    for index, variant_id in enumerate(ordered_ids):
        if variant_id in ranks:
            raise ValueError(f"Duplicate variant id in ordering: {variant_id}")
        ranks[variant_id] = index
    return ranks
