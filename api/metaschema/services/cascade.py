"""
Override cascade: pick the single most specific override row for a scope.

Rows are selected, never merged. The winning row's flags replace the catalog
defaults wholesale; less specific rows for the same target are ignored even
for flags the winner leaves at False.
"""

from enum import IntEnum
from typing import Callable, Dict, Hashable, Iterable, Optional, TypeVar

Row = TypeVar("Row")


class ScopeTier(IntEnum):
    """Scope tiers in increasing specificity."""

    SYSTEM = 0
    TENANT = 1
    BRAND = 2
    CATEGORY = 3


def row_tier(brand_id: Optional[int], category_id: Optional[int]) -> Optional[ScopeTier]:
    """Tier of a tenant-scoped override row; None for a category row without a brand."""
    if category_id is not None:
        return ScopeTier.CATEGORY if brand_id is not None else None
    if brand_id is not None:
        return ScopeTier.BRAND
    return ScopeTier.TENANT


def applicable_tier(
    row_brand_id: Optional[int],
    row_category_id: Optional[int],
    brand_id: Optional[int],
    category_id: Optional[int],
) -> Optional[ScopeTier]:
    """Tier of a row if it applies to the requested scope, else None.

    Category rows only apply when both brand and category are requested and match.
    """
    tier = row_tier(row_brand_id, row_category_id)
    if tier is None:
        return None
    if tier == ScopeTier.TENANT:
        return tier
    if tier == ScopeTier.BRAND:
        return tier if brand_id is not None and row_brand_id == brand_id else None
    if brand_id is None or category_id is None:
        return None
    if row_brand_id == brand_id and row_category_id == category_id:
        return tier
    return None


def select_most_specific(
    rows: Iterable[Row],
    target_of: Callable[[Row], Hashable],
    brand_id: Optional[int],
    category_id: Optional[int],
) -> Dict[Hashable, Row]:
    """Map each target (field or option id) to its highest-tier applicable row.

    Works on any row carrying brand_id/category_id attributes, so field and
    option cascades share the same precedence logic.
    """
    winners: Dict[Hashable, Row] = {}
    winner_tiers: Dict[Hashable, ScopeTier] = {}
    for row in rows:
        tier = applicable_tier(row.brand_id, row.category_id, brand_id, category_id)
        if tier is None:
            continue
        target = target_of(row)
        current = winner_tiers.get(target)
        if current is None or tier > current:
            winners[target] = row
            winner_tiers[target] = tier
    return winners
