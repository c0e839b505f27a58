"""Balance tiers - coarse debt buckets that scope plans to eligible accounts"""

from enum import Enum
from typing import Dict, Tuple


class BalanceTier(str, Enum):
    UNDER_3000 = "under_3000"
    FROM_3000_TO_5000 = "3000_to_5000"
    FROM_5000_TO_10000 = "5000_to_10000"
    OVER_10000 = "over_10000"


# Half-open [min, max) ranges in cents; None = unbounded above
_TIER_RANGES: Dict[BalanceTier, Tuple[int, int | None]] = {
    BalanceTier.UNDER_3000: (0, 300_000),
    BalanceTier.FROM_3000_TO_5000: (300_000, 500_000),
    BalanceTier.FROM_5000_TO_10000: (500_000, 1_000_000),
    BalanceTier.OVER_10000: (1_000_000, None),
}


def range_for_tier(tier: BalanceTier) -> Tuple[int, int | None]:
    """
    Map a balance tier to its (min_balance_cents, max_balance_cents) range.

    The lower bound is inclusive and the upper bound exclusive, so adjacent
    tiers share a boundary value: $3,000.00 falls in 3000_to_5000, not
    under_3000. The top tier has no upper bound.
    """
    return _TIER_RANGES[tier]


def tier_for_balance(balance_cents: int) -> BalanceTier:
    """Find the tier whose range contains an account balance.

    Negative balances (credits on the account) land in the lowest tier.
    """
    for tier, (_, max_cents) in _TIER_RANGES.items():
        if max_cents is None or balance_cents < max_cents:
            return tier
    return BalanceTier.OVER_10000
