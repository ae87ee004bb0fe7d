"""Membership tiers derived from accumulated points."""
from decimal import Decimal
from typing import Optional, Tuple

from cinebook.models.user import MembershipTier

# (exclusive lower bound, tier), highest first
TIER_THRESHOLDS = (
    (1200, MembershipTier.DIAMOND),
    (600, MembershipTier.GOLD),
    (200, MembershipTier.SILVER),
)

DISCOUNT_RATES = {
    MembershipTier.BASIC: Decimal("0"),
    MembershipTier.SILVER: Decimal("0.10"),
    MembershipTier.GOLD: Decimal("0.15"),
    MembershipTier.DIAMOND: Decimal("0.25"),
    MembershipTier.PREMIUM: Decimal("1"),
}


def tier_for_points(points: int, current: Optional[MembershipTier] = None) -> MembershipTier:
    """Derive a tier from points. PREMIUM is kept as-is, never re-derived."""
    if current == MembershipTier.PREMIUM:
        return MembershipTier.PREMIUM
    for threshold, tier in TIER_THRESHOLDS:
        if points > threshold:
            return tier
    return MembershipTier.BASIC


def next_tier(points: int) -> Optional[Tuple[MembershipTier, int]]:
    """Return the next point-derived tier and the points still needed, or None at the top."""
    for threshold, tier in reversed(TIER_THRESHOLDS):
        if points <= threshold:
            return tier, threshold + 1 - points
    return None


def discount_rate(tier: MembershipTier) -> Decimal:
    return DISCOUNT_RATES[tier]
