from fastapi import APIRouter, Depends

from cinebook.api.deps import get_current_user
from cinebook.booking.membership import discount_rate, next_tier
from cinebook.models.user import User, MembershipTier
from cinebook.schemas.user import User as UserSchema, MembershipInfo

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("/", response_model=UserSchema)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user


@router.get("/membership", response_model=MembershipInfo)
def get_membership(current_user: User = Depends(get_current_user)):
    """Return the user's tier, discount and progress towards the next tier."""
    tier = current_user.membership_tier
    upcoming = None if tier == MembershipTier.PREMIUM else next_tier(current_user.membership_points)
    return MembershipInfo(
        tier=tier,
        points=current_user.membership_points,
        discount_percent=int(discount_rate(tier) * 100),
        next_tier=upcoming[0] if upcoming else None,
        points_to_next_tier=upcoming[1] if upcoming else None,
    )
