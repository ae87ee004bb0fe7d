from typing import Optional
from pydantic import BaseModel, EmailStr
from datetime import datetime

from cinebook.models.user import MembershipTier


# Shared properties
class UserBase(BaseModel):
    email: EmailStr
    full_name: str


# Properties to receive via API on creation (POST /auth/register)
class UserCreate(UserBase):
    password: str


# Properties to receive via API on admin creation (POST /auth/admin/register)
class AdminCreate(UserCreate):
    admin_secret: str


# Properties returned via API
class User(UserBase):
    id: str
    role: str
    membership_points: int
    membership_tier: MembershipTier
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: User


# Membership card (GET /me/membership)
class MembershipInfo(BaseModel):
    tier: MembershipTier
    points: int
    discount_percent: int
    next_tier: Optional[MembershipTier] = None
    points_to_next_tier: Optional[int] = None
