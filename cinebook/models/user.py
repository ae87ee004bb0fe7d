import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Integer, func, Enum as SAEnum
from cinebook.db.session import Base


class MembershipTier(str, enum.Enum):
    BASIC = "BASIC"
    SILVER = "SILVER"
    GOLD = "GOLD"
    DIAMOND = "DIAMOND"
    PREMIUM = "PREMIUM"  # assigned manually, never derived from points


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False)  # user, admin
    membership_points = Column(Integer, default=0, nullable=False)
    membership_tier = Column(
        SAEnum(MembershipTier, native_enum=False),
        default=MembershipTier.BASIC,
        nullable=False,
    )
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
