import enum
from sqlalchemy import Column, String, Date, DateTime, Enum, CheckConstraint, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from kinauth.db.base import Base


class Gender(str, enum.Enum):
    male = "male"
    female = "female"
    other = "other"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("email IS NOT NULL OR phone IS NOT NULL", name="users_email_or_phone"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(20), unique=True, nullable=True, doc="E.164 format")
    password_hash = Column(String(255), nullable=True)
    name = Column(String(120), nullable=True)
    gender = Column(Enum(Gender, name="gender", create_type=True), nullable=True)
    birth_date = Column(Date, nullable=True)
    avatar_url = Column(String(2048), nullable=True)
    country_code = Column(String(5), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan")
    memberships = relationship("FamilyMember", back_populates="user")
    owned_families = relationship("Family", back_populates="owner")
