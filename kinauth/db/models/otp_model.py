import enum
from sqlalchemy import Column, String, DateTime, Enum, Index, func, text
from sqlalchemy.dialects.postgresql import UUID
from kinauth.db.base import Base


class OtpPurpose(str, enum.Enum):
    signup = "signup"
    login = "login"
    invite = "invite"


class OtpChallenge(Base):
    __tablename__ = "otp_challenges"
    __table_args__ = (
        Index("ix_otp_challenges_target_code", "target", "code", "created_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    target = Column(String(255), nullable=False)
    code = Column(String(10), nullable=False)
    purpose = Column(Enum(OtpPurpose, name="otppurpose", create_type=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    consumed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
