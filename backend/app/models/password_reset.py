from sqlalchemy import Column, DateTime, String

from ..database import Base


class PasswordResetOtpRow(Base):
    """One pending reset code per email; a new request replaces the row."""

    __tablename__ = "password_reset_otps"

    email = Column(String(255), primary_key=True)
    code = Column(String(20), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
