from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from ..database import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    password = Column(String(255), nullable=False)  # store hashed password
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    applications = relationship("ApplicationRow", back_populates="user", cascade="all, delete-orphan")
