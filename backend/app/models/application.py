from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base


class ApplicationRow(Base):
    __tablename__ = "applications"

    id = Column(String(32), primary_key=True)
    seq = Column(Integer, nullable=False, unique=True, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(String(64), ForeignKey("jobs.id"), nullable=False)
    status = Column(String(50), nullable=False)
    applied_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("UserRow", back_populates="applications")
    job = relationship("JobRow", back_populates="applications")
