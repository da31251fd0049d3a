from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


class CompanyRow(Base):
    __tablename__ = "companies"

    id = Column(String(64), primary_key=True)
    # Monotonic insertion counter; ids are opaque so listings order by this.
    seq = Column(Integer, nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    website = Column(String(255), nullable=True)
    linkedin_url = Column(String(255), nullable=True)
    logo = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    jobs = relationship("JobRow", back_populates="company")
