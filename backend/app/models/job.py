from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


class JobRow(Base):
    __tablename__ = "jobs"

    id = Column(String(64), primary_key=True)
    seq = Column(Integer, nullable=False, unique=True, index=True)
    company_id = Column(String(64), ForeignKey("companies.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    qualifications = Column(Text, nullable=False)
    skills = Column(Text, nullable=False)  # free text, e.g. "Java, Python, SQL"
    experience_level = Column(String(20), nullable=False, index=True)  # fresher / experienced
    experience_min = Column(Integer, nullable=True)
    experience_max = Column(Integer, nullable=True)
    location = Column(String(255), nullable=False)
    job_type = Column(String(30), nullable=False)
    salary = Column(String(100), nullable=True)  # display string, e.g. "₹3.5 - 4.5 LPA"
    apply_url = Column(String(500), nullable=True)
    closing_date = Column(DateTime(timezone=True), nullable=False)
    batch_eligible = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    company = relationship("CompanyRow", back_populates="jobs")
    # Deleting a job should also remove dependent applications at ORM level.
    applications = relationship("ApplicationRow", back_populates="job", cascade="all, delete-orphan")
