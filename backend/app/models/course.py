from sqlalchemy import Column, DateTime, Integer, String, Text

from ..database import Base


class CourseRow(Base):
    __tablename__ = "courses"

    id = Column(String(64), primary_key=True)
    seq = Column(Integer, nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    instructor = Column(String(255), nullable=True)
    duration = Column(String(100), nullable=True)
    level = Column(String(20), nullable=True)  # beginner / intermediate / advanced
    category = Column(String(100), nullable=False, index=True)
    image_url = Column(String(500), nullable=True)
    course_url = Column(String(500), nullable=True)
    price = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
