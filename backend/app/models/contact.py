from sqlalchemy import Column, DateTime, String, Text

from ..database import Base


class ContactRow(Base):
    __tablename__ = "contacts"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
