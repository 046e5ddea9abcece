from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime
from models.base import Base


class Option(Base):
    """
    Generic string key/value storage.

    Purpose:
    - Durable storage of one import status record per site
    - Storage of the imported date range marker per site

    Design:
    - option_name is the primary key (prefix + site id)
    - option_value is an opaque string (JSON for status records)
    """
    __tablename__ = "options"

    option_name = Column(String(191), primary_key=True)
    option_value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
