from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from models.base import Base


class Site(Base):
    """
    Import target registry.

    The import status manager only reads from this table: the site name for
    display and the creation date as the fallback start of an import range.
    """
    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    main_url = Column(String(2048), nullable=True)
    timezone = Column(String(64), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
