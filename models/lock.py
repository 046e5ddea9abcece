from sqlalchemy import Column, String, BigInteger
from models.base import Base


class Lock(Base):
    """
    Named mutual-exclusion lock with a time to live.

    A row exists while the lock is held. expiry_time is a unix timestamp;
    rows past their expiry are treated as free and reclaimed on acquire.
    """
    __tablename__ = "locks"

    key = Column(String(191), primary_key=True)
    value = Column(String(255), nullable=True)  # holder token
    expiry_time = Column(BigInteger, nullable=False, index=True)
