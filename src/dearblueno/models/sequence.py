# src/dearblueno/models/sequence.py
"""System-level bookkeeping models."""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from dearblueno.db.session import Base

POST_NUMBER_SEQUENCE = "post_number"


class SequenceCounter(Base):
    """Named monotonic counter; each increment claims exactly one value."""

    __tablename__ = "sequence_counter"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
