"""Monotonic sequence claims backed by the store."""

from __future__ import annotations

import logging

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dearblueno.models.sequence import POST_NUMBER_SEQUENCE, SequenceCounter

logger = logging.getLogger(__name__)


def _increment(db: Session, name: str) -> int:
    result = db.execute(
        update(SequenceCounter)
        .where(SequenceCounter.name == name)
        .values(value=SequenceCounter.value + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def claim_next(db: Session, name: str) -> int:
    """Reserve and return the next value of the named sequence.

    The increment is a single UPDATE, so the row lock it takes serializes
    concurrent claimers until the surrounding transaction ends. The claim is
    part of that transaction: if the caller rolls back, the value is released
    and handed out again by the next claim.
    """
    if _increment(db, name) == 0:
        try:
            with db.begin_nested():
                db.execute(insert(SequenceCounter).values(name=name, value=0))
        except IntegrityError:
            logger.debug("Sequence %s was created by a concurrent writer", name)
        _increment(db, name)

    value: int = db.execute(
        select(SequenceCounter.value).where(SequenceCounter.name == name)
    ).scalar_one()
    return value


def claim_next_post_number(db: Session) -> int:
    """Reserve the next public post number."""
    return claim_next(db, POST_NUMBER_SEQUENCE)
