# src/loopfeed/services/counters.py
"""Atomic counter updates for denormalized integer columns."""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, case, update
from sqlalchemy.orm import InstrumentedAttribute, Session


def adjust_counter(
    db: Session,
    column: InstrumentedAttribute[int],
    where: ColumnElement[bool],
    delta: int,
) -> None:
    """Add ``delta`` to ``column`` in the database, never going below zero.

    The arithmetic happens in the UPDATE statement itself so concurrent
    requests cannot lose each other's increments.
    """
    if delta == 0:
        return
    new_value: Any
    if delta > 0:
        new_value = column + delta
    else:
        new_value = case((column > -delta, column + delta), else_=0)
    stmt = (
        update(column.class_)
        .where(where)
        .values({column.key: new_value})
        .execution_options(synchronize_session="fetch")
    )
    db.execute(stmt)
