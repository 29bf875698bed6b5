"""Grouping queries over a user's expenses.

Date bucketing runs in the database first. Rows whose stored dates the
database cannot read drop out of that grouping, so when the native query fails
or comes back empty the same range is bucketed here from the raw rows instead.
"""
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy import String, cast, extract, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.categories.models import Category
from expense_tracker.expenses.models import Expense
from expense_tracker.utils.formatting import iso_date_key, month_label


def _raw_dates(db: Session, user_id: int, start, end):
    # stored text, so values the database cannot parse still reach iso_date_key
    return db.query(Expense.id, cast(Expense.date, String), Expense.amount).filter(
        *expense_scope(user_id, start, end)
    )


def expense_scope(
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    category_id: Optional[int] = None,
) -> list:
    clauses = [Expense.created_by == user_id]
    if start is not None:
        clauses.append(Expense.date >= start)
    if end is not None:
        clauses.append(Expense.date <= end)
    if category_id is not None:
        clauses.append(Expense.category_id == category_id)
    return clauses


# =========================
# Totals
# =========================
def summary_stats(
    db: Session,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Dict[str, float]:
    row = (
        db.query(
            func.coalesce(func.sum(Expense.amount), 0).label("total"),
            func.count(Expense.id).label("count"),
            func.coalesce(func.avg(Expense.amount), 0).label("average"),
        )
        .filter(*expense_scope(user_id, start, end))
        .one()
    )
    return {
        "totalAmount": float(row.total or 0),
        "totalExpenses": int(row.count or 0),
        "averageAmount": float(row.average or 0),
    }


def category_totals(
    db: Session,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[dict]:
    """Amount per category name, largest first."""
    total = func.sum(Expense.amount).label("value")
    rows = (
        db.query(Category.name.label("name"), total)
        .join(Category, Category.id == Expense.category_id)
        .filter(*expense_scope(user_id, start, end))
        .group_by(Category.name)
        .order_by(total.desc(), Category.name)
        .all()
    )
    return [{"name": row.name, "value": float(row.value or 0)} for row in rows]


# =========================
# Daily buckets
# =========================
def daily_totals(
    db: Session,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[dict]:
    """``[{"date": "YYYY-MM-DD", "amount": ...}]`` in ascending date order."""
    year = extract("year", Expense.date)
    month = extract("month", Expense.date)
    day = extract("day", Expense.date)

    try:
        rows = (
            db.query(
                year.label("year"),
                month.label("month"),
                day.label("day"),
                func.sum(Expense.amount).label("amount"),
            )
            .filter(*expense_scope(user_id, start, end))
            .group_by(year, month, day)
            .order_by(year, month, day)
            .all()
        )
    except SQLAlchemyError as exc:
        logger.warning(f"Daily grouping failed, bucketing in Python instead: {exc}")
        db.rollback()
        return daily_totals_simple(db, user_id, start, end)

    result = [
        {
            "date": f"{int(row.year):04d}-{int(row.month):02d}-{int(row.day):02d}",
            "amount": float(row.amount or 0),
        }
        for row in rows
        if row.year is not None and row.month is not None and row.day is not None
    ]
    if not result:
        return daily_totals_simple(db, user_id, start, end)
    return result


def daily_totals_simple(
    db: Session,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[dict]:
    buckets: Dict[str, float] = defaultdict(float)
    for expense_id, value, amount in _raw_dates(db, user_id, start, end):
        key = iso_date_key(value)
        if key is None:
            logger.debug(f"Skipping expense {expense_id} with unreadable date {value!r}")
            continue
        buckets[key] += amount

    return [{"date": key, "amount": buckets[key]} for key in sorted(buckets)]


# =========================
# Monthly buckets
# =========================
def monthly_totals(
    db: Session,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[dict]:
    """``[{"month": "M/YYYY", "amount": ...}]`` in calendar order."""
    year = extract("year", Expense.date)
    month = extract("month", Expense.date)

    try:
        rows = (
            db.query(year.label("year"), month.label("month"), func.sum(Expense.amount).label("amount"))
            .filter(*expense_scope(user_id, start, end))
            .group_by(year, month)
            .order_by(year, month)
            .all()
        )
    except SQLAlchemyError as exc:
        logger.warning(f"Monthly grouping failed, bucketing in Python instead: {exc}")
        db.rollback()
        return monthly_totals_simple(db, user_id, start, end)

    result = [
        {"month": month_label(int(row.month), int(row.year)), "amount": float(row.amount or 0)}
        for row in rows
        if row.year is not None and row.month is not None
    ]
    if not result:
        return monthly_totals_simple(db, user_id, start, end)
    return result


def monthly_totals_simple(
    db: Session,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[dict]:
    buckets: Dict[tuple, float] = defaultdict(float)
    for expense_id, value, amount in _raw_dates(db, user_id, start, end):
        key = iso_date_key(value)
        if key is None:
            logger.debug(f"Skipping expense {expense_id} with unreadable date {value!r}")
            continue
        buckets[(int(key[:4]), int(key[5:7]))] += amount

    return [
        {"month": month_label(month, year), "amount": buckets[(year, month)]}
        for year, month in sorted(buckets)
    ]
