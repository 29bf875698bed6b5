import math
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy.orm import Query, Session, joinedload

from expense_tracker.categories import service as category_service
from expense_tracker.exceptions import NotFoundError
from expense_tracker.expenses import aggregations, formatters, models, schemas
from expense_tracker.utils.formatting import end_of_day, month_date_range, to_datetime

DateBounds = Tuple[Optional[datetime], Optional[datetime]]


# =========================
# Helper: filters and paging
# =========================
def resolve_date_bounds(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    month: Optional[str] = None,
    today: Optional[date] = None,
) -> DateBounds:
    """Turn request filters into an inclusive datetime range.

    ``month`` refers to the current year; a full start/end range wins over it.
    """
    start, end = None, None
    if month:
        year = (today or date.today()).year
        start, end = month_date_range(int(month), year)
    if start_date and end_date:
        start, end = to_datetime(start_date), end_of_day(end_date)
    return start, end


def base_query(db: Session, user_id: int, start=None, end=None, category_id=None) -> Query:
    return (
        db.query(models.Expense)
        .options(joinedload(models.Expense.category))
        .filter(*aggregations.expense_scope(user_id, start, end, category_id))
    )


def newest_first(query: Query) -> Query:
    # id breaks ties so pages never overlap
    return query.order_by(
        models.Expense.date.desc(),
        models.Expense.created_at.desc(),
        models.Expense.id.desc(),
    )


def paginate(query: Query, page: int, limit: int) -> Tuple[List[models.Expense], dict]:
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit),
    }
    return items, pagination


# =========================
# List / Get
# =========================
def list_expenses(
    db: Session,
    user_id: int,
    filters: schemas.ExpenseFilters,
) -> Tuple[List[models.Expense], dict]:
    start, end = resolve_date_bounds(filters.start_date, filters.end_date, filters.month)
    query = newest_first(base_query(db, user_id, start, end, filters.category))
    return paginate(query, filters.page, filters.limit)


def get_expense(db: Session, expense_id: int, user_id: int) -> models.Expense:
    expense = base_query(db, user_id).filter(models.Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("Expense not found or not authorized")
    return expense


def _require_category(db: Session, category_id: int, user_id: int) -> None:
    if category_service.get_visible_category(db, category_id, user_id) is None:
        raise NotFoundError("Category not found")


# =========================
# Create / Update / Delete
# =========================
def create_expense(db: Session, expense: schemas.ExpenseCreate, user_id: int) -> models.Expense:
    _require_category(db, expense.category, user_id)

    new_expense = models.Expense(
        title=expense.title,
        amount=expense.amount,
        category_id=expense.category,
        date=datetime.combine(expense.date, time.min),
        created_by=user_id,
    )
    db.add(new_expense)
    db.commit()
    db.refresh(new_expense)

    logger.info(f"Expense {new_expense.id} created by user {user_id}")
    return new_expense


def update_expense(
    db: Session,
    expense_id: int,
    expense_data: schemas.ExpenseUpdate,
    user_id: int,
) -> models.Expense:
    expense = get_expense(db, expense_id, user_id)
    data = {k: v for k, v in expense_data.model_dump(exclude_unset=True).items() if v is not None}

    if "category" in data:
        _require_category(db, data["category"], user_id)
        expense.category_id = data["category"]

    if "title" in data:
        expense.title = data["title"]

    if "amount" in data:
        expense.amount = data["amount"]

    if "date" in data:
        expense.date = datetime.combine(data["date"], time.min)

    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: int, user_id: int) -> None:
    expense = get_expense(db, expense_id, user_id)
    db.delete(expense)
    db.commit()
    logger.info(f"Expense {expense_id} deleted by user {user_id}")


# =========================
# Statistics and charts
# =========================
def get_expense_stats(db: Session, user_id: int, date_range: schemas.DateRange) -> dict:
    start, end = resolve_date_bounds(date_range.start_date, date_range.end_date)
    return aggregations.summary_stats(db, user_id, start, end)


def get_chart_data(
    db: Session,
    user_id: int,
    date_range: schemas.DateRange,
    today: Optional[date] = None,
) -> dict:
    """Daily totals and category split, over the last 30 days unless a range is given."""
    start, end = resolve_date_bounds(date_range.start_date, date_range.end_date)
    if start is None and end is None:
        start = datetime.combine((today or date.today()) - timedelta(days=30), time.min)

    daily = aggregations.daily_totals(db, user_id, start, end)
    distribution = aggregations.category_totals(db, user_id, start, end)
    return formatters.format_chart_data(daily, distribution)


# =========================
# Export
# =========================
def get_expenses_for_export(
    db: Session,
    user_id: int,
    filters: schemas.ExpenseFilters,
) -> List[models.Expense]:
    start, end = resolve_date_bounds(filters.start_date, filters.end_date, filters.month)
    return newest_first(base_query(db, user_id, start, end, filters.category)).all()


def export_expenses_csv(db: Session, user_id: int, filters: schemas.ExpenseFilters) -> str:
    return formatters.expenses_to_csv(get_expenses_for_export(db, user_id, filters))
