from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from expense_tracker.expenses import aggregations, formatters
from expense_tracker.expenses import service as expense_service
from expense_tracker.expenses.models import Expense
from expense_tracker.utils.formatting import month_date_range, shift_month


def _percent_change(current: float, previous: float) -> float:
    if not previous:
        return 0
    return round((current - previous) / previous * 100, 2)


def get_dashboard_stats(db: Session, user_id: int, today: Optional[date] = None) -> dict:
    today = today or date.today()
    overall = aggregations.summary_stats(db, user_id)

    this_start, this_end = month_date_range(today.month, today.year)
    last_month, last_year = shift_month(today.month, today.year, -1)
    last_start, last_end = month_date_range(last_month, last_year)

    current = aggregations.summary_stats(db, user_id, this_start, this_end)["totalAmount"]
    previous = aggregations.summary_stats(db, user_id, last_start, last_end)["totalAmount"]

    categories_used = (
        db.query(func.count(func.distinct(Expense.category_id)))
        .filter(Expense.created_by == user_id)
        .scalar()
    )

    return {
        "totalSpent": overall["totalAmount"],
        "totalExpenses": overall["totalExpenses"],
        "averageExpense": round(overall["averageAmount"], 2),
        "currentMonthSpent": current,
        "previousMonthSpent": previous,
        "monthlyChange": _percent_change(current, previous),
        "categoriesUsed": categories_used or 0,
    }


def get_recent_expenses(db: Session, user_id: int, limit: int = 5) -> List[Expense]:
    return expense_service.newest_first(expense_service.base_query(db, user_id)).limit(limit).all()


def get_expense_distribution(db: Session, user_id: int) -> List[dict]:
    return formatters.format_category_distribution(aggregations.category_totals(db, user_id))


def get_monthly_expenses_data(
    db: Session,
    user_id: int,
    months: int = 6,
    today: Optional[date] = None,
) -> List[dict]:
    """Totals for the last ``months`` calendar months, the current one included."""
    today = today or date.today()
    first_month, first_year = shift_month(today.month, today.year, -(months - 1))
    start = datetime(first_year, first_month, 1)
    end = month_date_range(today.month, today.year)[1]

    rows = aggregations.monthly_totals(db, user_id, start, end)
    return [{"date": row["month"], "amount": row["amount"]} for row in rows]


def get_dashboard_data(db: Session, user_id: int, limit: int = 5, months: int = 6) -> dict:
    return {
        "stats": get_dashboard_stats(db, user_id),
        "recentExpenses": formatters.format_recent_expenses(get_recent_expenses(db, user_id, limit)),
        "expenseDistribution": get_expense_distribution(db, user_id),
        "monthlyExpensesData": get_monthly_expenses_data(db, user_id, months),
    }
