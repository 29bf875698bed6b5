"""Monthly breakdown of a user's spending."""
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Tuple

from sqlalchemy.orm import Session, sessionmaker

from expense_tracker.expenses import aggregations
from expense_tracker.expenses import service as expense_service
from expense_tracker.expenses.formatters import expenses_to_csv
from expense_tracker.expenses.models import Expense
from expense_tracker.utils.formatting import month_date_range


def get_monthly_summary(db: Session, user_id: int, month: int, year: int) -> dict:
    start, end = month_date_range(month, year)
    return aggregations.summary_stats(db, user_id, start, end)


def get_monthly_expenses(
    db: Session,
    user_id: int,
    month: int,
    year: int,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Expense], dict]:
    start, end = month_date_range(month, year)
    query = expense_service.newest_first(expense_service.base_query(db, user_id, start, end))
    return expense_service.paginate(query, page, limit)


def get_monthly_category_distribution(db: Session, user_id: int, month: int, year: int) -> List[dict]:
    start, end = month_date_range(month, year)
    return aggregations.category_totals(db, user_id, start, end)


def get_daily_breakdown(db: Session, user_id: int, month: int, year: int) -> List[dict]:
    start, end = month_date_range(month, year)
    return aggregations.daily_totals(db, user_id, start, end)


def _in_own_session(session_factory: sessionmaker, work: Callable[[Session], object]):
    with session_factory() as db:
        return work(db)


def get_monthly_breakdown(
    session_factory: sessionmaker,
    user_id: int,
    month: int,
    year: int,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, object]:
    """Run the four monthly queries side by side and join the results.

    Sessions are not thread-safe, so every query gets its own.
    """
    jobs = {
        "summary": lambda db: get_monthly_summary(db, user_id, month, year),
        "expenses": lambda db: get_monthly_expenses(db, user_id, month, year, page, limit),
        "categoryDistribution": lambda db: get_monthly_category_distribution(db, user_id, month, year),
        "dailyBreakdown": lambda db: get_daily_breakdown(db, user_id, month, year),
    }
    with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
        futures = {key: pool.submit(_in_own_session, session_factory, job) for key, job in jobs.items()}
        results = {key: future.result() for key, future in futures.items()}

    expenses, pagination = results["expenses"]
    results["expenses"] = expenses
    results["pagination"] = pagination
    return results


def get_monthly_expenses_for_export(db: Session, user_id: int, month: int, year: int) -> List[Expense]:
    start, end = month_date_range(month, year)
    return expense_service.newest_first(expense_service.base_query(db, user_id, start, end)).all()


def export_monthly_csv(db: Session, user_id: int, month: int, year: int) -> str:
    return expenses_to_csv(get_monthly_expenses_for_export(db, user_id, month, year))
