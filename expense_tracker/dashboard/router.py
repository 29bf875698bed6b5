from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from expense_tracker.dashboard import service
from expense_tracker.database import get_db
from expense_tracker.expenses import formatters
from expense_tracker.expenses.schemas import DashboardQuery
from expense_tracker.responses import envelope
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

router = APIRouter()


def dashboard_query(limit: int = 5, months: int = 6) -> DashboardQuery:
    return DashboardQuery(limit=limit, months=months)


@router.get("/")
def get_dashboard_data(
    query: DashboardQuery = Depends(dashboard_query),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = service.get_dashboard_data(db, current_user.id, query.limit, query.months)
    return envelope("Dashboard data retrieved successfully", data)


@router.get("/stats")
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope("Dashboard statistics retrieved successfully", service.get_dashboard_stats(db, current_user.id))


@router.get("/recent-expenses")
def get_recent_expenses(
    query: DashboardQuery = Depends(dashboard_query),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expenses = service.get_recent_expenses(db, current_user.id, query.limit)
    return envelope("Recent expenses retrieved successfully", formatters.format_recent_expenses(expenses))


@router.get("/distribution")
def get_expense_distribution(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope("Expense distribution retrieved successfully", service.get_expense_distribution(db, current_user.id))


@router.get("/monthly")
def get_monthly_expenses_data(
    query: DashboardQuery = Depends(dashboard_query),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = service.get_monthly_expenses_data(db, current_user.id, query.months)
    return envelope("Monthly expenses data retrieved successfully", data)
