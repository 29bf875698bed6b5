from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, sessionmaker

from expense_tracker.database import get_db, get_session_factory
from expense_tracker.expenses.formatters import format_category_distribution, format_expense_set
from expense_tracker.reports import formatters, schemas, service
from expense_tracker.responses import envelope
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

router = APIRouter()


@router.post("/")
def get_monthly_breakdown(
    request: schemas.MonthlyBreakdownPage,
    session_factory: sessionmaker = Depends(get_session_factory),
    current_user: User = Depends(get_current_user),
):
    breakdown = service.get_monthly_breakdown(
        session_factory,
        current_user.id,
        request.month,
        request.year,
        request.page,
        request.limit,
    )
    return envelope(
        "Monthly breakdown retrieved successfully",
        formatters.format_monthly_breakdown(breakdown, request.month, request.year),
        pagination=breakdown["pagination"],
    )


@router.post("/summary")
def get_monthly_summary(
    request: schemas.MonthlyBreakdownRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = service.get_monthly_summary(db, current_user.id, request.month, request.year)
    return envelope(
        "Monthly summary retrieved successfully",
        formatters.format_monthly_summary(stats, request.month, request.year),
    )


@router.post("/expenses")
def get_monthly_expenses(
    request: schemas.MonthlyBreakdownPage,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expenses, pagination = service.get_monthly_expenses(
        db, current_user.id, request.month, request.year, request.page, request.limit
    )
    return envelope(
        "Monthly expenses retrieved successfully",
        format_expense_set(expenses),
        pagination=pagination,
    )


@router.post("/category-distribution")
def get_monthly_category_distribution(
    request: schemas.MonthlyBreakdownRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = service.get_monthly_category_distribution(db, current_user.id, request.month, request.year)
    return envelope("Category distribution retrieved successfully", format_category_distribution(rows))


@router.post("/daily")
def get_daily_breakdown(
    request: schemas.MonthlyBreakdownRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = service.get_daily_breakdown(db, current_user.id, request.month, request.year)
    return envelope("Daily breakdown retrieved successfully", formatters.format_daily_breakdown(rows))


@router.post("/export")
def export_monthly_expenses(
    request: schemas.MonthlyBreakdownRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    content = service.export_monthly_csv(db, current_user.id, request.month, request.year)
    return envelope("Monthly expenses exported successfully", content)
