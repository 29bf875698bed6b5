from typing import Iterable, List

from expense_tracker.expenses.formatters import format_category_distribution, format_expense_set
from expense_tracker.utils.formatting import days_in_month, format_date_for_display


def format_monthly_summary(stats: dict, month: int, year: int) -> dict:
    total = stats.get("totalAmount", 0) or 0
    days = days_in_month(month, year)
    average_per_day = total / days if total > 0 else 0
    return {
        "totalSpent": total,
        "totalExpenses": stats.get("totalExpenses", 0) or 0,
        "averagePerDay": round(average_per_day, 2),
        "daysInMonth": days,
    }


def format_daily_breakdown(rows: Iterable[dict]) -> List[dict]:
    return [
        {
            "date": row["date"],
            "amount": row["amount"],
            "formattedDate": format_date_for_display(row["date"]),
        }
        for row in rows
    ]


def format_monthly_breakdown(breakdown: dict, month: int, year: int) -> dict:
    return {
        "summary": format_monthly_summary(breakdown["summary"], month, year),
        "expenses": format_expense_set(breakdown["expenses"]),
        "categoryDistribution": format_category_distribution(breakdown["categoryDistribution"]),
        "dailyBreakdown": format_daily_breakdown(breakdown["dailyBreakdown"]),
    }

