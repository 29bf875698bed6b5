from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.categories.models import Category

DEFAULT_CATEGORIES = ["Food", "Travel", "Bills", "Shopping", "Others"]


def seed_default_categories(db: Session) -> int:
    """Insert any missing default category. Returns how many were created."""
    created = 0
    for name in DEFAULT_CATEGORIES:
        existing = (
            db.query(Category)
            .filter(Category.name == name, Category.is_default.is_(True))
            .first()
        )
        if existing:
            continue
        db.add(Category(name=name, is_default=True, created_by=None))
        created += 1
        logger.info(f"Created default category: {name}")

    db.commit()
    return created
