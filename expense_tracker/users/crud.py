from typing import Optional

from sqlalchemy.orm import Session

from expense_tracker.security.passwords import hash_password
from expense_tracker.users.models import User
from expense_tracker.users import schemas as user_schema


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def email_exists(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
    query = db.query(User).filter(User.email == email.strip().lower())
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def create_user(db: Session, user: user_schema.SignupSchema) -> User:
    new_user = User(
        name=user.name.strip(),
        email=user.email.strip().lower(),
        hashed_password=hash_password(user.password),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


def update_user_profile(db: Session, user: User, updated: user_schema.ProfileUpdateSchema) -> User:
    if updated.name is not None:
        user.name = updated.name
    if updated.email is not None:
        user.email = updated.email

    db.commit()
    db.refresh(user)
    return user
