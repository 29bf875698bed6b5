from fastapi import APIRouter, Depends, Response, status
from loguru import logger
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.exceptions import AppError, AuthenticationError, DuplicateError
from expense_tracker.responses import envelope
from expense_tracker.security.cookies import clear_auth_cookie, set_auth_cookie
from expense_tracker.security.passwords import verify_password
from expense_tracker.security.tokens import create_access_token
from expense_tracker.users import crud as user_crud, schemas
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

auth_router = APIRouter()
user_router = APIRouter()


def profile_payload(user: User) -> dict:
    return {"user": schemas.UserDisplaySchema.model_validate(user).model_dump()}


# ================= AUTH =================
@auth_router.post("/signup", status_code=status.HTTP_201_CREATED)
def sign_up(user: schemas.SignupSchema, response: Response, db: Session = Depends(get_db)):
    if user_crud.email_exists(db, user.email):
        raise DuplicateError("email", "User with this email already exists")

    new_user = user_crud.create_user(db, user)
    token = create_access_token(new_user.id, new_user.email)
    set_auth_cookie(response, token)

    logger.info(f"User registered: {new_user.email}")
    return envelope("User registered successfully")


@auth_router.post("/login")
def login(credentials: schemas.LoginSchema, response: Response, db: Session = Depends(get_db)):
    if not credentials.email or not credentials.password:
        raise AppError("Email and password are required")

    user = user_crud.get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Authentication denied for email: {credentials.email.strip().lower()}")
        raise AuthenticationError("Invalid email or password")

    token = create_access_token(user.id, user.email)
    set_auth_cookie(response, token)

    logger.info(f"User authenticated: {user.email}")
    return envelope("Login successful")


@auth_router.post("/logout")
def logout(response: Response):
    clear_auth_cookie(response)
    return envelope("Logged out successfully")


@auth_router.get("/profile")
def auth_profile(current_user: User = Depends(get_current_user)):
    return envelope("Profile retrieved successfully", profile_payload(current_user))


# ================= USER =================
@user_router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user)):
    return envelope("Profile retrieved successfully", profile_payload(current_user))


@user_router.put("/profile")
def update_profile(
    updated: schemas.ProfileUpdateSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if updated.email and user_crud.email_exists(db, updated.email, exclude_user_id=current_user.id):
        raise DuplicateError("email", "Email is already in use")

    user = user_crud.update_user_profile(db, current_user, updated)
    logger.info(f"Profile updated for user {user.id}")
    return envelope("Profile updated successfully", profile_payload(user))
