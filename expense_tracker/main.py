from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

# Find .env next to the project or in the working directory
POSSIBLE_ENV_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",
    Path.cwd() / ".env",
]

for env_path in POSSIBLE_ENV_PATHS:
    if env_path.exists():
        load_dotenv(env_path)
        break

from expense_tracker.config import settings  # noqa: E402
from expense_tracker.database import SessionLocal, init_db  # noqa: E402
from expense_tracker.categories.router import router as category_router  # noqa: E402
from expense_tracker.categories.seeder import seed_default_categories  # noqa: E402
from expense_tracker.dashboard.router import router as dashboard_router  # noqa: E402
from expense_tracker.exceptions import register_exception_handlers  # noqa: E402
from expense_tracker.expenses.router import router as expense_router  # noqa: E402
from expense_tracker.reports.router import router as report_router  # noqa: E402
from expense_tracker.users.routers import auth_router, user_router  # noqa: E402

if settings.LOG_FILE:
    logger.add(settings.LOG_FILE, rotation="500 MB", level=settings.LOG_LEVEL)


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application startup ({settings.ENVIRONMENT})")
    init_db()
    with SessionLocal() as db:
        seed_default_categories(db)
    yield
    logger.info("Application shutdown")


# Create app
app = FastAPI(
    title="Expense Tracker API",
    description="An API for recording personal expenses and reporting on them.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(user_router, prefix="/api/user", tags=["User"])
app.include_router(category_router, prefix="/api/categories", tags=["Categories"])
app.include_router(expense_router, prefix="/api/expenses", tags=["Expenses"])
app.include_router(report_router, prefix="/api/monthly-breakdown", tags=["Monthly Breakdown"])
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
def root():
    return {"message": "Expense Tracker API", "version": "1.0.0", "status": "running"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
