from contextlib import asynccontextmanager

from fastapi import FastAPI
from planner.core.config import settings
from planner.core.database import init_db, shutdown_db
from planner.core.errors import register_exception_handlers
from planner.core.logging_setup import setup_logging
from planner.routers import health, lists, labels, tasks, subtasks, reminders, activity_logs, search


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Init DB (tables + Inbox)
    setup_logging(settings.LOG_LEVEL)
    init_db()
    yield
    shutdown_db()


app = FastAPI(
    title="Planner API",
    version="1.0.0",
    lifespan=lifespan
)

register_exception_handlers(app)

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(lists.router)
app.include_router(labels.router)
app.include_router(tasks.router)
app.include_router(subtasks.router)
app.include_router(reminders.router)
app.include_router(activity_logs.router)
app.include_router(search.router)
