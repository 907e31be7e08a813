import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from task_tracker.config import settings
from task_tracker.database import engine, create_tables
from task_tracker.logging_setup import setup_logging
import task_tracker.models.tasks  # noqa: F401  registers tables on Base.metadata
from task_tracker.routers.tasks import router as tasks_router
from task_tracker.routers.users import router as users_router
from task_tracker.routers.auth import router as auth_router
from task_tracker.utils.validation import describe_validation_error

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.ERROR_LOG_FILE)
    await create_tables()
    logger.info("Task Tracker API started")

    yield

    await engine.dispose()
    logger.info("Task Tracker API stopped")


app = FastAPI(
    lifespan=lifespan,
    title="Task Tracker API",
    description="Personal tasks and subtasks with JWT authentication",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = describe_validation_error(exc.errors())
    logger.debug("%s %s rejected: %s", request.method, request.url.path, body["detail"])
    return JSONResponse(status_code=400, content=body)


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# Global exception handler to ensure CORS headers on failure
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Credentials": "true"
        }
    )


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tasks_router)

@app.get("/")
def root():
    return {"message": "Task Tracker API running"}
