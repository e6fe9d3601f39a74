import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from timebank.api.routes import (
    coverage,
    dashboard,
    earned_requests,
    me,
    schedule,
    staff,
    submissions,
    used_requests,
)
from timebank.core.config import settings
from timebank.core.errors import InvalidTransition, NotFoundError, ScopeViolation, ValidationFailure
from timebank.db.database import engine, init_db
from timebank.db.row_store import verify_schema

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    verify_schema(engine)
    init_db()
    logger.info("TimeBank API started (%s)", settings.ENV)
    yield


app = FastAPI(title="TimeBank API", version="0.1.0", lifespan=lifespan)

for module in (me, dashboard, earned_requests, used_requests, submissions, staff, schedule, coverage):
    app.include_router(module.router, prefix="/api/v1")


@app.exception_handler(NotFoundError)
def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidTransition)
def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(ValidationFailure)
def validation_failure_handler(request: Request, exc: ValidationFailure):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ScopeViolation)
def scope_violation_handler(request: Request, exc: ScopeViolation):
    logger.warning("Scope violation on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "ok"}
