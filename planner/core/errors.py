"""Domain errors raised by the services and their HTTP mapping."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


class PlannerError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlannerError):
    # champ obligatoire vide, heure mal formée, valeur hors domaine
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(PlannerError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidOperation(PlannerError):
    status_code = status.HTTP_409_CONFLICT


class StorageUnavailable(PlannerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PlannerError)
    def planner_error_handler(request: Request, exc: PlannerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(OperationalError)
    def storage_error_handler(request: Request, exc: OperationalError):
        logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage unavailable"},
        )
