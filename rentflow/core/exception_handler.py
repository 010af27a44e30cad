import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import RentFlowError, PersistenceError

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(RentFlowError)
    async def rentflow_exception_handler(request: Request, exc: RentFlowError):
        return JSONResponse(content={"detail": exc.message}, status_code=exc.status_code)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            content={"detail": PersistenceError.default_message},
            status_code=PersistenceError.status_code,
        )
