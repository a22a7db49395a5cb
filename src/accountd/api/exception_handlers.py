"""Central error formatting.

Learn: Routes and dependencies never build error responses themselves.
They raise (AccountdError subclasses, or whatever FastAPI/SQLAlchemy
raise on their behalf) and these handlers render a JSON:API error
document with the matching status code:

- AccountdError           → its own status/title/detail
- RequestValidationError  → 400, one error object per problem
- SQLAlchemyError         → 500 DbError (details logged, not returned)
- OSError                 → 500 DbError (driver could not reach the store)
- Starlette HTTPException → its status (unknown route, wrong method, ...)
- anything else           → 500, logged with its traceback
"""

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from accountd.errors import AccountdError, BadRequestError, DbError
from accountd.schemas.jsonapi import (
    ErrorDocument,
    ErrorObject,
    ErrorSource,
    JsonApiResponse,
)

logger = structlog.get_logger()


def _render(status_code: int, errors: list[ErrorObject], headers=None) -> JsonApiResponse:
    doc = ErrorDocument(errors=errors)
    return JsonApiResponse(
        status_code=status_code,
        content=doc.model_dump(exclude_none=True),
        headers=headers,
    )


def _source(loc: tuple) -> ErrorSource | None:
    if not loc:
        return None
    where, *path = loc
    if where == "body":
        return ErrorSource(pointer="/" + "/".join(str(p) for p in path))
    if path:
        return ErrorSource(parameter=str(path[0]))
    return None


async def handle_accountd_error(request: Request, exc: AccountdError) -> JsonApiResponse:
    error = ErrorObject(status=str(exc.status_code), title=exc.title, detail=exc.detail)
    return _render(exc.status_code, [error], headers=exc.headers)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JsonApiResponse:
    errors = [
        ErrorObject(
            status=str(BadRequestError.status_code),
            title=BadRequestError.title,
            detail=err.get("msg"),
            source=_source(tuple(err.get("loc", ()))),
        )
        for err in exc.errors()
    ] or [ErrorObject(status="400", title=BadRequestError.title)]
    return _render(BadRequestError.status_code, errors)


async def handle_db_error(request: Request, exc: SQLAlchemyError) -> JsonApiResponse:
    logger.error("db.error", path=request.url.path, error=str(exc))
    return await handle_accountd_error(request, DbError("Database operation failed"))


async def handle_store_unreachable(request: Request, exc: OSError) -> JsonApiResponse:
    # Drivers raise socket errors on connect without an SQLAlchemy wrapper.
    logger.error("db.unreachable", path=request.url.path, error=repr(exc))
    return await handle_accountd_error(request, DbError("Database operation failed"))


async def handle_unexpected_error(request: Request, exc: Exception) -> JsonApiResponse:
    logger.exception("unhandled.error", path=request.url.path)
    error = ErrorObject(status="500", title=AccountdError.title)
    return _render(500, [error])


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JsonApiResponse:
    title = HTTPStatus(exc.status_code).phrase
    detail = exc.detail if isinstance(exc.detail, str) else title
    error = ErrorObject(status=str(exc.status_code), title=title, detail=detail)
    return _render(exc.status_code, [error], headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccountdError, handle_accountd_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_db_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(OSError, handle_store_unreachable)
    # Registered on Exception, Starlette runs this from its outermost error
    # middleware: the response is rendered, then the error is re-raised.
    app.add_exception_handler(Exception, handle_unexpected_error)
