"""Error taxonomy for the API.

Every failure a handler or dependency can produce is one of these. They
carry an HTTP status and a title, and are rendered into JSON:API error
documents by the handlers in accountd.api.exception_handlers. Handlers
raise them and never catch them.
"""

from typing import Optional


class AccountdError(Exception):
    """Base class: an error that maps onto a single HTTP response."""

    status_code: int = 500
    title: str = "Internal Server Error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(detail or self.title)
        self.detail = detail or self.title
        self.headers = headers


class BadRequestError(AccountdError):
    """Malformed or missing input."""

    status_code = 400
    title = "Bad Request"


class UnauthorizedError(AccountdError):
    """Missing, invalid or expired credential, or a wrong password."""

    status_code = 401
    title = "Unauthorized"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AccountdError):
    """Valid credential, insufficient role."""

    status_code = 403
    title = "Forbidden"


class NotFoundError(AccountdError):
    status_code = 404
    title = "Not Found"


class DbError(AccountdError):
    """The store failed. The underlying error is logged, never returned."""

    status_code = 500
    title = "Database Error"
