from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class ApiError(Exception):
    status_code = 400

    def __init__(self, code: str, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field

    def to_body(self) -> dict:
        err = {"code": self.code, "message": self.message}
        if self.field:
            err["field"] = self.field
        return {"error": err}


class ValidationError(ApiError):
    status_code = 400


class UnauthenticatedError(ApiError):
    status_code = 401

    def __init__(self, message: str = "Authorization header is required"):
        super().__init__("UNAUTHENTICATED", message)


class UnauthorizedError(ApiError):
    status_code = 403

    def __init__(self, message: str = "Invalid credentials for this announcement"):
        super().__init__("UNAUTHORIZED", message)


class NotFoundError(ApiError):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__("NOT_FOUND", message)


class ConflictError(ApiError):
    status_code = 409


class PayloadTooLargeError(ApiError):
    status_code = 413

    def __init__(self, message: str = "File is too large"):
        super().__init__("PAYLOAD_TOO_LARGE", message)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())
