"""Error taxonomy shared by every route group.

Each error is an ``HTTPException`` so handlers can simply raise it; the
handlers registered in ``jobportal.main`` render all of them as
``{"message": ...}``.
"""
from fastapi import HTTPException


class InvalidArgument(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Token is not valid."):
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Access denied. Insufficient permissions."):
        super().__init__(status_code=403, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class Conflict(HTTPException):
    # Duplicate key at the storage layer; clients have always seen this as a 400
    def __init__(self, detail: str = "Duplicate record"):
        super().__init__(status_code=400, detail=detail)


class PayloadTooLarge(HTTPException):
    def __init__(self, detail: str = "File too large"):
        super().__init__(status_code=413, detail=detail)


class Internal(HTTPException):
    def __init__(self, detail: str = "Internal Server Error"):
        super().__init__(status_code=500, detail=detail)


def format_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Validation error: " + ", ".join(parts)
