"""
Custom exception classes
"""
from fastapi import HTTPException


class NotAuthenticatedError(HTTPException):
    """Raised when a page needs a signed-in user"""
    def __init__(self, login_url: str = "/login"):
        super().__init__(
            status_code=303,
            detail="Sign in required",
            headers={"Location": login_url},
        )


class ForbiddenError(HTTPException):
    """Raised when the signed-in user's role cannot use a page"""
    def __init__(self):
        super().__init__(
            status_code=403,
            detail="You don't have permission to access this page"
        )


class CsrfError(HTTPException):
    """Raised when a form post carries no CSRF token or the wrong one"""
    def __init__(self):
        super().__init__(status_code=403, detail="Invalid CSRF token")


class FlatFileError(Exception):
    """
    Flat file lookup failure. `code` is one of the class constants and maps
    onto the HTTP status of the download endpoints.
    """
    NOT_FOUND = "NOT_FOUND"
    EXPIRED = "EXPIRED"
    NOT_FLAT_FILE = "NOT_FLAT_FILE"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    LOCATION_MISMATCH = "LOCATION_MISMATCH"

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code
        self.message = message or code


class NotifyError(Exception):
    """Raised when GOV.UK Notify rejects a request or cannot be reached"""
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
