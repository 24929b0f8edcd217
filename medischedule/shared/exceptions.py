from fastapi import HTTPException, status

from medischedule.store.results import MutationResult


class CredentialsException(HTTPException):
    """Exception for invalid credentials."""
    
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundException(HTTPException):
    """Exception for resource not found."""
    
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class BadRequestException(HTTPException):
    """Exception for bad request."""
    
    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class ConflictException(HTTPException):
    """Exception for resource conflict."""
    
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class ForbiddenException(HTTPException):
    """Exception for forbidden access."""
    
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class ServiceUnavailableException(HTTPException):
    """Exception for a failed write against the document store."""
    
    def __init__(self, detail: str = "Document store unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
        )


_EXCEPTIONS_BY_KIND = {
    "validation": BadRequestException,
    "not_found": NotFoundException,
    "conflict": ConflictException,
    "forbidden": ForbiddenException,
    "store": ServiceUnavailableException,
}


def raise_for_result(result: MutationResult) -> MutationResult:
    """Raise the HTTP exception matching a failed mutation, else return it."""
    if result.ok:
        return result
    exception_class = _EXCEPTIONS_BY_KIND.get(result.kind, BadRequestException)
    raise exception_class(result.message or "Operation failed")
