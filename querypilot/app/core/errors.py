from typing import Any, Optional


class AppError(Exception):
    """Error carrying the HTTP status and the payload rendered to the client."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": True,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class InputError(AppError):
    def __init__(self, message: str):
        super().__init__(400, message, "BAD_REQUEST")


class PolicyViolation(AppError):
    def __init__(self, errors: list[str], message: str = "Generated SQL query is not safe"):
        super().__init__(400, message, "INVALID_SQL", {"errors": list(errors)})
        self.errors = list(errors)


class ExecutionFailure(AppError):
    def __init__(self, message: str):
        super().__init__(500, message or "Failed to process query", "QUERY_EXECUTION_ERROR")


class ConnectionFailure(AppError):
    def __init__(self, message: str):
        super().__init__(500, message, "CONNECTION_ERROR")


class GenerationFailure(AppError):
    def __init__(self, message: str):
        super().__init__(502, message, "GENERATION_ERROR")


class ConfirmationError(AppError):
    def __init__(self, message: str):
        super().__init__(409, message, "CONFIRMATION_ERROR")
