"""Typed failures raised by the workflow and translated to HTTP errors in app.py."""
from typing import Optional


class MatcherError(Exception):
    """Base class for every user-visible failure."""
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---- input validation -----------------------------------------------------
class InputValidationError(MatcherError):
    http_status = 400


class UnansweredQuestionsError(InputValidationError):
    def __init__(self, remaining: int):
        super().__init__(f"Please answer all questions ({remaining} remaining)")
        self.remaining = remaining


class UnsupportedFileTypeError(MatcherError):
    http_status = 415


class FileExtractionError(MatcherError):
    http_status = 422


# ---- external text-generation service --------------------------------------
class ExternalServiceError(MatcherError):
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ExternalServiceError):
    http_status = 429

    def __init__(self, message: str = "Rate limit reached for the text-generation service. Please wait a moment and try again."):
        super().__init__(message, status_code=429)


class ResponseParseError(ExternalServiceError):
    pass


class QuizValidationError(ResponseParseError):
    pass


class ConfigurationError(MatcherError):
    http_status = 500


# ---- persistence / lookup --------------------------------------------------
class ReportNotFoundError(MatcherError):
    http_status = 404

    def __init__(self, message: str = "Report not found"):
        super().__init__(message)


class SessionNotFoundError(MatcherError):
    http_status = 404

    def __init__(self, message: str = "Session not found"):
        super().__init__(message)


class PersistenceError(MatcherError):
    http_status = 500
