"""Application errors rendered as ``{"error": message}`` JSON responses."""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class InvalidCredentialsError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class RateLimitError(AppError):
    status_code = 429


class UpstreamError(AppError):
    status_code = 500
