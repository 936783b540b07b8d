"""Base exception for domain errors surfaced over HTTP."""

from http import HTTPStatus


class AppError(Exception):
    """
    Domain error carrying the HTTP status it maps to.

    Subclasses set ``status_code`` and, optionally, ``error`` (the short title
    placed in the error envelope). The exception message becomes the
    envelope's ``message``.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    error: str = ""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def title(self) -> str:
        return self.error or HTTPStatus(self.status_code).phrase
