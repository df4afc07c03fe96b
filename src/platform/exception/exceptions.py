"""
Raised errors with an HTTP status attached.

Classified check-in failures (not found, already checked in, ...) are return
values, not exceptions. What is raised here is either a programming/input
error at an entity boundary or a reason the request cannot be served at all.
`@Logger.io` logs `CustomBaseError` without a traceback.
"""


class CustomBaseError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    """Invariant broken by input, e.g. an illegal booking transition."""

    status_code = 400


class ForbiddenError(CustomBaseError):
    status_code = 403


class NotFoundError(CustomBaseError):
    status_code = 404


class InfrastructureError(CustomBaseError):
    """Persistence layer unreachable, timed out or failed mid-statement. Retryable."""

    status_code = 503
