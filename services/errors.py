"""
services/errors.py
------------------
Business-rule failures returned inside result envelopes.
"""


class ServiceError(Exception):
    """Base class for business-rule failures."""


class NotFoundError(ServiceError):
    """The requested record does not exist."""


class ConflictError(ServiceError):
    """The operation conflicts with the current state (record in use, already open, ...)."""


class AuthenticationError(ServiceError):
    """Bad credentials, or an expired/unknown session or token."""


class SelfCheckError(ServiceError):
    """One or more database self-checks failed; `results` holds every check that ran."""

    def __init__(self, message: str, results: list):
        super().__init__(message)
        self.results = results
