"""Exceptions raised by the trust engine services.

Every failure carries a human-readable ``detail`` and the HTTP status the
API layer should answer with, so callers can tell invalid input apart from
conflicts, missing rows and blocked deletions.
"""

from __future__ import annotations


class TrustRuleViolation(Exception):
    """Raised when business constraints are violated."""

    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(TrustRuleViolation):
    """Malformed input: bad scope shape, rating out of range and similar."""

    status_code = 400


class PermissionDenied(TrustRuleViolation):
    """Caller lacks the role or scope key the operation requires."""

    status_code = 403


class NotFound(TrustRuleViolation):
    status_code = 404


class ConflictError(TrustRuleViolation):
    """Operation collides with existing state, or lost a race to another writer."""

    status_code = 409

    def __init__(self, detail: str, *, race_lost: bool = False) -> None:
        super().__init__(detail)
        self.race_lost = race_lost


class DependencyBlocked(TrustRuleViolation):
    """A scope cannot be deleted while other rows still reference it."""

    status_code = 409

    def __init__(self, detail: str, *, category: str, count: int) -> None:
        super().__init__(detail)
        self.category = category
        self.count = count


class ServiceUnavailable(TrustRuleViolation):
    status_code = 503
