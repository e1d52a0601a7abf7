from __future__ import annotations

from typing import Any


class PolicyxError(Exception):
    """Base class for all policyx errors."""


class InvalidSubject(PolicyxError, ValueError):
    """Raised when a policy is constructed without a subject."""

    def __init__(self, policy: str | None = None) -> None:
        self.policy = policy
        where = f" for {policy}" if policy else ""
        super().__init__(f"subject must not be None{where}")


class PolicyNotFound(PolicyxError, LookupError):
    """No policy is registered for the subject's runtime type.

    This is a configuration error, not a denial.
    """

    def __init__(self, subject_type: str) -> None:
        self.subject_type = subject_type
        super().__init__(f"no policy registered for subject type {subject_type!r}")


class Unauthorized(PolicyxError, PermissionError):
    """The actor may not perform *action* on the subject.

    Hosts are expected to map this to a 401/403 response; ``status_code``
    is a hint for that mapping.
    """

    status_code = 403

    def __init__(self, action: str, subject_type: str, actor: Any = None) -> None:
        self.action = action
        self.subject_type = subject_type
        self.actor = actor
        super().__init__(f"not allowed to {action} {subject_type}")


__all__ = ["PolicyxError", "InvalidSubject", "PolicyNotFound", "Unauthorized"]
