"""Convention-based authorization: one small policy class per subject type."""

from __future__ import annotations

from typing import Any, Optional

from .core.authorizer import Authorizer
from .core.errors import InvalidSubject, PolicyNotFound, PolicyxError, Unauthorized
from .core.policy import Policy
from .core.registry import PolicyRegistry
from .core.rules import ActionLike, AllowRules, Rule

__version__ = "0.1.0"

# Process-wide default, filled at import time of the host's policy modules.
default_registry = PolicyRegistry()
default_authorizer = Authorizer(default_registry)

register = default_registry.register
policy_for = default_registry.policy_for


def decide(actor: Any, action: ActionLike, subject: Any, policy: Optional[Any] = None) -> bool:
    return default_authorizer.decide(actor, action, subject, policy)


def authorize(actor: Any, action: ActionLike, subject: Any, policy: Optional[Any] = None) -> None:
    default_authorizer.authorize(actor, action, subject, policy)


__all__ = [
    "AllowRules",
    "Authorizer",
    "InvalidSubject",
    "Policy",
    "PolicyNotFound",
    "PolicyRegistry",
    "PolicyxError",
    "Rule",
    "Unauthorized",
    "authorize",
    "decide",
    "default_authorizer",
    "default_registry",
    "policy_for",
    "register",
]
