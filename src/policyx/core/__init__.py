from .authorizer import Authorizer
from .errors import InvalidSubject, PolicyNotFound, PolicyxError, Unauthorized
from .policy import Policy
from .registry import PolicyRegistry
from .rules import AllowRules, Rule

__all__ = [
    "Authorizer",
    "AllowRules",
    "InvalidSubject",
    "Policy",
    "PolicyNotFound",
    "PolicyRegistry",
    "PolicyxError",
    "Rule",
    "Unauthorized",
]
