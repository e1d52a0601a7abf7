from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional

from .errors import InvalidSubject
from .rules import EMPTY_RULES, ActionLike, AllowRules, Rule, normalize_action

logger = logging.getLogger("policyx.policy")

PREDICATE_PREFIX = "can_"

# class attributes read at class-definition time, in class-body order
_DECLARATIONS: Dict[str, Rule] = {
    "allow_anyone_to": Rule.ANYONE,
    "allow_users_to": Rule.AUTHENTICATED,
    "allow": Rule.AUTHENTICATED,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """``CreditCard`` -> ``credit_card``, ``HTTPRequest`` -> ``http_request``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def subject_aliases(subject: Any) -> frozenset[str]:
    """Attribute names under which a policy exposes *subject*."""
    name = type(subject).__name__
    return frozenset({name.lower(), snake_case(name)})


class Policy:
    """Authorization rules for one subject type.

    A policy is built for a single (actor, subject) pair and asked whether an
    action is allowed. Rules come from two places:

    * predicate methods named ``can_<action>`` which take no arguments and
      read ``self.actor`` (or ``self.user``), ``self.subject`` or the subject's
      type-derived alias (``self.contract`` for a ``Contract``);
    * declarative allow lists given as class attributes::

          class ContractPolicy(Policy):
              allow_anyone_to = ("index", "create")
              allow_users_to = ("show",)

              def can_update(self):
                  return self.user.is_project_manager or self.contract.is_unsigned

    A predicate always takes precedence over the allow list for the same
    action. Anything else is denied.
    """

    allow_rules: ClassVar[Mapping[str, Rule]] = EMPTY_RULES

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        if "allow_rules" in cls.__dict__:
            raise TypeError(
                f"{cls.__name__} must not set allow_rules directly; "
                "use allow_anyone_to, allow_users_to, allow or rules = AllowRules()"
            )

        builder = AllowRules()
        # inherited tables first, nearest base last so it wins
        for base in reversed(cls.__mro__[1:]):
            inherited = base.__dict__.get("allow_rules")
            if inherited:
                builder.update(inherited)

        for name, value in cls.__dict__.items():
            rule = _DECLARATIONS.get(name)
            if rule is not None:
                # a method or a None placeholder named like a declaration is not one
                if value is None or callable(value) or isinstance(value, (staticmethod, classmethod, property)):
                    continue
                if not isinstance(value, (str, Enum, Iterable)):
                    raise TypeError(
                        f"{cls.__name__}.{name} must be an action name or an iterable of them, "
                        f"not {type(value).__name__}"
                    )
                builder.add(rule, value)
            elif name == "rules" and isinstance(value, AllowRules):
                builder.update(value.freeze())

        cls.allow_rules = builder.freeze()

    def __init__(self, actor: Any, subject: Any) -> None:
        if subject is None:
            raise InvalidSubject(type(self).__name__)
        self._actor = actor
        self._subject = subject
        self._aliases = subject_aliases(subject)

    # --- evaluation context --------------------------------------------------

    @property
    def actor(self) -> Any:
        return self._actor

    @property
    def user(self) -> Any:
        return self._actor

    @property
    def subject(self) -> Any:
        return self._subject

    def __getattr__(self, name: str) -> Any:
        # only reached for attributes not found normally
        aliases = self.__dict__.get("_aliases")
        if aliases is not None and name in aliases:
            return self.__dict__["_subject"]
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    # --- decisions -----------------------------------------------------------

    @classmethod
    def rule_for(cls, action: ActionLike) -> Optional[Rule]:
        return cls.allow_rules.get(normalize_action(action))

    @classmethod
    def has_predicate(cls, action: ActionLike) -> bool:
        return cls._has_predicate(normalize_action(action))

    @classmethod
    def _has_predicate(cls, name: str) -> bool:
        return callable(getattr(cls, PREDICATE_PREFIX + name, None))

    def decide(self, action: ActionLike) -> Optional[bool]:
        """Answer from the ``can_<action>`` predicate, or None if there is none.

        Exceptions raised by the predicate are not caught.
        """
        return self._decide(normalize_action(action))

    def _decide(self, name: str) -> Optional[bool]:
        # name is already normalized
        if not self._has_predicate(name):
            return None
        predicate = getattr(self, PREDICATE_PREFIX + name)
        return bool(predicate())

    def is_allowed(self, action: ActionLike) -> bool:
        name = normalize_action(action)

        verdict = self._decide(name)
        if verdict is not None:
            logger.debug("policyx: %s.%s%s -> %s", type(self).__name__, PREDICATE_PREFIX, name, verdict)
            return verdict

        rule = self.allow_rules.get(name)
        if rule is not None:
            verdict = rule.grants(self._actor)
            logger.debug("policyx: %s allow rule %s for %r -> %s", type(self).__name__, rule.value, name, verdict)
            return verdict

        logger.debug("policyx: %s has no rule for %r; denying", type(self).__name__, name)
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(actor={self._actor!r}, subject={self._subject!r})"


__all__ = ["Policy", "PREDICATE_PREFIX", "snake_case", "subject_aliases"]
