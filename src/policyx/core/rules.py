from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Union

ActionLike = Union[str, Enum]


class Rule(str, Enum):
    """Kind of a declarative allow rule."""

    ANYONE = "anyone"
    AUTHENTICATED = "authenticated"

    def grants(self, actor: Any) -> bool:
        if self is Rule.ANYONE:
            return True
        return actor is not None


def normalize_action(action: ActionLike) -> str:
    """Return the canonical action name.

    Enum members map to their string value (or their name), and a single
    trailing ``?`` is dropped so ``"update?"`` and ``"update"`` are the same
    action. Names still ending in ``?`` after that (``"update??"``) raise
    ValueError.
    """
    if isinstance(action, Enum):
        value = action.value
        name = value if isinstance(value, str) else action.name
    else:
        name = str(action)
    if name.endswith("?"):
        name = name[:-1]
    if not name:
        raise ValueError("action name must not be empty")
    if name.endswith("?"):
        raise ValueError(f"invalid action name {action!r}")
    return name


def _iter_actions(actions: Union[ActionLike, Iterable[ActionLike]]) -> Iterable[ActionLike]:
    # a bare string is one action, not a sequence of characters
    if isinstance(actions, (str, Enum)):
        return (actions,)
    return actions


class AllowRules:
    """Builder for a policy's declarative allow table.

    Calls may be chained; registering the same action twice keeps the last
    rule::

        rules = AllowRules().anyone("index", "show").users("create")
    """

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}

    def add(self, rule: Rule, *actions: ActionLike) -> "AllowRules":
        for action in actions:
            for a in _iter_actions(action):
                self._rules[normalize_action(a)] = rule
        return self

    def anyone(self, *actions: ActionLike) -> "AllowRules":
        return self.add(Rule.ANYONE, *actions)

    def users(self, *actions: ActionLike) -> "AllowRules":
        return self.add(Rule.AUTHENTICATED, *actions)

    authenticated = users

    def update(self, other: Mapping[str, Rule]) -> "AllowRules":
        self._rules.update(other)
        return self

    def freeze(self) -> Mapping[str, Rule]:
        return MappingProxyType(dict(self._rules))

    def __len__(self) -> int:
        return len(self._rules)


EMPTY_RULES: Mapping[str, Rule] = MappingProxyType({})

__all__ = ["Rule", "AllowRules", "ActionLike", "normalize_action", "EMPTY_RULES"]
