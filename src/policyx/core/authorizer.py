from __future__ import annotations

import logging
import time
from typing import Any, Optional, Type, Union

from .errors import InvalidSubject, Unauthorized
from .policy import Policy
from .ports import MetricsSink
from .registry import PolicyFactory, PolicyRegistry, type_name
from .rules import ActionLike, normalize_action

logger = logging.getLogger("policyx.authorizer")

DECISIONS_METRIC = "policyx_decisions_total"
DURATION_METRIC = "policyx_decision_seconds"


class Authorizer:
    """Finds the policy for a subject and asks it about an action.

    ``decide`` answers yes/no; ``authorize`` raises :class:`Unauthorized` on a
    denial. Both accept an explicit ``policy`` (a :class:`Policy` subclass or
    any ``(actor, subject)`` factory) to bypass the type-name lookup, e.g. to
    judge a credit card in the context of its customer.
    """

    def __init__(
        self,
        registry: PolicyRegistry | None = None,
        *,
        metrics: MetricsSink | None = None,
    ) -> None:
        self.registry = registry if registry is not None else PolicyRegistry()
        self.metrics = metrics

    def policy(
        self,
        actor: Any,
        subject: Any,
        policy: Optional[Union[Type[Policy], PolicyFactory]] = None,
    ) -> Policy:
        """Build the policy instance that would judge *subject*."""
        if subject is None:
            raise InvalidSubject(getattr(policy, "__name__", None))
        factory = policy if policy is not None else self.registry.lookup(subject)
        return factory(actor, subject)

    def decide(
        self,
        actor: Any,
        action: ActionLike,
        subject: Any,
        policy: Optional[Union[Type[Policy], PolicyFactory]] = None,
    ) -> bool:
        start = time.perf_counter()
        instance = self.policy(actor, subject, policy)
        allowed = instance.is_allowed(action)
        elapsed = time.perf_counter() - start

        logger.debug(
            "policyx: %s %s on %s by %r -> %s",
            type(instance).__name__,
            normalize_action(action),
            type_name(subject),
            actor,
            "allow" if allowed else "deny",
        )
        self._emit_metrics(allowed, elapsed)
        return allowed

    is_allowed = decide

    def authorize(
        self,
        actor: Any,
        action: ActionLike,
        subject: Any,
        policy: Optional[Union[Type[Policy], PolicyFactory]] = None,
    ) -> None:
        """Return None if allowed, raise :class:`Unauthorized` otherwise."""
        if self.decide(actor, action, subject, policy):
            return
        name = normalize_action(action)
        logger.info("policyx: unauthorized %s on %s", name, type_name(subject))
        raise Unauthorized(name, type_name(subject), actor)

    # --- internals -----------------------------------------------------------

    def _emit_metrics(self, allowed: bool, elapsed: float) -> None:
        if self.metrics is None:
            return
        labels = {"decision": "allow" if allowed else "deny"}
        try:
            self.metrics.inc(DECISIONS_METRIC, labels)
            observe = getattr(self.metrics, "observe", None)
            if observe is not None:
                observe(DURATION_METRIC, elapsed, labels)
        except Exception:
            # the decision stands even if the sink is broken
            logger.exception("policyx: metrics sink failed")


__all__ = ["Authorizer", "DECISIONS_METRIC", "DURATION_METRIC"]
