from __future__ import annotations

from typing import Dict, Protocol, runtime_checkable


@runtime_checkable
class MetricsSink(Protocol):
    """Receives decision counters from :class:`~policyx.core.authorizer.Authorizer`."""

    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None: ...


@runtime_checkable
class MetricsObserve(Protocol):
    """Optional extension for sinks that record durations."""

    def observe(self, name: str, value: float, labels: Dict[str, str] | None = None) -> None: ...


__all__ = ["MetricsSink", "MetricsObserve"]
