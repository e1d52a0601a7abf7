from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from policyx.core.ports import MetricsSink

try:
    from prometheus_client import Counter, Histogram  # type: ignore
except Exception:  # pragma: no cover
    Counter = Histogram = None  # type: ignore

logger = logging.getLogger("policyx.metrics")


class PrometheusMetrics(MetricsSink):
    """Prometheus-based MetricsSink.

    Exposes:
      - policyx_decisions_total{decision="allow|deny"}
      - policyx_decision_seconds (Histogram)

    Instruments are created against *registry* (the default prometheus
    registry when None). Without prometheus_client installed every call is a
    no-op.
    """

    _counter: Optional[Any]
    _hist: Optional[Any]

    def __init__(self, *, namespace: str = "policyx", registry: Any = None) -> None:
        self._counter = None
        self._hist = None

        if Counter is None or Histogram is None:  # pragma: no cover
            return

        kwargs: Dict[str, Any] = {}
        if registry is not None:
            kwargs["registry"] = registry

        self._counter = Counter(
            f"{namespace}_decisions_total",
            "Total policyx decisions by outcome.",
            labelnames=("decision",),
            **kwargs,
        )
        self._hist = Histogram(
            f"{namespace}_decision_seconds",
            "policyx decision evaluation duration in seconds.",
            **kwargs,
        )

    # -- MetricsSink ------------------------------------------------------------

    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None:
        """Increment the decisions counter.

        *name* is ignored; this sink always increments ``<namespace>_decisions_total``.
        """
        if self._counter is None:
            return
        decision = (labels or {}).get("decision", "unknown")
        try:
            self._counter.labels(decision=decision).inc()  # type: ignore[call-arg]
        except Exception:  # pragma: no cover
            logger.debug("policyx: prometheus counter failed", exc_info=True)

    def observe(self, name: str, value: float, labels: Dict[str, str] | None = None) -> None:
        if self._hist is None:
            return
        try:
            self._hist.observe(float(value))
        except Exception:  # pragma: no cover
            logger.debug("policyx: prometheus histogram failed", exc_info=True)
