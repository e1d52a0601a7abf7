from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from policyx.core.ports import MetricsSink

try:
    from opentelemetry.metrics import get_meter  # type: ignore
except Exception:  # pragma: no cover
    get_meter = None  # type: ignore

logger = logging.getLogger("policyx.metrics")


class OpenTelemetryMetrics(MetricsSink):
    """OpenTelemetry-based MetricsSink.

    Creates, on meter ``policyx.metrics``:
      - Counter: policyx_decisions_total (attribute: decision)
      - Histogram: policyx_decision_seconds (unit: s)
    """

    _counter: Optional[Any]
    _hist: Optional[Any]

    def __init__(self, meter: Any = None) -> None:
        self._counter = None
        self._hist = None

        if meter is None:
            if get_meter is None:  # pragma: no cover
                return
            meter = get_meter("policyx.metrics")

        try:
            self._counter = meter.create_counter(
                name="policyx_decisions_total",
                description="Total policyx decisions by outcome.",
            )
        except Exception:  # pragma: no cover
            logger.debug("policyx: cannot create otel counter", exc_info=True)
            self._counter = None

        create_hist = getattr(meter, "create_histogram", None)
        if create_hist is not None:
            try:
                self._hist = create_hist(
                    name="policyx_decision_seconds",
                    description="policyx decision evaluation duration in seconds.",
                    unit="s",
                )
            except Exception:  # pragma: no cover
                logger.debug("policyx: cannot create otel histogram", exc_info=True)
                self._hist = None

    # -- MetricsSink ------------------------------------------------------------

    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None:
        """Add one to the decisions counter; *name* is ignored."""
        if self._counter is None:
            return
        decision = (labels or {}).get("decision", "unknown")
        try:
            self._counter.add(1, {"decision": decision})
        except Exception:  # pragma: no cover
            logger.debug("policyx: otel counter failed", exc_info=True)

    def observe(self, name: str, value: float, labels: Dict[str, str] | None = None) -> None:
        if self._hist is None:
            return
        decision = (labels or {}).get("decision", "unknown")
        try:
            self._hist.record(float(value), {"decision": decision})
        except Exception:  # pragma: no cover
            logger.debug("policyx: otel histogram failed", exc_info=True)
