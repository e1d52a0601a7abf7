import builtins
import importlib
import sys
import types

import pytest


def _purge(modname: str) -> None:
    for k in list(sys.modules):
        if k == modname or k.startswith(modname + "."):
            sys.modules.pop(k, None)


@pytest.fixture(autouse=True)
def _fresh_module():
    _purge("policyx.metrics")
    yield
    _purge("policyx.metrics")


def test_prometheus_no_sdk_is_noop(monkeypatch):
    real_import = builtins.__import__

    def fake_import(name, *a, **k):
        if name == "prometheus_client":
            raise ImportError("not installed")
        return real_import(name, *a, **k)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    import policyx.metrics.prometheus as prom

    m = prom.PrometheusMetrics()
    assert m._counter is None and m._hist is None
    m.inc("policyx_decisions_total", {"decision": "allow"})
    m.observe("policyx_decision_seconds", 0.1)


def test_prometheus_with_fake_client(monkeypatch):
    class _Counter:
        def __init__(self, name, doc, labelnames=(), **kw):
            self.name = name
            self.calls = []

        class _Child:
            def __init__(self, parent, labels):
                self.parent = parent
                self.labels = labels

            def inc(self, *a, **k):
                self.parent.calls.append(("inc", dict(self.labels)))

        def labels(self, **labels):
            return self._Child(self, labels)

    class _Histogram:
        def __init__(self, name, doc, **kw):
            self.name = name
            self.values = []

        def observe(self, v):
            self.values.append(float(v))

    fake = types.ModuleType("prometheus_client")
    fake.Counter = _Counter
    fake.Histogram = _Histogram
    monkeypatch.setitem(sys.modules, "prometheus_client", fake)

    import policyx.metrics.prometheus as prom

    importlib.reload(prom)

    m = prom.PrometheusMetrics(namespace="authz")
    assert m._counter.name == "authz_decisions_total"
    assert m._hist.name == "authz_decision_seconds"

    m.inc("ignored", {"decision": "deny"})
    m.inc("ignored")
    assert m._counter.calls == [("inc", {"decision": "deny"}), ("inc", {"decision": "unknown"})]

    m.observe("ignored", 0.5, {"decision": "deny"})
    assert m._hist.values == [0.5]


def test_prometheus_real_registry_counts_authorizer_decisions():
    prometheus_client = pytest.importorskip("prometheus_client")

    from policyx import Authorizer, Policy
    from policyx.metrics.prometheus import PrometheusMetrics

    class Doc:
        pass

    class DocPolicy(Policy):
        allow_anyone_to = ("read",)

    registry = prometheus_client.CollectorRegistry()
    a = Authorizer(metrics=PrometheusMetrics(registry=registry))
    a.decide(None, "read", Doc(), DocPolicy)
    a.decide(None, "write", Doc(), DocPolicy)
    a.decide(None, "write", Doc(), DocPolicy)

    assert registry.get_sample_value("policyx_decisions_total", {"decision": "allow"}) == 1.0
    assert registry.get_sample_value("policyx_decisions_total", {"decision": "deny"}) == 2.0
    assert registry.get_sample_value("policyx_decision_seconds_count") == 3.0
