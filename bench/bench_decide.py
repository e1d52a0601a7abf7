import argparse
import statistics
import time

from policyx import Authorizer, Policy, PolicyRegistry


class Doc:
    pass


def gen_policy(n: int) -> type:
    """Policy class with *n* declarative rules and one predicate."""
    attrs = {
        "allow_anyone_to": tuple(f"action_{i}" for i in range(n)),
        "can_edit": lambda self: self.user is not None,
    }
    return type("DocPolicy", (Policy,), attrs)


def run(size: int, iters: int):
    registry = PolicyRegistry()
    registry.register(gen_policy(size))
    authz = Authorizer(registry)
    subject = Doc()
    lat = []
    for i in range(iters):
        action = "edit" if i % 2 else f"action_{i % size}"
        t0 = time.perf_counter()
        authz.decide("u", action, subject)
        lat.append((time.perf_counter() - t0) * 1_000_000.0)
    return {
        "p50_us": statistics.median(lat),
        "avg_us": sum(lat) / len(lat),
        "max_us": max(lat),
    }


def main() -> None:
    ap = argparse.ArgumentParser(description="policyx decision latency")
    ap.add_argument("--sizes", type=int, nargs="+", default=[10, 100, 1000])
    ap.add_argument("--iters", type=int, default=10000)
    args = ap.parse_args()
    for size in args.sizes:
        res = run(size, args.iters)
        print(f"rules={size:>5}  " + "  ".join(f"{k}={v:.2f}" for k, v in res.items()))


if __name__ == "__main__":
    main()
