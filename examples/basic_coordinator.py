"""
basic_coordinator.py — Minimal requestmap example.

Two consumers ask for the same user at once; one fetch runs and both see the
result. A later revalidation pushes fresh data to everyone still subscribed.

Usage:
    python examples/basic_coordinator.py
"""

import asyncio

from requestmap import InMemoryRequestCache, RequestCoordinator

calls = 0


async def load_user() -> dict:
    global calls
    calls += 1
    await asyncio.sleep(0.05)
    return {"id": 1, "name": "ada", "fetch": calls}


def printer(label: str):
    def observer(error, value=None, stale=None) -> None:
        if error is not None:
            print(f"[{label}] error: {error!r}")
        else:
            print(f"[{label}] value={value} stale={bool(stale)}")

    return observer


async def main() -> None:
    coordinator = RequestCoordinator(ttl_s=5.0, cache=InMemoryRequestCache())

    stop_a = coordinator.register("user:1", printer("a"), load_user)
    stop_b = coordinator.register("user:1", printer("b"), load_user)
    await coordinator.drain()

    await coordinator.invalidate_matching(r"^user:")
    stop_a()
    stop_b()
    print(f"fetches: {calls}")


if __name__ == "__main__":
    asyncio.run(main())
