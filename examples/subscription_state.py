"""
subscription_state.py — Track loading/data/error for one key.

Usage:
    python examples/subscription_state.py
"""

import asyncio

from requestmap import RequestCoordinator, RequestSubscription


async def load_report() -> str:
    await asyncio.sleep(0.05)
    return "report ready"


async def main() -> None:
    coordinator = RequestCoordinator()

    async with RequestSubscription(coordinator, "report:daily", load_report) as sub:
        print(f"loading={sub.loading}")
        data = await sub.wait()
        print(f"loading={sub.loading} data={data!r} error={sub.error!r}")


if __name__ == "__main__":
    asyncio.run(main())
