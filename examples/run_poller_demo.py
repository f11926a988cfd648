"""
Demo script for the backoff poller.

Polls a flaky action, showing backoff on failures, reset on success and a
stop/start cycle that keeps the error count.
"""

import asyncio
import random

from loguru import logger

from backoff_poller import create


async def flaky_fetch() -> list[str]:
    # Simulate I/O latency and an unreliable upstream
    await asyncio.sleep(0.01)
    if random.random() < 0.5:
        raise ConnectionError("upstream unavailable")
    return [f"post-{random.randint(1, 999)}"]


def on_posts(posts: list[str]) -> None:
    logger.info(f"📬 Received {posts}")


async def main():
    poller = create("posts", interval=200, max_interval=1600, action=flaky_fetch)
    poller.subscribe(on_posts)

    logger.info("🚀 Starting poller demo")
    poller.start(force_start=True)

    for _ in range(5):
        await asyncio.sleep(1.0)
        h = poller.health()
        logger.info(
            f"State: {h.state} | errors={h.error_count} | next delay={h.current_delay}ms | "
            f"ok={h.successes} failed={h.failures}"
        )

    logger.info("⏸️  Pausing for 1s (error count is preserved)")
    poller.stop()
    await asyncio.sleep(1.0)
    poller.start()
    await asyncio.sleep(2.0)

    poller.destroy()
    logger.info("✅ Poller demo complete")


if __name__ == "__main__":
    asyncio.run(main())
