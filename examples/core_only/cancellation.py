#!/usr/bin/env python3
"""Cancellation example.

Starts a resolution with a slow task and closes the stream after the
loading marker. The slow task's cleanup runs once and no result is
delivered.

Usage:
    python examples/core_only/cancellation.py
"""

import asyncio

from taskresolver import Resolver, Task
from taskresolver.core.logging_config import configure_logging


async def slow(deps, global_args):
    print("  slow: started")
    try:
        await asyncio.sleep(10)
        return "done"
    finally:
        print("  slow: cleaned up")


async def main():
    configure_logging(level="DEBUG")

    resolver = Resolver().register(Task(id="slow", fn=slow))

    stream = resolver.resolve(with_loading_state=True)
    print(f"First value: {await anext(stream)}")

    await asyncio.sleep(0.5)
    await stream.aclose()

    print(f"State after close: {stream.state.value}")
    print(f"Result: {stream.result}")


if __name__ == "__main__":
    asyncio.run(main())
