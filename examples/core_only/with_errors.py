#!/usr/bin/env python3
"""Error isolation example.

B fails; C depends on A and B and decides for itself what a failed
producer means. The resolution still completes, with has_errors set.

Usage:
    python examples/core_only/with_errors.py
"""

import asyncio

from taskresolver import Resolver, Task, is_error, is_success


async def failing(deps, global_args):
    raise RuntimeError("Error in B")


def combine(deps, global_args):
    a, b = deps["A"], deps["B"]
    if is_success(a) and is_success(b):
        return a.data + b.data
    if is_error(b):
        # Recover with A alone
        return a.data
    raise RuntimeError("Error in A and B")


async def main():
    resolver = (
        Resolver()
        .register(Task(id="A", fn=lambda deps, g: 1))
        .register(Task(id="B", fn=failing))
        .register(Task(id="C", fn=combine), ["A", "B"])
    )

    result = await resolver.run()

    print(f"has_errors: {result.has_errors}")
    for task_id, error in result.errors.items():
        print(f"  {task_id} failed: {error!r}")
    print(f"C: {result.tasks['C']}")


if __name__ == "__main__":
    asyncio.run(main())
