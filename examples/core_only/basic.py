#!/usr/bin/env python3
"""Basic resolution example.

This demonstrates a small graph mixing plain values, coroutines and an
async generator, with two independent branches running concurrently.

Usage:
    python examples/core_only/basic.py
"""

import asyncio

from taskresolver import Resolver, Task, is_success


async def ticker(deps, global_args):
    # Only the first item is used; the generator is closed afterwards
    n = 5
    while True:
        await asyncio.sleep(1)
        yield n
        n += 1


async def delayed_sum(deps, global_args):
    await asyncio.sleep(2)
    return deps["A"].data + deps["C"].data


def add(deps, global_args):
    print("C")
    if is_success(deps["A"]) and is_success(deps["B"]):
        return deps["A"].data + deps["B"].data
    raise ValueError("Error in A or B")


async def main():
    resolver = (
        Resolver()
        .register(Task(id="A", fn=lambda deps, g: 1))
        .register(Task(id="B", fn=lambda deps, g: 2))
        .register(Task(id="C", fn=add), ["A", "B"])
        .register(Task(id="D", fn=delayed_sum), ["A", "C"])
        .register(Task(id="E", fn=ticker))
    )

    print("Waves:")
    for i, wave in enumerate(resolver.execution_waves(), start=1):
        print(f"  {i}: {wave}")
    print()

    result = await resolver.run(
        on_task_start=lambda tid: print(f"  Starting: {tid}"),
        on_task_complete=lambda tid, r: print(f"  Completed: {tid} -> {r}"),
    )

    print()
    print(result)
    for task_id, task_result in result.tasks.items():
        print(f"  {task_id}: {task_result}")


if __name__ == "__main__":
    asyncio.run(main())
