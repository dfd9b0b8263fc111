#!/usr/bin/env python3
"""HTTP calls example.

Fetches a list of objects, then the first object by id. The aiohttp
session travels to every task through global arguments, and the loading
marker is printed while requests are in flight.

Requires the examples extra:
    pip install -e ".[examples]"

Usage:
    python examples/core_only/http_calls.py
"""

import asyncio
import json

import aiohttp

from taskresolver import Resolver, Task, is_error, is_loading

BASE_URL = "https://api.restful-api.dev"


async def fetch_objects(deps, session: aiohttp.ClientSession):
    async with session.get(f"{BASE_URL}/objects") as response:
        response.raise_for_status()
        return await response.json()


async def fetch_first_object(deps, session: aiohttp.ClientSession):
    objects = deps["fetch_objects"]
    if is_error(objects):
        raise objects.error
    if not objects.data:
        raise LookupError("No objects found")

    first_id = objects.data[0]["id"]
    async with session.get(f"{BASE_URL}/objects", params={"id": first_id}) as response:
        response.raise_for_status()
        data = await response.json()
    if not isinstance(data, list) or not data:
        raise ValueError("Invalid response")
    return data[0]


async def main():
    resolver = (
        Resolver()
        .register(Task(id="fetch_objects", fn=fetch_objects))
        .register(Task(id="fetch_first_object", fn=fetch_first_object), ["fetch_objects"])
    )

    timeout = aiohttp.ClientTimeout(total=10)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with resolver.resolve(global_args=session, with_loading_state=True) as stream:
            async for value in stream:
                if is_loading(value):
                    print("Loading...")
                    continue
                first = value.tasks["fetch_first_object"]
                if is_error(first):
                    print(f"Error: {first.error!r}")
                else:
                    print("Result:", json.dumps(first.data, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
