"""Pytest configuration and fixtures."""

import pytest

from taskresolver import Resolver, Task, is_success
from taskresolver.core.config import ENV_MAX_ITERATIONS, ENV_WITH_LOADING_STATE


def add_producers(*ids):
    """Build a task fn summing the data of the given producers."""

    def fn(deps, global_args):
        if all(is_success(deps[i]) for i in ids):
            return sum(deps[i].data for i in ids)
        raise ValueError(f"Error in {' or '.join(ids)}")

    return fn


@pytest.fixture
def sum_of():
    """Factory for task fns summing the data of their producers."""
    return add_producers


@pytest.fixture
def abc_resolver():
    """A -> 1, B -> 2, C = A + B."""
    return (
        Resolver()
        .register(Task(id="A", fn=lambda deps, g: 1))
        .register(Task(id="B", fn=lambda deps, g: 2))
        .register(Task(id="C", fn=add_producers("A", "B")), ["A", "B"])
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove taskresolver variables from the environment."""
    for name in (
        ENV_WITH_LOADING_STATE,
        ENV_MAX_ITERATIONS,
        "TASKRESOLVER_LOG_LEVEL",
        "TASKRESOLVER_LOG_FORMAT",
        "TASKRESOLVER_LOG_FILE",
    ):
        # setenv records the original state for undo
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
