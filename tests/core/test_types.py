"""Tests for result types and discriminators."""

import pytest

from taskresolver.core.types import (
    LOADING,
    Failure,
    LoadingState,
    ResolutionResult,
    Success,
    has_no_errors,
    is_error,
    is_loading,
    is_success,
)


class TestDiscriminators:
    """Tests for is_success / is_error / is_loading / has_no_errors."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(Success(1), True), (Failure(ValueError("Error")), False)],
    )
    def test_is_success(self, value, expected):
        """is_success is true only for data."""
        assert is_success(value) is expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(Success(1), False), (Failure(ValueError("Error")), True)],
    )
    def test_is_error(self, value, expected):
        """is_error is true only for errors."""
        assert is_error(value) is expected

    def test_success_with_none_data_is_success(self):
        """None is valid task data."""
        assert is_success(Success(None)) is True
        assert is_error(Success(None)) is False

    @pytest.mark.parametrize(
        ("tasks", "expected"),
        [
            ({"A": Success(1)}, True),
            ({"A": Failure(ValueError("Error"))}, False),
            ({"A": Success(1), "B": Success(2)}, True),
            ({"A": Success(1), "B": Failure(ValueError("Error"))}, False),
            ({}, True),
        ],
    )
    def test_has_no_errors(self, tasks, expected):
        """has_no_errors aggregates is_success."""
        assert has_no_errors(tasks) is expected

    def test_is_loading(self):
        """Only the loading marker is loading."""
        assert is_loading(LOADING) is True
        assert is_loading(LoadingState(loading=False)) is False
        assert is_loading(ResolutionResult()) is False
        assert is_loading({"loading": True}) is False


class TestResolutionResult:
    """Tests for ResolutionResult."""

    def test_from_tasks_sets_has_errors(self):
        """has_errors is derived from the task results."""
        ok = ResolutionResult.from_tasks({"A": Success(1)})
        failed = ResolutionResult.from_tasks({"A": Success(1), "B": Failure(ValueError("boom"))})

        assert ok.has_errors is False
        assert failed.has_errors is True

    def test_empty(self):
        """Empty result has no tasks and no errors."""
        result = ResolutionResult.from_tasks({})
        assert dict(result.tasks) == {}
        assert result.has_errors is False
        assert result.global_args is None

    def test_tasks_are_read_only(self):
        """The task mapping cannot be mutated."""
        source = {"A": Success(1)}
        result = ResolutionResult.from_tasks(source)

        with pytest.raises(TypeError):
            result.tasks["B"] = Success(2)  # type: ignore[index]

        source["B"] = Success(2)
        assert "B" not in result.tasks

    def test_lookup(self):
        """Results are reachable by id."""
        result = ResolutionResult.from_tasks({"A": Success(1)})
        assert result["A"] == Success(1)
        assert result.get("A") == Success(1)
        assert result.get("missing") is None

    def test_errors(self):
        """errors lists only failed tasks."""
        error = ValueError("boom")
        result = ResolutionResult.from_tasks({"A": Success(1), "B": Failure(error)})
        assert result.errors == {"B": error}

    def test_to_dict(self):
        """to_dict renders data and error text."""
        result = ResolutionResult.from_tasks(
            {"A": Success(1), "B": Failure(ValueError("boom"))},
            global_args={"token": "x"},
        )

        assert result.to_dict() == {
            "global_args": {"token": "x"},
            "tasks": {"A": {"data": 1}, "B": {"error": "ValueError: boom"}},
            "has_errors": True,
        }

    def test_repr_counts(self):
        """repr summarizes task outcomes."""
        result = ResolutionResult.from_tasks({"A": Success(1), "B": Failure(ValueError("boom"))})
        assert "ok=1" in repr(result)
        assert "failed=1" in repr(result)
