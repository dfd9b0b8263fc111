"""Task id validation.

Provides consistent validation rules for naming tasks in a resolver.
"""

from __future__ import annotations

from taskresolver.core.errors import InvalidTaskIdError

MAX_TASK_ID_LENGTH = 256


def validate_task_id(task_id: object) -> None:
    """Validate a task id.

    Rules:
    - Must be a string
    - 1-256 characters
    - No leading or trailing whitespace

    Args:
        task_id: The id to validate.

    Raises:
        InvalidTaskIdError: If the id is invalid.

    Example:
        >>> validate_task_id("fetchUser")   # OK
        >>> validate_task_id("step-1")      # OK
        >>> validate_task_id("")            # InvalidTaskIdError
        >>> validate_task_id(" padded ")    # InvalidTaskIdError
    """
    if not isinstance(task_id, str):
        raise InvalidTaskIdError(f"Task id must be a string, got {type(task_id).__name__}")

    if not task_id:
        raise InvalidTaskIdError("Task id is required")

    if len(task_id) > MAX_TASK_ID_LENGTH:
        raise InvalidTaskIdError(f"Task id must be {MAX_TASK_ID_LENGTH} characters or less")

    if task_id != task_id.strip():
        raise InvalidTaskIdError(f"Task id {task_id!r} cannot start or end with whitespace")


def is_valid_task_id(task_id: object) -> bool:
    """Check if a task id is valid without raising.

    Args:
        task_id: The id to check.

    Returns:
        True if valid, False otherwise.
    """
    if not isinstance(task_id, str) or not task_id or len(task_id) > MAX_TASK_ID_LENGTH:
        return False
    return task_id == task_id.strip()
