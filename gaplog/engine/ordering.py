"""Priority order the allocator expects its tasks in."""

from datetime import date
from typing import List, Sequence, Tuple

from ..models.task import TaskStub


def task_sort_key(task: TaskStub) -> Tuple:
    """Due date ascending with undated tasks last, then oldest first."""
    # Primary: due date (None sorts after every date)
    due_key = (task.due_date is None, task.due_date or date.min)

    # Secondary: created_at (FIFO)
    return (due_key, task.created_at)


def sort_tasks(tasks: Sequence[TaskStub]) -> List[TaskStub]:
    """Return a new list in allocation order."""
    return sorted(tasks, key=task_sort_key)


def is_allocation_ordered(tasks: Sequence[TaskStub]) -> bool:
    """Check that ``tasks`` already satisfy the allocation order."""
    keys = [task_sort_key(task) for task in tasks]
    return all(earlier <= later for earlier, later in zip(keys, keys[1:]))
