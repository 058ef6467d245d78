"""Carry unfinished work over to the next day."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Mapping, Sequence

from ..models.task import TaskStub
from .allocator import AllocationResult, Allocator


@dataclass
class CarryOverResult:
    """Outcome of ending the day early."""

    carried_task_ids: List[str]
    allocation: AllocationResult

    @property
    def carried_count(self) -> int:
        return len(self.carried_task_ids)


def select_carry_over_tasks(tasks: Sequence[TaskStub], today: date) -> List[TaskStub]:
    """Pending tasks that are undated or due on or before ``today``."""
    return [task for task in tasks if task.due_date is None or task.due_date <= today]


def carry_over(
    allocator: Allocator,
    tasks: Sequence[TaskStub],
    capacity_by_date: Mapping[date, int],
    today: date,
) -> CarryOverResult:
    """Re-allocate the whole pending backlog starting tomorrow.

    ``tasks`` must already be in allocation order.
    """
    carried = select_carry_over_tasks(tasks, today)
    allocation = allocator.allocate(tasks, capacity_by_date, today + timedelta(days=1))
    return CarryOverResult(
        carried_task_ids=[task.id for task in carried],
        allocation=allocation,
    )
