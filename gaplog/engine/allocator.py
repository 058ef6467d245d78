"""Greedy day-by-day task allocation engine."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..models.task import TaskStub
from ..models.trace import AllocationDecision, AllocationTrace
from ..utils.datetime_utils import iter_days

DEFAULT_HORIZON_DAYS = 30


@dataclass
class AllocationResult:
    """Proposed dates for one allocation run."""

    assignments: Dict[str, date]
    unassigned: List[str]
    daily_usage: Dict[date, float]
    overflow_dates: List[date] = field(default_factory=list)
    trace: Optional[AllocationTrace] = None

    @property
    def assigned_count(self) -> int:
        return len(self.assignments)


class Allocator:
    """Places each pending task on the earliest day with room for it.

    Tasks are visited in the order given (see ``ordering.sort_tasks``) and
    never split. A day without a capacity entry has no room. A task larger
    than a whole day's capacity claims the first untouched day it reaches
    and overflows it.
    """

    def __init__(self, config: Optional[dict] = None):
        """Initialize allocator with configuration."""
        self.config = config or {}
        self.allocation_config = self.config.get('allocation', {})
        self.horizon_days = self.allocation_config.get('horizon_days', DEFAULT_HORIZON_DAYS)

    def allocate(
        self,
        tasks: Sequence[TaskStub],
        capacity_by_date: Mapping[date, int],
        start_date: date,
    ) -> AllocationResult:
        """Assign tasks to dates within the horizon starting at ``start_date``."""
        assignments: Dict[str, date] = {}
        unassigned: List[str] = []
        overflow_dates: List[date] = []
        decisions: List[AllocationDecision] = []

        # Simulated usage, local to this run
        daily_usage: Dict[date, float] = {}

        for task in tasks:
            estimate = task.estimate
            decision = None

            for day in iter_days(start_date, self.horizon_days):
                capacity = capacity_by_date.get(day, 0) or 0
                if capacity <= 0:
                    continue

                used = daily_usage.get(day, 0)

                if estimate <= capacity - used:
                    decision = AllocationDecision(
                        task_id=task.id,
                        estimate_minutes=estimate,
                        assigned_date=day,
                        reason="Fits remaining capacity",
                    )
                elif used == 0 and estimate > capacity:
                    decision = AllocationDecision(
                        task_id=task.id,
                        estimate_minutes=estimate,
                        assigned_date=day,
                        reason=f"Exceeds daily capacity of {capacity} min, claims empty day",
                        constraint_applied="overflow",
                    )
                    overflow_dates.append(day)
                else:
                    continue

                assignments[task.id] = day
                daily_usage[day] = used + estimate
                break

            if decision is None:
                unassigned.append(task.id)
                decision = AllocationDecision(
                    task_id=task.id,
                    estimate_minutes=estimate,
                    assigned_date=None,
                    reason="No capacity available in horizon",
                    constraint_applied="capacity_exhausted",
                )

            decisions.append(decision)

        trace = AllocationTrace(
            start_date=start_date,
            horizon_days=self.horizon_days,
            decisions=decisions,
            daily_usage=dict(daily_usage),
            summary_stats=self._compute_summary_stats(tasks, assignments, daily_usage, overflow_dates),
        )

        return AllocationResult(
            assignments=assignments,
            unassigned=unassigned,
            daily_usage=daily_usage,
            overflow_dates=overflow_dates,
            trace=trace,
        )

    def _compute_summary_stats(
        self,
        tasks: Sequence[TaskStub],
        assignments: Dict[str, date],
        daily_usage: Dict[date, float],
        overflow_dates: List[date],
    ) -> Dict[str, Any]:
        """Compute summary statistics for the trace."""
        tasks_total = len(tasks)
        tasks_assigned = len(assignments)

        return {
            'tasks_total': tasks_total,
            'tasks_assigned': tasks_assigned,
            'tasks_unassigned': tasks_total - tasks_assigned,
            'overflow_assignments': len(overflow_dates),
            'total_assigned_minutes': sum(daily_usage.values()),
            'days_used': len(daily_usage),
        }


def allocate_tasks(
    tasks: Sequence[TaskStub],
    capacity_by_date: Mapping[date, int],
    start_date: date,
    config: Optional[dict] = None,
) -> AllocationResult:
    """Allocate with default settings."""
    return Allocator(config).allocate(tasks, capacity_by_date, start_date)
