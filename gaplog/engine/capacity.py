"""Daily capacity computation and load tracking."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from ..models.task import DailyCapacity, TaskStub
from ..utils.datetime_utils import get_days_between, time_to_minutes

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TimeBlock:
    """A recurring blocked interval such as work or a meal."""

    start: str
    end: str
    title: Optional[str] = None


def available_minutes(wake_time: str, sleep_time: str, blocks: Sequence[TimeBlock] = ()) -> int:
    """Free minutes between waking and sleeping, minus blocked time.

    Times are ``HH:MM``. A sleep (or block end) earlier than its start
    wraps past midnight. Overlapping blocks are counted once.
    """
    wake = time_to_minutes(wake_time)
    sleep = time_to_minutes(sleep_time)
    if wake == -1 or sleep == -1:
        return 0

    if sleep < wake:
        sleep += MINUTES_PER_DAY
    total = sleep - wake

    intervals = []
    for block in blocks:
        start = time_to_minutes(block.start)
        end = time_to_minutes(block.end)
        if start == -1 or end == -1:
            continue
        if end < start:
            end += MINUTES_PER_DAY
        intervals.append([start, end])

    intervals.sort()

    merged: List[List[int]] = []
    for start, end in intervals:
        if not merged or merged[-1][1] < start:
            merged.append([start, end])
        else:
            merged[-1][1] = max(merged[-1][1], end)

    blocked = sum(end - start for start, end in merged)
    return max(0, total - blocked)


def expand_capacity_plan(
    start_date: date,
    end_date: date,
    weekdays: List[int],
    minutes: int,
) -> List[DailyCapacity]:
    """One capacity record per selected weekday in the inclusive range."""
    return [
        DailyCapacity(date=day, available_minutes=minutes)
        for day in get_days_between(start_date, end_date, weekdays)
    ]


def capacity_map(capacities: Iterable[DailyCapacity]) -> Dict[date, int]:
    """Map dates to available minutes; later records win."""
    return {c.date: c.available_minutes or 0 for c in capacities}


@dataclass
class DayLoad:
    """Scheduled load against one day's capacity."""

    day: date
    capacity_minutes: int
    used_minutes: float

    @property
    def remaining_minutes(self) -> float:
        return max(0, self.capacity_minutes - self.used_minutes)

    @property
    def overflow_minutes(self) -> float:
        return max(0, self.used_minutes - self.capacity_minutes)

    @property
    def is_overflow(self) -> bool:
        return self.used_minutes > self.capacity_minutes

    @property
    def usage_percent(self) -> int:
        return int(self.used_minutes / max(self.capacity_minutes, 1) * 100 + 0.5)


def day_load(tasks: Iterable[TaskStub], day: date, capacity_minutes: int) -> DayLoad:
    """Sum the estimates of tasks scheduled on ``day``."""
    used = sum(task.estimate for task in tasks if task.scheduled_date == day)
    return DayLoad(day=day, capacity_minutes=capacity_minutes, used_minutes=used)
