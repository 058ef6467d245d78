"""Synthetic history, backlog and capacity generator."""

import random
from datetime import date, datetime, timedelta
from typing import List, Tuple

from ..models.task import DailyCapacity, TaskMaster, TaskStub, WorkLog
from ..policies.hybrid import DIFFICULTY_MULTIPLIERS
from ..utils.datetime_utils import iter_days


class DataGenerator:
    """Generates deterministic work histories and backlogs for evaluation."""

    def __init__(self, seed: int = 42):
        """Initialize generator with seed for reproducibility."""
        self.seed = seed
        self.random = random.Random(seed)

    def generate_masters(self) -> List[TaskMaster]:
        """A small fixed catalog of task templates."""
        return [
            TaskMaster(id='tm_workbook', name='Math Workbook', default_unit_name='page', default_unit_time=10),
            TaskMaster(id='tm_exercises', name='Math Exercises', default_unit_name='question', default_unit_time=2),
            TaskMaster(id='tm_reading', name='Reading', default_unit_name='chapter', default_unit_time=25),
        ]

    def generate_logs(
        self,
        masters: List[TaskMaster],
        start: datetime,
        logs_per_master: int = 12,
        drift: float = 0.97,
    ) -> List[WorkLog]:
        """Generate completed work logs with a slow learning drift."""
        logs = []

        for master in masters:
            # True speed differs from the template default
            true_unit_time = master.default_unit_time * self.random.uniform(0.7, 1.4)

            for i in range(logs_per_master):
                amount = self.random.randint(1, 5)
                difficulty = self.random.randint(1, 5)
                noise = self.random.gauss(1.0, 0.1)
                actual = amount * true_unit_time * DIFFICULTY_MULTIPLIERS[difficulty] * max(noise, 0.5)

                logs.append(WorkLog(
                    id=f"{master.id}_log_{i:03d}",
                    master_id=master.id,
                    created_at=start + timedelta(days=i, hours=self.random.randint(8, 20)),
                    estimated_time_minutes=round(amount * master.default_unit_time),
                    actual_time_minutes=max(1, round(actual)),
                    difficulty_level=difficulty,
                    amount=amount,
                ))

                true_unit_time *= drift

        return logs

    def generate_backlog(self, count: int, today: date) -> List[TaskStub]:
        """Generate pending tasks, about a fifth of them undated."""
        tasks = []
        created_base = datetime.combine(today, datetime.min.time()) - timedelta(days=7)

        for i in range(count):
            if self.random.random() < 0.2:
                due_date = None
            else:
                due_date = today + timedelta(days=self.random.randint(0, 21))

            # Mostly small tasks with the occasional large one
            if self.random.random() < 0.85:
                estimate = self.random.randint(10, 120)
            else:
                estimate = self.random.randint(180, 600)

            tasks.append(TaskStub(
                id=f"task_{i:03d}",
                created_at=created_base + timedelta(minutes=self.random.randint(0, 7 * 24 * 60)),
                estimated_time_minutes=estimate,
                due_date=due_date,
            ))

        return tasks

    def generate_capacities(
        self,
        today: date,
        days: int = 30,
        weekdays: Tuple[int, ...] = (0, 1, 2, 3, 4),
    ) -> List[DailyCapacity]:
        """Generate a capacity calendar with days off outside ``weekdays``."""
        return [
            DailyCapacity(date=day, available_minutes=self.random.choice([60, 90, 120, 180, 240]))
            for day in iter_days(today, days)
            if day.weekday() in weekdays
        ]
