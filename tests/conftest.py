"""
Pytest configuration and shared fixtures.
"""

from datetime import date, datetime, timedelta

import pytest

from gaplog.models.task import TaskMaster, TaskStub, WorkLog
from gaplog.utils.config import get_default_config

BASE_TIME = datetime(2026, 10, 1, 9, 0)


@pytest.fixture
def config():
    """Default configuration."""
    return get_default_config()


@pytest.fixture
def master():
    """Workbook master at 10 minutes per page."""
    return TaskMaster(id='tm_math_page', default_unit_name='page', default_unit_time=10, name='Math Workbook')


@pytest.fixture
def other_master():
    """Exercise master at 2 minutes per question."""
    return TaskMaster(id='tm_math_q', default_unit_name='question', default_unit_time=2, name='Math Exercises')


@pytest.fixture
def make_log():
    """Factory for work logs; ``age`` counts steps back from the newest."""
    counter = {'n': 0}

    def _make(
        actual=None,
        estimated=None,
        amount=1,
        difficulty=3,
        age=0,
        master_id='tm_math_page',
        log_id=None,
    ):
        counter['n'] += 1
        return WorkLog(
            id=log_id or f"log_{counter['n']}",
            master_id=master_id,
            created_at=BASE_TIME - timedelta(hours=age),
            estimated_time_minutes=estimated,
            actual_time_minutes=actual,
            difficulty_level=difficulty,
            amount=amount,
        )

    return _make


@pytest.fixture
def learning_logs(make_log):
    """Five actual logs, newest to oldest: 5, 5, 10, 20, 20 minutes per page."""
    return [
        make_log(actual=minutes, age=age, difficulty=2)
        for age, minutes in enumerate([5, 5, 10, 20, 20])
    ]


@pytest.fixture
def start_date():
    return date(2026, 10, 19)


@pytest.fixture
def make_task():
    """Factory for pending task stubs."""
    counter = {'n': 0}

    def _make(estimate, due=None, created_offset=None, task_id=None, scheduled=None):
        counter['n'] += 1
        offset = counter['n'] if created_offset is None else created_offset
        return TaskStub(
            id=task_id or f"task_{counter['n']}",
            created_at=BASE_TIME + timedelta(minutes=offset),
            estimated_time_minutes=estimate,
            due_date=due,
            scheduled_date=scheduled,
        )

    return _make


@pytest.fixture
def uniform_capacity(start_date):
    """100 minutes on each of the 30 days from the start date."""
    return {start_date + timedelta(days=i): 100 for i in range(30)}
