"""Tests for the greedy day-by-day allocator."""

from collections import defaultdict
from datetime import timedelta

import pytest

from gaplog.engine.allocator import Allocator, allocate_tasks
from gaplog.engine.capacity import capacity_map
from gaplog.engine.ordering import sort_tasks
from gaplog.evaluation.generator import DataGenerator


@pytest.fixture
def allocator(config):
    return Allocator(config)


def day(start, offset):
    return start + timedelta(days=offset)


def test_oversized_task_overflows_first_day(allocator, make_task, start_date, uniform_capacity):
    big = make_task(500, task_id='big')

    result = allocator.allocate([big], uniform_capacity, start_date)

    assert result.assignments == {'big': start_date}
    assert result.daily_usage[start_date] == 500
    assert result.overflow_dates == [start_date]


def test_overflowed_day_takes_nothing_more(allocator, make_task, start_date, uniform_capacity):
    tasks = [make_task(500, task_id='big'), make_task(30, task_id='small')]

    result = allocator.allocate(tasks, uniform_capacity, start_date)

    assert result.assignments['big'] == start_date
    assert result.assignments['small'] == day(start_date, 1)


def test_second_task_rolls_to_next_day_with_capacity(allocator, make_task, start_date):
    capacity = {start_date: 100, day(start_date, 2): 100}
    tasks = [make_task(60, task_id='first'), make_task(60, task_id='second')]

    result = allocator.allocate(tasks, capacity, start_date)

    assert result.assignments == {'first': start_date, 'second': day(start_date, 2)}
    assert result.daily_usage == {start_date: 60, day(start_date, 2): 60}


def test_tasks_share_a_day_while_they_fit(allocator, make_task, start_date, uniform_capacity):
    tasks = [make_task(40), make_task(30), make_task(30), make_task(1)]

    result = allocator.allocate(tasks, uniform_capacity, start_date)

    assert list(result.assignments.values()) == [start_date] * 3 + [day(start_date, 1)]
    assert result.daily_usage[start_date] == 100


def test_smaller_later_task_backfills_earlier_day(allocator, make_task, start_date, uniform_capacity):
    tasks = [make_task(70, task_id='a'), make_task(50, task_id='b'), make_task(30, task_id='c')]

    result = allocator.allocate(tasks, uniform_capacity, start_date)

    assert result.assignments == {'a': start_date, 'b': day(start_date, 1), 'c': start_date}


def test_overflow_only_claims_untouched_day(allocator, make_task, start_date, uniform_capacity):
    tasks = [make_task(30, task_id='small'), make_task(500, task_id='big'), make_task(10, task_id='tiny')]

    result = allocator.allocate(tasks, uniform_capacity, start_date)

    assert result.assignments == {'small': start_date, 'big': day(start_date, 1), 'tiny': start_date}
    assert result.daily_usage[day(start_date, 1)] == 500


def test_days_without_capacity_are_never_used(allocator, make_task, start_date):
    capacity = {day(start_date, 3): 120}
    tasks = [make_task(10), make_task(500), make_task(60)]

    result = allocator.allocate(tasks, capacity, start_date)

    assert set(result.assignments.values()) <= {day(start_date, 3)}


def test_explicit_zero_capacity_is_skipped(allocator, make_task, start_date):
    capacity = {start_date: 0, day(start_date, 1): 50}

    result = allocator.allocate([make_task(500, task_id='big')], capacity, start_date)

    assert result.assignments == {'big': day(start_date, 1)}


def test_horizon_is_thirty_days(allocator, make_task, start_date):
    inside = {day(start_date, 29): 60}
    outside = {day(start_date, 30): 60}

    assert allocator.allocate([make_task(10, task_id='t')], inside, start_date).assignments == {
        't': day(start_date, 29)
    }
    assert allocator.allocate([make_task(10, task_id='t')], outside, start_date).unassigned == ['t']


def test_unschedulable_tasks_are_reported(allocator, make_task, start_date):
    capacity = {start_date: 60}
    tasks = [make_task(60, task_id='fits'), make_task(30, task_id='late'), make_task(5, task_id='later')]

    result = allocator.allocate(tasks, capacity, start_date)

    assert result.assignments == {'fits': start_date}
    assert result.unassigned == ['late', 'later']
    assert result.assigned_count == 1
    assert result.trace.summary_stats['tasks_unassigned'] == 2


def test_missing_estimate_counts_as_zero(allocator, make_task, start_date):
    capacity = {day(start_date, 1): 30}

    result = allocator.allocate([make_task(None, task_id='unsized')], capacity, start_date)

    assert result.assignments == {'unsized': day(start_date, 1)}
    assert result.daily_usage[day(start_date, 1)] == 0


def test_input_order_is_not_recomputed(allocator, make_task, start_date):
    later_due = make_task(60, due=day(start_date, 10), task_id='later_due')
    sooner_due = make_task(60, due=day(start_date, 1), task_id='sooner_due')
    capacity = {start_date: 60, day(start_date, 1): 60}

    result = allocator.allocate([later_due, sooner_due], capacity, start_date)

    assert result.assignments == {'later_due': start_date, 'sooner_due': day(start_date, 1)}


def test_inputs_are_not_mutated(allocator, make_task, start_date, uniform_capacity):
    tasks = [make_task(500), make_task(60)]
    tasks_before = list(tasks)
    capacity_before = dict(uniform_capacity)

    allocator.allocate(tasks, uniform_capacity, start_date)

    assert tasks == tasks_before
    assert uniform_capacity == capacity_before


def test_allocation_is_deterministic(allocator, start_date):
    generator = DataGenerator(seed=7)
    tasks = sort_tasks(generator.generate_backlog(40, start_date))
    capacity = capacity_map(generator.generate_capacities(start_date))

    first = allocator.allocate(tasks, capacity, start_date)
    second = allocator.allocate(tasks, capacity, start_date)

    assert first.assignments == second.assignments
    assert first.unassigned == second.unassigned


@pytest.mark.parametrize("seed", [1, 2, 3, 42])
def test_capacity_respected_and_nothing_split(allocator, start_date, seed):
    generator = DataGenerator(seed=seed)
    tasks = sort_tasks(generator.generate_backlog(60, start_date))
    capacity = capacity_map(generator.generate_capacities(start_date))

    result = allocator.allocate(tasks, capacity, start_date)

    # Each task placed at most once, or reported unassigned
    assert len(result.assignments) + len(result.unassigned) == len(tasks)
    assert not set(result.assignments) & set(result.unassigned)

    estimates = {task.id: task.estimate for task in tasks}
    load = defaultdict(float)
    for task_id, assigned in result.assignments.items():
        load[assigned] += estimates[task_id]
        assert capacity.get(assigned, 0) > 0

    overflowed = set(result.overflow_dates)
    for assigned, used in load.items():
        if assigned not in overflowed:
            assert used <= capacity[assigned]
    assert dict(load) == pytest.approx(result.daily_usage)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_overflow_day_holds_single_oversized_task_first(allocator, start_date, seed):
    generator = DataGenerator(seed=seed)
    tasks = sort_tasks(generator.generate_backlog(60, start_date))
    capacity = capacity_map(generator.generate_capacities(start_date))

    result = allocator.allocate(tasks, capacity, start_date)

    assert len(result.overflow_dates) == len(set(result.overflow_dates))
    overflow_decisions = [d for d in result.trace.decisions if d.constraint_applied == 'overflow']
    for decision in overflow_decisions:
        assert decision.estimate_minutes > capacity[decision.assigned_date]


def test_trace_describes_decisions(allocator, make_task, start_date):
    capacity = {start_date: 100}
    tasks = [make_task(500, task_id='big'), make_task(20, task_id='left')]

    trace = allocator.allocate(tasks, capacity, start_date).trace

    assert [d.constraint_applied for d in trace.decisions] == ['overflow', 'capacity_exhausted']
    assert trace.summary_stats['overflow_assignments'] == 1
    assert trace.to_dict()['daily_usage'] == {start_date.isoformat(): 500}
    assert "left -> unassigned" in trace.to_human_readable()


def test_horizon_from_config(make_task, start_date):
    allocator = Allocator({'allocation': {'horizon_days': 3}})
    capacity = {day(start_date, 3): 60}

    assert allocator.allocate([make_task(10)], capacity, start_date).assigned_count == 0


def test_allocate_tasks_helper(make_task, start_date):
    result = allocate_tasks([make_task(10, task_id='t')], {start_date: 10}, start_date)

    assert result.assignments == {'t': start_date}
