"""Estimation and allocation engines."""

from .allocator import AllocationResult, Allocator, allocate_tasks
from .capacity import DayLoad, TimeBlock, available_minutes, capacity_map, day_load, expand_capacity_plan
from .carry_over import CarryOverResult, carry_over, select_carry_over_tasks
from .estimator import DurationEstimator, estimate_duration, find_master, round_minutes
from .ordering import is_allocation_ordered, sort_tasks, task_sort_key

__all__ = [
    'AllocationResult',
    'Allocator',
    'allocate_tasks',
    'DayLoad',
    'TimeBlock',
    'available_minutes',
    'capacity_map',
    'day_load',
    'expand_capacity_plan',
    'CarryOverResult',
    'carry_over',
    'select_carry_over_tasks',
    'DurationEstimator',
    'estimate_duration',
    'find_master',
    'round_minutes',
    'is_allocation_ordered',
    'sort_tasks',
    'task_sort_key',
]
