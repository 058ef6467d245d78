"""Simple weighted-average estimation policy on a 1..3 difficulty scale."""

from collections import defaultdict
from typing import Dict, List

from ..models.task import TaskMaster, WorkLog
from ..models.trace import EstimationTrace, LogContribution
from .base import EstimationPolicy, load_multipliers

DIFFICULTY_MULTIPLIERS = {1: 0.8, 2: 1.0, 3: 1.3}


class WeightedAveragePolicy(EstimationPolicy):
    """Weighted average of raw unit times, then a difficulty factor.

    Recency weights run linearly from ``window`` down to 1. With enough
    history the factor is personal: the mean unit time at the requested
    difficulty over the mean unit time of all logs.
    """

    def __init__(self, config: dict):
        """Initialize weighted-average policy."""
        super().__init__(config)
        section = self.estimation_config.get('weighted_average', {})
        self.difficulty_multipliers = load_multipliers(section, DIFFICULTY_MULTIPLIERS)
        self.normal_difficulty = section.get('normal_difficulty', 2)
        self.window = section.get('window', 5)
        self.personal_min_logs = section.get('personal_min_logs', 5)
        self.personal_min_samples = section.get('personal_min_samples', 3)

    def predict(
        self,
        master: TaskMaster,
        amount: float,
        predicted_difficulty: int,
        logs: List[WorkLog],
        trace: EstimationTrace,
    ) -> float:
        """Predict raw minutes for the requested amount and difficulty."""
        fallback = self.fallback_unit_time(master)
        selected = self.select_logs(master.id, logs, trace)

        unit_time = fallback
        trace.phase = 'default'

        weighted_sum = 0.0
        weight_total = 0.0
        for index, log in enumerate(selected[:self.window]):
            weight = self.window - index
            observed = log.observed_minutes(fallback)
            log_amount = self.log_amount(log)
            if log_amount <= 0:
                continue
            weighted_sum += observed / log_amount * weight
            weight_total += weight
            trace.contributions.append(LogContribution(
                log_id=log.id,
                observed_minutes=observed,
                amount=log_amount,
                difficulty_level=log.difficulty_level,
                unit_time=observed / log_amount,
                weight=weight,
            ))

        if weight_total > 0:
            trace.phase = 'weighted_average'
            unit_time = weighted_sum / weight_total

        multiplier = self._personal_multiplier(selected, predicted_difficulty, fallback)
        if multiplier is None:
            multiplier = self.difficulty_multiplier(predicted_difficulty)
        else:
            trace.multiplier_source = 'personal'

        trace.average_unit_time = unit_time
        trace.multiplier = multiplier

        return amount * unit_time * multiplier

    def _personal_multiplier(self, logs: List[WorkLog], difficulty: int, fallback: float):
        """User-specific factor for ``difficulty``, or None when history is too thin."""
        if difficulty not in self.difficulty_multipliers or len(logs) < self.personal_min_logs:
            return None

        by_difficulty: Dict[int, List[float]] = defaultdict(list)
        all_unit_times = []
        for log in logs:
            unit_time = log.observed_minutes(fallback) / self.log_amount(log)
            by_difficulty[log.difficulty_level or self.normal_difficulty].append(unit_time)
            all_unit_times.append(unit_time)

        samples = by_difficulty.get(difficulty, [])
        if len(samples) < self.personal_min_samples:
            return None

        overall = sum(all_unit_times) / len(all_unit_times)
        if overall <= 0:
            return None
        return (sum(samples) / len(samples)) / overall

    def get_policy_name(self) -> str:
        """Return policy name."""
        return "WEIGHTED_AVERAGE"
