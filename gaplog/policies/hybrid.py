"""Hybrid cold-start / difficulty-normalized estimation policy."""

from typing import List

from ..models.task import TaskMaster, WorkLog
from ..models.trace import EstimationTrace, LogContribution
from .base import EstimationPolicy, load_multipliers

DIFFICULTY_MULTIPLIERS = {1: 0.6, 2: 0.8, 3: 1.0, 4: 1.3, 5: 1.6}
COLD_START_WEIGHTS = [10, 5]
STABLE_WEIGHTS = [50, 30, 20, 10, 5]


class HybridPolicy(EstimationPolicy):
    """Two-phase policy on a 1..5 difficulty scale.

    With fewer than ``stable_threshold`` usable logs, raw unit times are
    pooled with cold-start weights and the requested difficulty is applied
    on top. From then on each log's own difficulty is divided out first,
    so the average is a difficulty-free base unit time.
    """

    def __init__(self, config: dict):
        """Initialize hybrid policy."""
        super().__init__(config)
        section = self.estimation_config
        self.difficulty_multipliers = load_multipliers(section, DIFFICULTY_MULTIPLIERS)
        self.normal_difficulty = section.get('normal_difficulty', 3)
        self.stable_threshold = section.get('stable_threshold', 3)
        self.cold_start_weights = list(section.get('cold_start_weights', COLD_START_WEIGHTS))
        self.stable_weights = list(section.get('stable_weights', STABLE_WEIGHTS))

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

        if not selected:
            trace.phase = 'default'
            unit_time = fallback
        elif len(selected) < self.stable_threshold:
            trace.phase = 'cold_start'
            unit_time = self._weighted_unit_time(
                selected, self.cold_start_weights, fallback, trace, normalize=False
            )
        else:
            trace.phase = 'stable'
            recent = selected[:len(self.stable_weights)]
            unit_time = self._weighted_unit_time(
                recent, self.stable_weights, fallback, trace, normalize=True
            )

        multiplier = self.difficulty_multiplier(predicted_difficulty)
        trace.average_unit_time = unit_time
        trace.multiplier = multiplier

        return amount * unit_time * multiplier

    def _weighted_unit_time(
        self,
        logs: List[WorkLog],
        weights: List[float],
        fallback: float,
        trace: EstimationTrace,
        normalize: bool,
    ) -> float:
        """Recency-weighted unit time; ``normalize`` divides out each log's difficulty."""
        weighted_sum = 0.0
        weight_total = 0.0

        for index, log in enumerate(logs):
            weight = weights[index] if index < len(weights) else 1
            observed = log.observed_minutes(fallback)
            divisor = self.log_amount(log)
            if normalize:
                divisor *= self.difficulty_multiplier(log.difficulty_level)
            if divisor <= 0:
                trace.skipped_logs[log.id] = "zero divisor"
                continue

            unit_time = observed / divisor
            weighted_sum += unit_time * weight
            weight_total += weight
            trace.contributions.append(LogContribution(
                log_id=log.id,
                observed_minutes=observed,
                amount=self.log_amount(log),
                difficulty_level=log.difficulty_level,
                unit_time=unit_time,
                weight=weight,
            ))

        if weight_total <= 0:
            return fallback
        return weighted_sum / weight_total

    def get_policy_name(self) -> str:
        """Return policy name."""
        return "HYBRID"
