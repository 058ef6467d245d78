"""Duration estimation engine."""

import math
from typing import Iterable, List, Optional, Tuple

from ..errors import InvalidDataError, NotFoundError
from ..models.task import TaskMaster, WorkLog
from ..models.trace import EstimationTrace
from ..policies import EstimationPolicy, create_policy


def round_minutes(minutes: float) -> int:
    """Round half up to whole minutes, never below zero."""
    if math.isnan(minutes) or minutes <= 0:
        return 0
    return int(math.floor(minutes + 0.5))


class DurationEstimator:
    """Predicts task duration from the user's own work history."""

    def __init__(self, policy: EstimationPolicy, config: Optional[dict] = None):
        """Initialize estimator with policy and configuration."""
        self.policy = policy
        self.config = config or {}

    @classmethod
    def from_config(cls, config: dict, policy_name: Optional[str] = None) -> 'DurationEstimator':
        """Build an estimator using the configured (or given) policy."""
        name = policy_name or config.get('estimation', {}).get('policy', 'hybrid')
        return cls(create_policy(name, config), config)

    def estimate(
        self,
        master: TaskMaster,
        amount: float,
        predicted_difficulty: int,
        logs: List[WorkLog],
    ) -> int:
        """Estimated whole minutes for ``amount`` units of ``master``."""
        minutes, _ = self.estimate_with_trace(master, amount, predicted_difficulty, logs)
        return minutes

    def estimate_with_trace(
        self,
        master: TaskMaster,
        amount: float,
        predicted_difficulty: int,
        logs: List[WorkLog],
    ) -> Tuple[int, EstimationTrace]:
        """Estimate and return the decision trace behind it."""
        if amount is None or amount <= 0:
            raise InvalidDataError(f"Amount must be positive, got {amount}")

        trace = EstimationTrace(
            master_id=master.id,
            policy_name=self.policy.get_policy_name(),
            amount=amount,
            predicted_difficulty=predicted_difficulty,
        )

        raw = self.policy.predict(master, amount, predicted_difficulty, logs, trace)
        trace.raw_minutes = raw
        trace.minutes = round_minutes(raw)

        return trace.minutes, trace

    def estimate_for_master_id(
        self,
        master_id: str,
        amount: float,
        predicted_difficulty: int,
        logs: List[WorkLog],
        masters: Iterable[TaskMaster],
    ) -> int:
        """Estimate against a master looked up by id in ``masters``."""
        master = find_master(master_id, masters)
        return self.estimate(master, amount, predicted_difficulty, logs)


def find_master(master_id: str, masters: Iterable[TaskMaster]) -> TaskMaster:
    """Return the master with ``master_id`` or raise NotFoundError."""
    for master in masters:
        if master.id == master_id:
            return master
    raise NotFoundError(f"TaskMaster not found: {master_id}")


def estimate_duration(
    master: TaskMaster,
    amount: float,
    predicted_difficulty: int,
    logs: List[WorkLog],
    config: Optional[dict] = None,
) -> int:
    """Estimate with the hybrid policy and default settings."""
    return DurationEstimator.from_config(config or {}).estimate(
        master, amount, predicted_difficulty, logs
    )
