"""Base estimation policy interface."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..errors import InvalidDataError
from ..models.task import TaskMaster, WorkLog
from ..models.trace import EstimationTrace
from ..utils.config import multiplier_table


class EstimationPolicy(ABC):
    """Abstract base class for duration estimation policies.

    A policy owns a difficulty multiplier table and turns a master's work
    history into a raw (unrounded) minute prediction.
    """

    def __init__(self, config: dict):
        """Initialize policy with configuration."""
        self.config = config
        self.estimation_config = config.get('estimation', {})
        self.default_unit_time = self.estimation_config.get('default_unit_time', 10)
        self.difficulty_multipliers: Dict[int, float] = {}
        self.normal_difficulty = 3

    @abstractmethod
    def predict(
        self,
        master: TaskMaster,
        amount: float,
        predicted_difficulty: int,
        logs: List[WorkLog],
        trace: EstimationTrace,
    ) -> float:
        """Predict raw minutes for ``amount`` units, filling in ``trace``."""
        pass

    @abstractmethod
    def get_policy_name(self) -> str:
        """Return the name of this policy."""
        pass

    @property
    def supported_difficulties(self) -> List[int]:
        return sorted(self.difficulty_multipliers)

    def difficulty_multiplier(self, level: Optional[int]) -> float:
        """Look up the factor for a difficulty level; unknown levels get the normal factor."""
        normal = self.difficulty_multipliers.get(self.normal_difficulty, 1.0)
        if level is None:
            return normal
        return self.difficulty_multipliers.get(level, normal)

    def fallback_unit_time(self, master: TaskMaster) -> float:
        """Minutes per unit to use when there is no history."""
        if master.default_unit_time and master.default_unit_time > 0:
            return master.default_unit_time
        return self.default_unit_time

    @staticmethod
    def log_amount(log: WorkLog) -> float:
        """Units completed in a log; an unrecorded amount counts as one."""
        return log.amount if log.amount is not None else 1

    def select_logs(
        self,
        master_id: str,
        logs: List[WorkLog],
        trace: EstimationTrace,
    ) -> List[WorkLog]:
        """Pick this master's usable logs, newest first.

        Logs with a measured time shadow estimate-only logs entirely once
        at least one exists.
        """
        candidates = []
        for log in logs:
            if log.master_id != master_id:
                continue
            try:
                self._check_log(log)
            except InvalidDataError as e:
                trace.skipped_logs[log.id] = str(e)
                continue
            if not (log.has_actual_time or log.estimated_time_minutes):
                trace.skipped_logs[log.id] = "no recorded time"
                continue
            candidates.append(log)

        candidates.sort(key=lambda log: log.created_at, reverse=True)

        measured = [log for log in candidates if log.has_actual_time]
        if measured:
            trace.evidence = 'actual'
            for log in candidates:
                if not log.has_actual_time:
                    trace.skipped_logs[log.id] = "estimate only, actual times available"
            return measured

        if candidates:
            trace.evidence = 'estimated'
        return candidates

    def _check_log(self, log: WorkLog) -> None:
        if log.amount is not None and log.amount <= 0:
            raise InvalidDataError(f"non-positive amount {log.amount}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_policy_name()})"


def load_multipliers(section: dict, default: Dict[int, float]) -> Dict[int, float]:
    """Read a multiplier table from a config section."""
    return multiplier_table(section.get('difficulty_multipliers', default))
