"""Offline estimation accuracy evaluation."""

import json
import math
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..engine.estimator import DurationEstimator
from ..models.task import TaskMaster, WorkLog
from ..policies.hybrid import HybridPolicy
from ..policies.weighted_average import WeightedAveragePolicy


def gap_score(estimated: Optional[float], actual: float) -> Optional[int]:
    """Percent by which the actual time beat the estimate.

    Positive means finished faster than estimated, negative means overran.
    None when there was no usable estimate.
    """
    if not estimated:
        return None
    percent = (estimated - actual) / estimated * 100
    return math.floor(percent + 0.5)


class EvaluationResult:
    """Results from backtesting a policy."""

    def __init__(self, policy_name: str):
        self.policy_name = policy_name
        self.samples = 0
        self.total_absolute_error = 0.0
        self.total_absolute_percentage_error = 0.0
        self.gap_scores: List[int] = []
        self.samples_by_master: Dict[str, int] = {}

    @property
    def mean_absolute_error(self) -> float:
        return self.total_absolute_error / self.samples if self.samples else 0.0

    @property
    def mean_absolute_percentage_error(self) -> float:
        return self.total_absolute_percentage_error / self.samples if self.samples else 0.0

    @property
    def mean_gap_score(self) -> float:
        return sum(self.gap_scores) / len(self.gap_scores) if self.gap_scores else 0.0

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON export."""
        return {
            'policy': self.policy_name,
            'samples': self.samples,
            'mean_absolute_error_minutes': self.mean_absolute_error,
            'mean_absolute_percentage_error': self.mean_absolute_percentage_error,
            'mean_gap_score': self.mean_gap_score,
            'samples_by_master': dict(self.samples_by_master),
        }


class Evaluator:
    """Replays work history to measure how well a policy predicts it.

    Each completed log is estimated from the logs of the same master
    created strictly before it, then compared with its measured time.
    """

    def __init__(self, config: dict):
        """Initialize evaluator with configuration."""
        self.config = config

    def evaluate_policy(
        self,
        estimator: DurationEstimator,
        masters: List[TaskMaster],
        logs: List[WorkLog],
    ) -> EvaluationResult:
        """Backtest one estimator over the given history."""
        result = EvaluationResult(estimator.policy.get_policy_name())

        for master in masters:
            history = sorted(
                (log for log in logs if log.master_id == master.id),
                key=lambda log: log.created_at,
            )

            for log in history:
                if not log.has_actual_time or (log.amount is not None and log.amount <= 0):
                    continue

                prior = [earlier for earlier in history if earlier.created_at < log.created_at]
                amount = log.amount if log.amount is not None else 1
                predicted = estimator.estimate(master, amount, log.difficulty_level, prior)

                actual = log.actual_time_minutes
                result.samples += 1
                result.samples_by_master[master.id] = result.samples_by_master.get(master.id, 0) + 1
                result.total_absolute_error += abs(predicted - actual)
                result.total_absolute_percentage_error += abs(predicted - actual) / actual * 100

                score = gap_score(predicted, actual)
                if score is not None:
                    result.gap_scores.append(score)

        return result

    def compare_policies(
        self,
        masters: List[TaskMaster],
        logs: List[WorkLog],
    ) -> Tuple[EvaluationResult, EvaluationResult]:
        """Compare hybrid and weighted-average policies."""
        hybrid_estimator = DurationEstimator(HybridPolicy(self.config), self.config)
        weighted_estimator = DurationEstimator(WeightedAveragePolicy(self.config), self.config)

        hybrid_result = self.evaluate_policy(hybrid_estimator, masters, logs)
        weighted_result = self.evaluate_policy(weighted_estimator, masters, logs)

        return hybrid_result, weighted_result

    def run_evaluation(
        self,
        masters: List[TaskMaster],
        logs: List[WorkLog],
        output_dir: str = "results",
    ) -> Tuple[EvaluationResult, EvaluationResult]:
        """Run the comparison, save it as JSON and print a summary."""
        hybrid_result, weighted_result = self.compare_policies(masters, logs)

        output_path = Path(output_dir)
        output_path.mkdir(exist_ok=True)

        comparison = {
            'hybrid': hybrid_result.to_dict(),
            'weighted_average': weighted_result.to_dict(),
            'improvement': {
                'mean_absolute_error_delta': weighted_result.mean_absolute_error - hybrid_result.mean_absolute_error,
            },
        }

        with open(output_path / 'evaluation_results.json', 'w') as f:
            json.dump(comparison, f, indent=2, default=str)

        self._print_comparison(hybrid_result, weighted_result)

        return hybrid_result, weighted_result

    def _print_comparison(self, hybrid: EvaluationResult, weighted: EvaluationResult):
        """Print comparison report."""
        print("\n" + "=" * 70)
        print("ESTIMATION ACCURACY COMPARISON")
        print("=" * 70)
        print(f"\n{'Metric':<40} {'Hybrid':<15} {'Weighted Avg':<15}")
        print("-" * 70)

        print(f"{'Samples':<40} {hybrid.samples:<15} {weighted.samples:<15}")
        print(f"{'Mean absolute error (minutes)':<40} {hybrid.mean_absolute_error:<15.2f} {weighted.mean_absolute_error:<15.2f}")
        print(f"{'Mean absolute percentage error (%)':<40} {hybrid.mean_absolute_percentage_error:<15.2f} {weighted.mean_absolute_percentage_error:<15.2f}")
        print(f"{'Mean gap score (%)':<40} {hybrid.mean_gap_score:<15.2f} {weighted.mean_gap_score:<15.2f}")

        print("\n" + "=" * 70)
