"""Decision trace models for observability."""

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Dict, List, Optional, Any


@dataclass
class LogContribution:
    """How one work log fed into an estimate."""

    log_id: str
    observed_minutes: float
    amount: float
    difficulty_level: Optional[int]
    unit_time: float
    weight: float


@dataclass
class EstimationTrace:
    """Complete trace of a single duration estimate."""

    master_id: str
    policy_name: str
    amount: float
    predicted_difficulty: int
    phase: str = "default"
    evidence: str = "none"
    contributions: List[LogContribution] = field(default_factory=list)
    skipped_logs: Dict[str, str] = field(default_factory=dict)
    average_unit_time: Optional[float] = None
    multiplier: float = 1.0
    multiplier_source: str = "table"
    raw_minutes: float = 0.0
    minutes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert trace to dictionary for JSON export."""
        return asdict(self)

    def to_human_readable(self) -> str:
        """Generate human-readable log format."""
        lines = [
            f"=== Estimate: {self.master_id} ===",
            f"Policy: {self.policy_name}",
            f"Phase: {self.phase} ({len(self.contributions)} logs, evidence: {self.evidence})",
        ]

        for index, c in enumerate(self.contributions):
            lines.append(
                f"  Log #{index} {c.log_id}: time={c.observed_minutes} amount={c.amount} "
                f"difficulty={c.difficulty_level} unit={c.unit_time:.2f} weight={c.weight}"
            )

        for log_id, reason in self.skipped_logs.items():
            lines.append(f"  Skipped {log_id}: {reason}")

        if self.average_unit_time is not None:
            lines.append(f"Average unit time: {self.average_unit_time:.2f}")
        lines.append(f"Multiplier: x{self.multiplier} ({self.multiplier_source})")
        lines.append(
            f"Prediction: {self.amount} * unit * {self.multiplier} = {self.raw_minutes:.2f} -> {self.minutes} min"
        )

        return "\n".join(lines)


@dataclass
class AllocationDecision:
    """Records where one task was placed, if anywhere."""

    task_id: str
    estimate_minutes: float
    assigned_date: Optional[date]
    reason: str
    constraint_applied: Optional[str] = None


@dataclass
class AllocationTrace:
    """Complete trace of an allocation run."""

    start_date: date
    horizon_days: int
    decisions: List[AllocationDecision]
    daily_usage: Dict[date, float]
    summary_stats: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Convert trace to dictionary for JSON export."""
        data = asdict(self)
        data['daily_usage'] = {day.isoformat(): used for day, used in self.daily_usage.items()}
        return data

    def to_human_readable(self) -> str:
        """Generate human-readable log format."""
        lines = [
            f"=== Allocation from {self.start_date} ({self.horizon_days} days) ===",
            "",
            "Decisions:",
        ]

        for decision in self.decisions:
            target = decision.assigned_date or "unassigned"
            lines.append(f"  {decision.task_id} -> {target}: {decision.estimate_minutes} min")
            lines.append(f"    Reason: {decision.reason}")
            if decision.constraint_applied:
                lines.append(f"    Constraint: {decision.constraint_applied}")

        lines.extend([
            "",
            "Daily Usage:",
        ])

        for day in sorted(self.daily_usage):
            lines.append(f"  {day}: {self.daily_usage[day]} min")

        lines.extend([
            "",
            "Summary Statistics:",
        ])

        for key, value in self.summary_stats.items():
            lines.append(f"  {key}: {value}")

        lines.append("=" * 50)

        return "\n".join(lines)
