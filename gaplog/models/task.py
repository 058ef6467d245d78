"""Task, work log and capacity data models."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class TaskMaster:
    """Reusable task template with a fallback time per unit."""
    
    id: str
    default_unit_name: str
    default_unit_time: float
    name: Optional[str] = None


@dataclass(frozen=True)
class WorkLog:
    """Historical record of a task performed under a master."""
    
    id: str
    master_id: Optional[str]
    created_at: datetime
    estimated_time_minutes: Optional[float] = None
    actual_time_minutes: Optional[float] = None
    difficulty_level: Optional[int] = None
    amount: Optional[float] = None
    
    @property
    def has_actual_time(self) -> bool:
        """Whether a positive measured time was recorded."""
        return self.actual_time_minutes is not None and self.actual_time_minutes > 0
    
    def observed_minutes(self, fallback: float) -> float:
        """Measured time, else the estimate, else the fallback."""
        if self.has_actual_time:
            return self.actual_time_minutes
        if self.estimated_time_minutes:
            return self.estimated_time_minutes
        return fallback


@dataclass(frozen=True)
class TaskStub:
    """Minimal view of a pending task for allocation."""
    
    id: str
    created_at: datetime
    estimated_time_minutes: Optional[float] = None
    due_date: Optional[date] = None
    scheduled_date: Optional[date] = None
    
    @property
    def estimate(self) -> float:
        """Estimated minutes, 0 when unset."""
        return self.estimated_time_minutes or 0


@dataclass(frozen=True)
class DailyCapacity:
    """Available minutes for one calendar date."""
    
    date: date
    available_minutes: int
