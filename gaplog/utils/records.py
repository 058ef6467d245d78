"""Loading of masters, work logs, tasks and capacities from data files."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List

import yaml
from loguru import logger

from ..errors import InvalidDataError
from ..models.task import DailyCapacity, TaskMaster, TaskStub, WorkLog
from .datetime_utils import parse_date, parse_datetime


@dataclass
class DataSet:
    """Records read from one data file."""

    masters: List[TaskMaster] = field(default_factory=list)
    logs: List[WorkLog] = field(default_factory=list)
    tasks: List[TaskStub] = field(default_factory=list)
    capacities: List[DailyCapacity] = field(default_factory=list)


def master_from_dict(data: Dict[str, Any]) -> TaskMaster:
    return TaskMaster(
        id=str(data['id']),
        default_unit_name=data.get('default_unit_name', 'unit'),
        default_unit_time=float(data['default_unit_time']),
        name=data.get('name'),
    )


def log_from_dict(data: Dict[str, Any]) -> WorkLog:
    return WorkLog(
        id=str(data['id']),
        master_id=data.get('master_id'),
        created_at=parse_datetime(data['created_at']),
        estimated_time_minutes=data.get('estimated_time_minutes'),
        actual_time_minutes=data.get('actual_time_minutes'),
        difficulty_level=data.get('difficulty_level'),
        amount=data.get('amount'),
    )


def task_from_dict(data: Dict[str, Any]) -> TaskStub:
    return TaskStub(
        id=str(data['id']),
        created_at=parse_datetime(data['created_at']),
        estimated_time_minutes=data.get('estimated_time_minutes'),
        due_date=parse_date(data.get('due_date')),
        scheduled_date=parse_date(data.get('scheduled_date')),
    )


def capacity_from_dict(data: Dict[str, Any]) -> DailyCapacity:
    return DailyCapacity(
        date=parse_date(data['date']),
        available_minutes=int(data.get('available_minutes') or 0),
    )


def _convert(kind: str, items: List[Dict[str, Any]], factory: Callable) -> List:
    records = []
    for index, item in enumerate(items or []):
        try:
            records.append(factory(item))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidDataError(f"Invalid {kind} record at index {index}: {e}") from e
    return records


def load_dataset(data_path: str) -> DataSet:
    """Load a data file (YAML or JSON) with optional masters, logs, tasks and capacities lists."""
    path = Path(data_path)

    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {data_path}")

    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            raw = yaml.safe_load(f) or {}
        elif path.suffix.lower() == '.json':
            raw = json.load(f)
        else:
            raise ValueError(f"Unsupported data file format: {path.suffix}")

    dataset = DataSet(
        masters=_convert('master', raw.get('masters'), master_from_dict),
        logs=_convert('log', raw.get('logs'), log_from_dict),
        tasks=_convert('task', raw.get('tasks'), task_from_dict),
        capacities=_convert('capacity', raw.get('capacities'), capacity_from_dict),
    )

    logger.info(
        f"Loaded {len(dataset.masters)} masters, {len(dataset.logs)} logs, "
        f"{len(dataset.tasks)} tasks, {len(dataset.capacities)} capacities from {path}"
    )
    return dataset


def dataset_to_dict(dataset: DataSet) -> Dict[str, Any]:
    """Serialize a data set to the file layout read by ``load_dataset``."""

    def iso(value):
        return value.isoformat() if value is not None else None

    return {
        'masters': [
            {
                'id': m.id,
                'name': m.name,
                'default_unit_name': m.default_unit_name,
                'default_unit_time': m.default_unit_time,
            }
            for m in dataset.masters
        ],
        'logs': [
            {
                'id': log.id,
                'master_id': log.master_id,
                'created_at': iso(log.created_at),
                'estimated_time_minutes': log.estimated_time_minutes,
                'actual_time_minutes': log.actual_time_minutes,
                'difficulty_level': log.difficulty_level,
                'amount': log.amount,
            }
            for log in dataset.logs
        ],
        'tasks': [
            {
                'id': t.id,
                'created_at': iso(t.created_at),
                'estimated_time_minutes': t.estimated_time_minutes,
                'due_date': iso(t.due_date),
                'scheduled_date': iso(t.scheduled_date),
            }
            for t in dataset.tasks
        ],
        'capacities': [
            {'date': iso(c.date), 'available_minutes': c.available_minutes}
            for c in dataset.capacities
        ],
    }
