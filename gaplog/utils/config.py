"""Configuration management."""

import json
import yaml
from pathlib import Path
from typing import Dict, Any

from loguru import logger


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)
    
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            config = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            config = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")
    
    logger.debug(f"Loaded config from {path}")
    return config or {}


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'estimation': {
            'policy': 'hybrid',
            'default_unit_time': 10,
            'stable_threshold': 3,
            'cold_start_weights': [10, 5],
            'stable_weights': [50, 30, 20, 10, 5],
            'difficulty_multipliers': {1: 0.6, 2: 0.8, 3: 1.0, 4: 1.3, 5: 1.6},
            'normal_difficulty': 3,
            'weighted_average': {
                'window': 5,
                'difficulty_multipliers': {1: 0.8, 2: 1.0, 3: 1.3},
                'normal_difficulty': 2,
                'personal_min_logs': 5,
                'personal_min_samples': 3,
            },
        },
        'allocation': {
            'horizon_days': 30,
        },
        'capacity': {
            'weekdays': [0, 1, 2, 3, 4],  # Monday to Friday
            'wake_time': '07:00',
            'sleep_time': '23:00',
            'blocks': [
                {'title': 'work', 'start': '09:00', 'end': '18:00'},
                {'title': 'lunch', 'start': '12:00', 'end': '13:00'},
            ],
        },
    }


def multiplier_table(raw: Dict[Any, Any]) -> Dict[int, float]:
    """Normalize a difficulty multiplier table to int keys and float values."""
    return {int(level): float(factor) for level, factor in raw.items()}
