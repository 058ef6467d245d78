"""Estimation policy implementations."""

from .base import EstimationPolicy
from .hybrid import HybridPolicy
from .weighted_average import WeightedAveragePolicy

POLICIES = {
    'hybrid': HybridPolicy,
    'weighted-average': WeightedAveragePolicy,
}


def create_policy(name: str, config: dict) -> EstimationPolicy:
    """Instantiate a policy by its CLI/config name."""
    try:
        policy_class = POLICIES[name.lower().replace('_', '-')]
    except KeyError:
        raise ValueError(f"Unknown policy: {name}") from None
    return policy_class(config)


__all__ = ['EstimationPolicy', 'HybridPolicy', 'WeightedAveragePolicy', 'POLICIES', 'create_policy']
