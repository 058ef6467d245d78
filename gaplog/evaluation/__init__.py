"""Evaluation and simulation modules."""

from .generator import DataGenerator
from .evaluator import EvaluationResult, Evaluator, gap_score

__all__ = ['DataGenerator', 'EvaluationResult', 'Evaluator', 'gap_score']
