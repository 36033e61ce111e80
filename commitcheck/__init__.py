"""Conventional Commits validation for commit messages and PR titles."""

__version__ = "0.1.0"

from .batch import BatchOptions, BatchValidator, validate_batch
from .models import BatchEntry, BatchResult, ParsedMessage, Violation, ViolationField
from .parser import parse
from .report import Report, render
from .rules import ConfigurationError, RuleSet, build_rule_set
from .validation import evaluate

__all__ = [
    'BatchEntry',
    'BatchOptions',
    'BatchResult',
    'BatchValidator',
    'ConfigurationError',
    'ParsedMessage',
    'Report',
    'RuleSet',
    'Violation',
    'ViolationField',
    'build_rule_set',
    'evaluate',
    'parse',
    'render',
    'validate_batch',
]
