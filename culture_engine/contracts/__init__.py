"""
Contracts Package

Immutable types and the error taxonomy shared by all layers.
"""

from .base import (
    SnapshotError,
    InvalidInput,
    EmptyResult,
    StoreUnavailable,
    AuthError,
    Unauthorized,
    Forbidden,
)
from .snapshot import (
    ScoreEntry,
    Snapshot,
    AssessmentRecord,
    CategoryAverage,
    AggregateSummary,
    PromptPayload,
)
from .reference import ReferenceEntry, ReferenceMatrix

__all__ = [
    # Errors
    'SnapshotError', 'InvalidInput', 'EmptyResult', 'StoreUnavailable',
    'AuthError', 'Unauthorized', 'Forbidden',
    # Data
    'ScoreEntry', 'Snapshot', 'AssessmentRecord', 'CategoryAverage',
    'AggregateSummary', 'PromptPayload',
    'ReferenceEntry', 'ReferenceMatrix',
]
