"""
Storage Layer

Read-only access to persisted assessment records.
"""

from .store import AssessmentStore, InMemoryAssessmentStore, RecordFilter
from .rest import RestAssessmentStore

__all__ = [
    'AssessmentStore', 'InMemoryAssessmentStore', 'RecordFilter',
    'RestAssessmentStore',
]
