"""
Core Engine

Pure, synchronous transforms: normalization, aggregation, prompt construction.

WHAT THIS LAYER MUST NOT DO:
============================
- Perform I/O (network, disk, clock)
- Log or wrap errors
- Hold state between calls
"""

from .categories import (
    Category,
    CANONICAL_CATEGORIES,
    CATEGORY_KEYS,
    get_category,
    resolve_key,
)
from .normalization import normalize, normalize_many
from .aggregation import aggregate, most_frequent
from .prompts import (
    PromptConfig,
    build,
    section_keys,
    DEFAULT_BRAND,
    NO_NUMERIC_SCORES_INSTRUCTION,
    MODE_SINGLE,
    MODE_AGGREGATE,
)

__all__ = [
    # Categories
    'Category', 'CANONICAL_CATEGORIES', 'CATEGORY_KEYS', 'get_category', 'resolve_key',
    # Aggregator
    'normalize', 'normalize_many', 'aggregate', 'most_frequent',
    # Prompt builder
    'PromptConfig', 'build', 'section_keys', 'DEFAULT_BRAND',
    'NO_NUMERIC_SCORES_INSTRUCTION', 'MODE_SINGLE', 'MODE_AGGREGATE',
]
