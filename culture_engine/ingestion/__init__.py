"""
Ingestion Layer

Parses static reference material into immutable contracts.
"""

from .reference_matrix import parse_reference_csv, matrix_from_mapping

__all__ = ['parse_reference_csv', 'matrix_from_mapping']
