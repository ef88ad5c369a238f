"""
Culture Snapshot Engine

Aggregates organizational-culture snapshots and builds deterministic prompts
for a text-generation collaborator.

LAYERS:
=======
- contracts: immutable types and the error taxonomy
- core: normalization, aggregation, prompt construction (pure)
- ingestion: reference matrix parsing
- storage: read-only assessment record access
- api: HTTP glue (imports the completion adapter)
"""

__version__ = "0.1.0"
