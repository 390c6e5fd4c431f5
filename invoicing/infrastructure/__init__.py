"""
Infrastructure Layer - Mapping and Persistence

This layer contains:
- Snapshot mappers (visitor traversal, explicit field mapping)
- Snapshot serialization and storage backends
- The invoice repository

Key principle: All infrastructure is REPLACEABLE.
Domain layer knows nothing about this layer (dependency inversion).
"""
