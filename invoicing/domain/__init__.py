"""
Domain Layer - Pure Business Logic

This layer contains:
- Value objects (self-validating immutable scalars)
- The invoice aggregate (consistency boundary)
- The visitor protocol the aggregate exposes for traversal
- Snapshot types (flat, persistence-shaped mirrors)

Key principle: ZERO dependencies on infrastructure.
Mapping and storage live in ``invoicing.infrastructure``.
"""
