"""
Invoicing - Aggregate Invariants and Snapshot Mapping

This package demonstrates:
1. An invoice aggregate that enforces its own consistency rules
2. Self-validating value objects (product codes, quantities)
3. Visitor-based double dispatch to flatten the aggregate into a snapshot
4. A narrow repository boundary in front of replaceable storage
"""

__version__ = "1.0.0"
