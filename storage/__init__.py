"""
storage/ - Opportunity persistence.

Modules:
- opportunities: SQLite-backed append-only opportunity log
"""

from storage.opportunities import OpportunityRow, OpportunityStore

__all__ = [
    "OpportunityRow",
    "OpportunityStore",
]
