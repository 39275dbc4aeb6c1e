"""
IFRS reporting kernel.

Ledger snapshot value objects, structured logging, the typed exception
hierarchy, the injectable clock, and the SQLAlchemy persistence boundary
used by the SQL-backed collaborators.
"""

__version__ = "0.1.0"
