"""Table storage repositories."""

from .base import Row, StorageError, TableClient
from .memory import InMemoryTableClient
from .scoped import OwnerScopedTable
from .supabase_tables import SupabaseTableClient

__all__ = [
    "InMemoryTableClient",
    "OwnerScopedTable",
    "Row",
    "StorageError",
    "SupabaseTableClient",
    "TableClient",
]
