from .base import ItemStore
from .memory import InMemoryItemStore
from .supabase import SupabaseItemStore

__all__ = ["InMemoryItemStore", "ItemStore", "SupabaseItemStore"]
