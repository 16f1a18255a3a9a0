"""Storage provider implementations"""

from .local import LocalStorageProvider
from .supabase import SupabaseStorageProvider

__all__ = [
    "LocalStorageProvider",
    "SupabaseStorageProvider",
]
