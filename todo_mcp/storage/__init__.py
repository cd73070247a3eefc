"""
Storage abstraction layer.
Provides one task-store contract with interchangeable backends.
"""
import logging

from todo_mcp.config import Settings
from .interface import StorageInterface
from .json_storage import JSONFileStorage
from .postgrest_storage import PostgRESTStorage

logger = logging.getLogger(__name__)

_REMOTE_BACKENDS = ("postgrest", "supabase")


def create_storage(settings: Settings) -> StorageInterface:
    """
    Build the backend selected by settings.storage_backend.

    Raises:
        ValueError: Unknown backend name, or remote backend without URL/key
    """
    backend = settings.storage_backend
    if backend == "file":
        logger.info(f"Using file storage at {settings.data_file}")
        return JSONFileStorage(settings.data_file)
    if backend in _REMOTE_BACKENDS:
        if not settings.remote_url or not settings.remote_key:
            raise ValueError("Missing SUPABASE_URL or SUPABASE_ANON_KEY env vars")
        logger.info(f"Using remote storage table '{settings.remote_table}'")
        return PostgRESTStorage(
            settings.remote_url,
            settings.remote_key,
            table=settings.remote_table,
            timeout=settings.remote_timeout,
        )
    raise ValueError(f"Unknown storage backend '{backend}'. Must be one of: file, postgrest")


__all__ = ['StorageInterface', 'JSONFileStorage', 'PostgRESTStorage', 'create_storage']
