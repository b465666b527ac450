"""Infrastructure layer exports."""

from .local_store import JsonFileClaimStore
from .remote_table import RemoteTableClaimStore
from .factory import build_store
from .store import ClaimStore, InMemoryClaimStore

__all__ = [
    "ClaimStore",
    "InMemoryClaimStore",
    "JsonFileClaimStore",
    "RemoteTableClaimStore",
    "build_store",
]
