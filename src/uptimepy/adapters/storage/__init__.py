"""Storage adapters implementing LogStorePort."""

from uptimepy.adapters.storage.in_memory import InMemoryLogStore
from uptimepy.adapters.storage.json_files import JsonPartitionStore

__all__ = ["InMemoryLogStore", "JsonPartitionStore"]
