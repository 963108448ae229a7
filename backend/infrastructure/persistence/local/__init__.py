from infrastructure.persistence.local.folder_store import LocalFolderStore
from infrastructure.persistence.local.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "LocalFolderStore",
]
