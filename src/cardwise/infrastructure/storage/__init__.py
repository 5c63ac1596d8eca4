# Infrastructure Storage Adapters Package
from .json_store import JsonFileStore
from .repositories import JsonDeckRepository, JsonReviewLog

__all__ = ["JsonFileStore", "JsonDeckRepository", "JsonReviewLog"]
