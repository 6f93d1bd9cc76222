"""Shared test doubles"""
from typing import Optional


class InMemoryStore:
    """Dict-backed stand-in for the key-value store."""

    def __init__(self, data: Optional[dict] = None, prefix: str = ""):
        self.data = data if data is not None else {}
        self.prefix = prefix
        self.writes: list[tuple[str, str]] = []
        self.fail_get = False
        self.fail_set = False
        self.reject_set = False

    async def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise ConnectionError("store unavailable")
        return self.data.get(f"{self.prefix}{key}")

    async def set(self, key: str, value: str) -> bool:
        if self.fail_set:
            raise ConnectionError("store unavailable")
        if self.reject_set:
            return False
        self.data[f"{self.prefix}{key}"] = value
        self.writes.append((key, value))
        return True
