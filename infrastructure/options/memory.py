"""Process-local OptionStore used when Redis is not configured."""

from typing import Optional


class InMemoryOptionStore:
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    async def set(self, name: str, value: str) -> None:
        self._values[name] = value

    async def ping(self) -> bool:
        return True
