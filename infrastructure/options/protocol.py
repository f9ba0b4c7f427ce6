"""OptionStore protocol: a host-owned key/value store for plugin options."""

from typing import Optional, Protocol


class OptionStore(Protocol):
    async def get(self, name: str) -> Optional[str]: ...

    async def set(self, name: str, value: str) -> None: ...

    async def ping(self) -> bool: ...
