from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Durable string key-value store (the device's local storage).

    Every ``set_item``/``remove_item`` must be durable when it returns.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError
