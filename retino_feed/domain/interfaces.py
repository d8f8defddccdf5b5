from typing import Any, Protocol


class IFeedLock(Protocol):
    """Named mutual-exclusion service shared by every feed generator."""

    def wait(self, key: str) -> None:
        """Block until no generation holds ``key``."""
        ...

    def start_transaction(self, key: str, timeout_ms: int) -> None:
        """Enter the critical section for ``key``; it expires after ``timeout_ms``."""
        ...

    def stop_transaction(self, key: str) -> None: ...


class IRenderer(Protocol):
    def render(self, structure: dict[str, Any]) -> str: ...
