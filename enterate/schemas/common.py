from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """Outcome of a storage mutation.

    Storage errors never propagate to callers; they come back as a failure with a
    short machine-readable reason. Callers that applied an optimistic update revert
    it only when ``ok`` is False.
    """

    ok: bool
    data: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, reason: str) -> "OperationResult[T]":
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


class StorageUnavailableError(Exception):
    """A storage call failed where the caller cannot continue without its result"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
