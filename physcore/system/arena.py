"""Byte-bounded arena for simulation buffers."""

from __future__ import annotations

import numpy as np
from numpy.typing import DTypeLike, NDArray


class ArenaExhaustedError(MemoryError):
    """Raised when an allocation would exceed the arena's byte budget."""

    def __init__(self, requested: int, used: int, limit: int) -> None:
        self.requested = requested
        self.used = used
        self.limit = limit
        super().__init__(
            f"allocation of {requested} bytes exceeds arena budget "
            f"({used} of {limit} bytes in use)"
        )


class BoundedArena:
    """
    Allocator with a hard upper byte limit.

    Containers compose an arena and request every buffer through it. A request
    that would push the running total past the limit fails before anything is
    allocated, so the counter never reflects a partial allocation. Outcomes are
    deterministic for the same request sequence and limit.

    Not thread-safe.

    Attributes:
        max_bytes: Upper limit on outstanding bytes.
        used_bytes: Bytes currently accounted to live buffers.
    """

    def __init__(self, max_bytes: int) -> None:
        """
        Initialize the arena.

        Args:
            max_bytes: Upper limit on outstanding bytes.
        """
        if max_bytes < 0:
            raise ValueError(f"max_bytes must be non-negative, got {max_bytes}")
        self.max_bytes = int(max_bytes)
        self.used_bytes = 0

    @property
    def available_bytes(self) -> int:
        """Return the number of bytes still available."""
        return self.max_bytes - self.used_bytes

    def can_allocate(self, nbytes: int) -> bool:
        """Check whether a request of nbytes would fit."""
        return self.used_bytes + nbytes <= self.max_bytes

    def allocate(
        self, shape: int | tuple[int, ...], dtype: DTypeLike = np.float64
    ) -> NDArray:
        """
        Allocate a zero-filled array charged against the budget.

        Args:
            shape: Array shape.
            dtype: Array dtype.

        Returns:
            New zero-filled array.

        Raises:
            ArenaExhaustedError: If the request does not fit the budget.
        """
        shape = (shape,) if isinstance(shape, int) else tuple(shape)
        nbytes = int(np.prod(shape, dtype=np.int64)) * np.dtype(dtype).itemsize
        if not self.can_allocate(nbytes):
            raise ArenaExhaustedError(nbytes, self.used_bytes, self.max_bytes)
        array = np.zeros(shape, dtype=dtype)
        self.used_bytes += nbytes
        return array

    def release(self, array: NDArray | None) -> None:
        """Return an array's bytes to the budget."""
        if array is None:
            return
        self.used_bytes = max(0, self.used_bytes - array.nbytes)

    def __repr__(self) -> str:
        return f"BoundedArena(used={self.used_bytes}, max={self.max_bytes})"
