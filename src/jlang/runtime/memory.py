"""
Memory budget bookkeeping for script variables.

The budget is advisory: it only decides whether a variable definition may
take effect. A script that never declares MAX_MEM has no budget at all,
and every allocation is accepted.
"""

import logging

from ..config import DEFAULT_VALUE_OVERHEAD

logger = logging.getLogger("jlang.runtime.memory")
logger.addHandler(logging.NullHandler())


def value_size(value: str, overhead: int = DEFAULT_VALUE_OVERHEAD,
               encoding: str = "utf-8") -> int:
    """Bytes charged for a string value: fixed overhead plus encoded length."""
    return overhead + len(value.encode(encoding))


class MemoryBudget:
    """A byte ceiling and the bytes currently charged against it."""

    def __init__(self, ceiling: int):
        self.ceiling = ceiling
        self.used = 0

    def allocate(self, size: int) -> bool:
        """Charge size bytes; False (and nothing charged) if it would pass the ceiling."""
        if self.used + size > self.ceiling:
            logger.debug("Allocation of %d bytes rejected (%d/%d used)",
                         size, self.used, self.ceiling)
            return False
        self.used += size
        return True

    def deallocate(self, size: int) -> None:
        """Release size bytes. Not guarded: usage can go negative."""
        self.used -= size

    @property
    def available(self) -> int:
        return self.ceiling - self.used

    def __repr__(self) -> str:
        return f"MemoryBudget(ceiling={self.ceiling}, used={self.used})"
