"""Memory guard consulted before and after an analysis run"""

import logging
from typing import Any, Callable, Optional

import psutil
from pydantic import BaseModel

from .config import MemoryConfig

logger = logging.getLogger(__name__)

GB = 1024 * 1024 * 1024


class MemoryState(BaseModel):
    """Snapshot of system memory"""
    free_memory_bytes: int
    total_memory_bytes: int
    is_critical: bool
    warning_message: str
    critical_failure_message: str

    @property
    def free_gb(self) -> float:
        return round(self.free_memory_bytes / GB, 2)

    @property
    def total_gb(self) -> float:
        return round(self.total_memory_bytes / GB, 2)


class MemoryGuard:
    """Flags critically low available memory"""

    def __init__(
        self,
        config: Optional[MemoryConfig] = None,
        memory_reader: Callable[[], Any] = psutil.virtual_memory,
    ):
        """
        Initialize the memory guard.

        Args:
            config: Threshold and user-facing messages
            memory_reader: Returns an object with .available and .total bytes
        """
        self.config = config or MemoryConfig()
        self._read_memory = memory_reader

    @property
    def critical_threshold_bytes(self) -> int:
        return self.config.critical_threshold_bytes

    def check(self) -> MemoryState:
        memory = self._read_memory()
        state = MemoryState(
            free_memory_bytes=memory.available,
            total_memory_bytes=memory.total,
            is_critical=memory.available < self.critical_threshold_bytes,
            warning_message=self.config.warning_message,
            critical_failure_message=self.config.failure_message,
        )

        logger.debug(
            f"Memory check - Free: {state.free_gb}GB, Total: {state.total_gb}GB, "
            f"Critical: {state.is_critical}"
        )
        return state
