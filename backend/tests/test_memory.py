"""Tests for MemoryGuard."""

from clipcheck.config import MemoryConfig
from clipcheck.memory import MemoryGuard

from tests.fakes import GB, MB, memory_reader


class TestMemoryGuard:

    def test_plenty_of_memory(self) -> None:
        state = MemoryGuard(memory_reader=memory_reader(4 * GB)).check()
        assert not state.is_critical
        assert state.free_memory_bytes == 4 * GB
        assert state.free_gb == 4.0
        assert state.total_gb == 8.0

    def test_below_threshold_is_critical(self) -> None:
        state = MemoryGuard(memory_reader=memory_reader(499 * MB)).check()
        assert state.is_critical

    def test_exactly_threshold_is_not_critical(self) -> None:
        state = MemoryGuard(memory_reader=memory_reader(500 * MB)).check()
        assert not state.is_critical

    def test_messages_come_from_config(self) -> None:
        config = MemoryConfig(
            critical_threshold_mb=1024,
            warning_message="Low memory",
            failure_message="Failed, low memory",
        )
        state = MemoryGuard(config, memory_reader=memory_reader(800 * MB)).check()
        assert state.is_critical
        assert state.warning_message == "Low memory"
        assert state.critical_failure_message == "Failed, low memory"

    def test_default_reader_uses_psutil(self) -> None:
        state = MemoryGuard().check()
        assert state.total_memory_bytes > 0
        assert 0 <= state.free_memory_bytes <= state.total_memory_bytes
