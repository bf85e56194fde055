# tests/transport/test_cursor.py
"""
zx_snapshot.transport.cursorモジュールの単体テスト。
"""
import pytest

from zx_snapshot.common.errors import CapacityExceededError
from zx_snapshot.transport.cursor import MemoryCursor

# @intent:test_suite 境界チェック付き書き込みカーソルの検証。

class TestMemoryCursor:
    def test_writes_advance_offset(self):
        buffer = bytearray(16)
        cursor = MemoryCursor(buffer, 4, 8)
        cursor.write_byte(0x01)
        cursor.fill(0x02, 3)
        cursor.write_bytes(b"\x03\x04")
        assert buffer[4:10] == b"\x01\x02\x02\x02\x03\x04"
        assert cursor.offset == 10
        assert cursor.written == 6
        assert cursor.remaining == 2

    # @intent:test_case_limit 上限を超える書き込みは何も書かずに失敗することを検証します。
    def test_write_past_limit(self):
        buffer = bytearray(16)
        cursor = MemoryCursor(buffer, 0, 4)
        cursor.write_bytes(b"abc")
        with pytest.raises(CapacityExceededError) as excinfo:
            cursor.fill(0xFF, 2)
        assert excinfo.value.capacity == 4
        assert buffer[3] == 0
        assert cursor.offset == 3

    def test_range_outside_buffer(self):
        with pytest.raises(CapacityExceededError):
            MemoryCursor(bytearray(8), 4, 8)

    def test_negative_start(self):
        with pytest.raises(ValueError):
            MemoryCursor(bytearray(8), -1, 2)
