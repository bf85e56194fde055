# zx_snapshot/transport/cursor.py
"""
境界チェック付きの書き込みカーソル。

ページ展開の書き込み先を (バッファ, オフセット, 上限) の組で表し、
全ての書き込みを既知の容量に対して検証します。
"""
from zx_snapshot.common.errors import CapacityExceededError


# @intent:responsibility 呼び出し元が所有するバイト列への書き込み位置と上限を管理します。
# @intent:invariant start <= offset <= limit <= len(buffer)
class MemoryCursor:
    """
    呼び出し元が所有するメモリへの書き込みカーソル。
    書き込みは常に上限と照合され、超過する場合は何も書かずに CapacityExceededError を送出します。
    """
    def __init__(self, buffer: bytearray, start: int, capacity: int):
        if start < 0 or capacity < 0:
            raise ValueError("Cursor start and capacity must be non-negative.")
        if start + capacity > len(buffer):
            raise CapacityExceededError(
                f"Cursor range {start:#06x}+{capacity:#06x} exceeds buffer of {len(buffer):#06x} bytes.",
                capacity=capacity,
            )
        self._buffer = buffer
        self._start = start
        self._offset = start
        self._limit = start + capacity

    @property
    def start(self) -> int:
        return self._start

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def capacity(self) -> int:
        return self._limit - self._start

    @property
    def remaining(self) -> int:
        return self._limit - self._offset

    # @intent:responsibility これまでに書き込んだバイト数を返します。
    @property
    def written(self) -> int:
        return self._offset - self._start

    def _reserve(self, count: int) -> None:
        if count > self.remaining:
            raise CapacityExceededError(
                f"Write of {count} bytes at {self._offset:#06x} exceeds region capacity "
                f"of {self.capacity} bytes ({self.remaining} remaining).",
                capacity=self.capacity,
            )

    def write_byte(self, value: int) -> None:
        self._reserve(1)
        self._buffer[self._offset] = value
        self._offset += 1

    # @intent:responsibility 同じ値を count 回書き込みます（ランレングス展開用）。
    def fill(self, value: int, count: int) -> None:
        self._reserve(count)
        self._buffer[self._offset:self._offset + count] = bytes((value,)) * count
        self._offset += count

    def write_bytes(self, data: bytes) -> None:
        self._reserve(len(data))
        self._buffer[self._offset:self._offset + len(data)] = data
        self._offset += len(data)
