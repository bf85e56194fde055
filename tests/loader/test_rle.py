# tests/loader/test_rle.py
"""
zx_snapshot.loader.rleモジュールの単体テスト。
ランレングス展開のエスケープ列、終端列、末尾4バイトの規則を検証します。
"""
import random

import pytest

from zx_snapshot.common.errors import CapacityExceededError, TruncatedBlockError
from zx_snapshot.loader.rle import PAGE_SIZE, copy_page, decompress_page
from zx_snapshot.transport.cursor import MemoryCursor
from snapshot_factory import compress

# @intent:test_suite .z80 形式の圧縮ページ展開の検証。

def _decode(source: bytes, compressed: bool = True, capacity: int = PAGE_SIZE):
    memory = bytearray(capacity)
    cursor = MemoryCursor(memory, 0, capacity)
    written = decompress_page(source, cursor, compressed)
    return bytes(memory[:written]), cursor


class TestDecompressPage:
    # @intent:test_case_literal エスケープを含まないデータはそのまま出力されることを検証します。
    def test_literal_bytes(self):
        output, cursor = _decode(bytes([1, 2, 3, 4, 5, 6, 7]))
        assert output == bytes([1, 2, 3, 4, 5, 6, 7])
        assert cursor.written == 7

    # @intent:test_case_escape ED ED nn vv が vv の nn 回繰り返しに展開されることを検証します。
    def test_escape_sequence_expands_run(self):
        source = bytes([0x01, 0xED, 0xED, 0x06, 0xAA, 0x02, 0x03, 0x04, 0x05])
        output, _ = _decode(source)
        assert output == bytes([0x01]) + bytes([0xAA]) * 6 + bytes([0x02, 0x03, 0x04, 0x05])

    # @intent:test_case_single_ed 単独のEDはリテラルとして扱われることを検証します。
    def test_single_ed_is_literal(self):
        source = bytes([0xED, 0x00, 0xED, 0xED, 0x05, 0x00, 0x01, 0x02, 0x03, 0x04])
        output, _ = _decode(source)
        assert output == bytes([0xED, 0x00]) + bytes(5) + bytes([0x01, 0x02, 0x03, 0x04])

    # @intent:test_case_tail_rule 末尾4バイトにある ED ED はエスケープとして解釈されないことを検証します。
    def test_escape_in_last_four_bytes_is_copied_literally(self):
        source = bytes([0x10, 0x20, 0xED, 0xED, 0x05, 0x41])
        output, _ = _decode(source)
        assert output == source

    def test_block_ending_with_ed_ed_is_literal(self):
        source = bytes([0x10, 0x20, 0x30, 0x40, 0x50, 0x60, 0xED, 0xED])
        output, _ = _decode(source)
        assert output == source

    # @intent:test_case_terminator 00 ED ED 00 で展開が打ち切られ、以降のバイトが無視されることを検証します。
    def test_terminator_stops_decoding(self):
        source = bytes([0x01, 0x02, 0x00, 0xED, 0xED, 0x00, 0x03, 0x04, 0x05, 0x06])
        output, _ = _decode(source)
        assert output == bytes([0x01, 0x02])

    def test_terminator_at_last_possible_position(self):
        source = bytes([0x01, 0x02, 0x03, 0x00, 0xED, 0xED, 0x00])
        output, _ = _decode(source)
        assert output == bytes([0x01, 0x02, 0x03])

    # @intent:test_case_uncompressed 非圧縮データは内容に関係なく16384バイトそのままコピーされることを検証します。
    def test_uncompressed_copies_exactly_one_page(self):
        source = bytes([0x00, 0xED, 0xED, 0x00]) * (PAGE_SIZE // 4) + b"extra"
        output, cursor = _decode(source, compressed=False)
        assert output == source[:PAGE_SIZE]
        assert cursor.written == PAGE_SIZE

    def test_uncompressed_short_source_is_truncated(self):
        with pytest.raises(TruncatedBlockError):
            _decode(bytes(100), compressed=False)

    # @intent:test_case_capacity 書き込み先の容量を超える展開は CapacityExceededError になることを検証します。
    def test_run_exceeding_capacity_raises(self):
        source = bytes([0xED, 0xED, 0xFF, 0x11, 0x00, 0x00, 0x00, 0x00, 0x00])
        with pytest.raises(CapacityExceededError):
            _decode(source, capacity=100)

    def test_capacity_is_checked_before_writing(self):
        memory = bytearray(16)
        cursor = MemoryCursor(memory, 0, 8)
        with pytest.raises(CapacityExceededError):
            decompress_page(bytes([0xED, 0xED, 0x0A, 0x77, 0x01, 0x02, 0x03, 0x04]), cursor, True)
        assert memory == bytearray(16)


class TestRoundTrip:
    # @intent:test_case_round_trip 慣例に従って圧縮したデータが元通りに展開されることを検証します。
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_random_page_with_runs(self, seed):
        rng = random.Random(seed)
        data = bytearray()
        while len(data) < PAGE_SIZE:
            if rng.random() < 0.3:
                data += bytes([rng.choice([0x00, 0xED, 0xFF, rng.randrange(256)])]) * rng.randrange(1, 400)
            else:
                data += bytes(rng.randrange(256) for _ in range(rng.randrange(1, 40)))
        data = bytes(data[:PAGE_SIZE])

        output, _ = _decode(compress(data))
        assert output == data

    @pytest.mark.parametrize("data", [
        bytes(PAGE_SIZE),
        bytes([0xED]) * PAGE_SIZE,
        bytes([0xED, 0x00]) * 100,
        bytes([0x01, 0xED, 0xED]),
        bytes([0x00, 0xED]) * 3 + bytes(7),
    ])
    def test_edge_patterns(self, data):
        output, _ = _decode(compress(data))
        assert output == data


class TestCopyPage:
    def test_copy_custom_length(self):
        memory = bytearray(32)
        cursor = MemoryCursor(memory, 0, 32)
        assert copy_page(bytes(range(40)), cursor, 32) == 32
        assert memory == bytearray(range(32))
