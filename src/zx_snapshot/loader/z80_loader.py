# zx_snapshot/loader/z80_loader.py
"""
.z80 スナップショットローダー。

ヘッダーを解析してCPU状態に適用し、続くページブロックを順に展開して主記憶へ配置します。
画面ページは主記憶へ再配置する前にスクリーンショットとして取り出されます。
読み込みは完全にバッファされた入力に対する単一パスの同期処理です。
"""
import logging
from typing import Optional

from zx_snapshot.common.errors import SnapshotError
from zx_snapshot.common.types import ColorConverter
from zx_snapshot.core.machine import ZxMachine
from zx_snapshot.display.screen import ScreenshotSink, convert_sinclair_color, extract_screenshot
from zx_snapshot.loader.header import SnapshotHeader, parse_header
from zx_snapshot.loader.pages import PageKind, PageRouter, iter_page_blocks
from zx_snapshot.loader.result import LoadResult
from zx_snapshot.loader.rle import PAGE_SIZE, copy_page, decompress_page
from zx_snapshot.loader.state_applier import apply_header
from zx_snapshot.transport.cursor import MemoryCursor

logger = logging.getLogger(__name__)

# バージョン1は 0x4000-0xFFFF を1つの48KBブロックとして保持する
VERSION1_START = 0x4000
VERSION1_MEMORY_SIZE = 0xC000


class Z80SnapshotLoader:
    """
    .z80 形式のスナップショットを解析し、マシン状態へ復元するローダー。
    失敗時は LoadResult に理由を記録して返し、それまでに適用した状態は元に戻しません。
    """
    def __init__(self, router: PageRouter, color_converter: ColorConverter = convert_sinclair_color):
        self._router = router
        self._color_converter = color_converter

    def load_z80(self, file_path: str, machine: ZxMachine,
                 screenshot_sink: Optional[ScreenshotSink] = None) -> LoadResult:
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.load_bytes(data, machine, screenshot_sink)

    # @intent:responsibility 読み込み済みのバイト列からスナップショットを復元します。
    def load_bytes(self, data: bytes, machine: ZxMachine,
                   screenshot_sink: Optional[ScreenshotSink] = None) -> LoadResult:
        result = LoadResult()
        view = memoryview(data)
        try:
            header = parse_header(data)
            result.header = header
            machine.border_color = apply_header(
                machine.state, header, self._color_converter, machine.config.legacy_border_collapse
            )
            logger.debug("Loaded version %d header, pc=%#06x, data at %#x",
                         header.version, header.pc, header.data_offset)

            if header.version == 1:
                self._load_version1(view, header, machine, screenshot_sink, result)
            else:
                self._load_pages(view, header, machine, screenshot_sink, result)
        except SnapshotError as e:
            result.status = e.status
            result.error = e
            logger.warning("Snapshot load failed (%s): %s", e.status.value, e)
        return result

    def _load_pages(self, data: memoryview, header: SnapshotHeader, machine: ZxMachine,
                    sink: Optional[ScreenshotSink], result: LoadResult) -> None:
        memory = machine.ram.get_buffer()
        scratch = bytearray(PAGE_SIZE)
        current_offset = 0

        for block in iter_page_blocks(data, header.data_offset):
            destination = self._router.route(block.page_id, memory, scratch, current_offset)
            if not destination.known:
                logger.warning("Unknown page id %d at offset %#x, writing to main memory at %#06x",
                               block.page_id, block.offset, machine.ram_start + current_offset)
                result.unknown_pages.append(block.page_id)
            elif destination.kind is PageKind.RAM:
                current_offset = destination.cursor.start

            written = decompress_page(data[block.offset:block.end], destination.cursor, block.compressed)
            logger.debug("Page %d: %d bytes at %#x -> %d bytes (%s)", block.page_id, block.length,
                         block.offset, written, "compressed" if block.compressed else "raw")

            if destination.kind is PageKind.DISPLAY:
                target = self._router.lookup(block.page_id)
                result.screen = self._relocate_display(scratch, target.address, machine, sink)
                scratch[:] = bytes(PAGE_SIZE)

            result.blocks.append(block)

    # @intent:responsibility バージョン1の48KBブロックを展開します。
    def _load_version1(self, data: memoryview, header: SnapshotHeader, machine: ZxMachine,
                       sink: Optional[ScreenshotSink], result: LoadResult) -> None:
        block = bytearray(VERSION1_MEMORY_SIZE)
        cursor = MemoryCursor(block, 0, VERSION1_MEMORY_SIZE)
        payload = data[header.data_offset:]
        if header.is_compressed:
            decompress_page(payload, cursor, True)
        else:
            copy_page(payload, cursor, VERSION1_MEMORY_SIZE)
        result.screen = self._relocate_display(block, VERSION1_START, machine, sink)

    # @intent:responsibility 画面部分をスクリーンショットとして取り出し、残りを主記憶へ再配置します。
    # @intent:pre-condition スクリーンショットの取り出しは再配置より前に行います。
    def _relocate_display(self, page: bytearray, address: int, machine: ZxMachine,
                          sink: Optional[ScreenshotSink]) -> bytes:
        screen = extract_screenshot(page, sink)

        # 画面部分の後ろのうち、主記憶と重なる範囲だけを書き込む
        tail_start = address + machine.config.display.screen_length
        tail_end = address + len(page)
        low = max(tail_start, machine.ram_start)
        high = min(tail_end, machine.ram_start + machine.ram.get_size())
        copied = max(0, high - low)
        if copied:
            cursor = MemoryCursor(machine.ram.get_buffer(), machine.ram_offset(low), copied)
            cursor.write_bytes(bytes(page[low - address:high - address]))
        dropped = max(0, tail_end - tail_start) - copied
        if dropped:
            logger.warning("%d bytes of the relocated range %#06x-%#06x lie outside main memory and were not loaded",
                           dropped, tail_start, tail_end - 1)
        return screen
