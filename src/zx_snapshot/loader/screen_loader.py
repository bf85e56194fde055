# zx_snapshot/loader/screen_loader.py
"""
プレビュー用の画面データ読み込み。

.scr ファイル（6912バイトの生の画面データ）、またはスナップショットの画面ページだけを展開して、
スナップショットを選択する際のプレビュー画像を得ます。
"""
from pathlib import Path
from typing import Optional

from zx_snapshot.common.errors import InvalidScreenError
from zx_snapshot.display.screen import SCREEN_SIZE
from zx_snapshot.loader.header import parse_header
from zx_snapshot.loader.pages import PageKind, PageRouter, iter_page_blocks
from zx_snapshot.loader.rle import PAGE_SIZE, copy_page, decompress_page
from zx_snapshot.loader.z80_loader import VERSION1_MEMORY_SIZE
from zx_snapshot.transport.cursor import MemoryCursor

SCREEN_SUFFIXES = (".scr", ".SCR")


def load_scr(data: bytes) -> bytes:
    if len(data) != SCREEN_SIZE:
        raise InvalidScreenError(f"Screen file must be {SCREEN_SIZE} bytes, got {len(data)}.")
    return bytes(data)


class ScreenPreviewLoader:
    """
    スナップショットのCPU状態や主記憶に触れずに、画面データのみを取り出すローダー。
    """
    def __init__(self, router: PageRouter):
        self._router = router

    # @intent:responsibility スナップショットの画面ページだけを展開し、先頭6912バイトを返します。
    # @intent:post-condition 画面ページが含まれない場合は None を返します。
    def load_screen_from_z80(self, data: bytes) -> Optional[bytes]:
        header = parse_header(data)
        view = memoryview(data)

        if header.version == 1:
            memory = bytearray(VERSION1_MEMORY_SIZE)
            payload = view[header.data_offset:]
            if header.is_compressed:
                decompress_page(payload, MemoryCursor(memory, 0, VERSION1_MEMORY_SIZE), True)
            else:
                copy_page(payload, MemoryCursor(memory, 0, VERSION1_MEMORY_SIZE), VERSION1_MEMORY_SIZE)
            return bytes(memory[:SCREEN_SIZE])

        for block in iter_page_blocks(view, header.data_offset):
            target = self._router.lookup(block.page_id)
            if target is not None and target.kind is PageKind.DISPLAY:
                scratch = bytearray(PAGE_SIZE)
                decompress_page(view[block.offset:block.end], MemoryCursor(scratch, 0, PAGE_SIZE), block.compressed)
                return bytes(scratch[:SCREEN_SIZE])
        return None

    # @intent:responsibility 同名の .scr ファイルがあればそれを、なければスナップショット自身の画面を返します。
    def find_preview_screen(self, snapshot_path: str) -> Optional[bytes]:
        path = Path(snapshot_path)
        for suffix in SCREEN_SUFFIXES:
            screen_path = path.with_suffix(suffix)
            if screen_path.is_file():
                return load_scr(screen_path.read_bytes())
        return self.load_screen_from_z80(path.read_bytes())
