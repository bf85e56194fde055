# zx_snapshot/loader/pages.py
"""
ページブロックの列挙とページ番号からの書き込み先解決。

ページ番号 → 書き込み先の対応は起動時に一度だけ構築される不変の表であり、
ルーター自身は可変状態を持ちません。
"""
import struct
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from zx_snapshot.common.errors import TruncatedBlockError
from zx_snapshot.loader.rle import PAGE_SIZE
from zx_snapshot.transport.cursor import MemoryCursor

BLOCK_HEADER_SIZE = 3
UNCOMPRESSED_MARKER = 0xFFFF


class PageKind(Enum):
    RAM = "RAM"
    DISPLAY = "DISPLAY"


# @intent:data_structure ページ番号が指す物理アドレスと種別。
@dataclass(frozen=True)
class PageTarget:
    page_id: int
    kind: PageKind
    address: int


# @intent:data_structure ページ番号の解決結果。known が False の場合は互換用の既定書き込み先です。
@dataclass(frozen=True)
class Destination:
    page_id: int
    kind: PageKind
    cursor: MemoryCursor
    known: bool = True


# @intent:data_structure バイトストリーム中の1ページブロック。読み込み後は破棄される一時的なデータです。
@dataclass(frozen=True)
class PageBlock:
    page_id: int
    offset: int  # ペイロードの開始位置
    length: int  # 物理的に消費するバイト数 (非圧縮なら常に16384)
    compressed: bool

    @property
    def end(self) -> int:
        return self.offset + self.length


# @intent:responsibility ページ番号を書き込み先カーソルに解決します。
class PageRouter:
    """
    ページ番号から書き込み先を解決する静的なルーティング表。
    DISPLAY 種別のページは一時領域へ、RAM 種別のページは主記憶の固定オフセットへ解決されます。
    """
    def __init__(self, targets: Iterable[PageTarget], ram_start: int):
        self._targets: Mapping[int, PageTarget] = MappingProxyType({t.page_id: t for t in targets})
        self._ram_start = ram_start

    @property
    def targets(self) -> Mapping[int, PageTarget]:
        return self._targets

    def lookup(self, page_id: int) -> Optional[PageTarget]:
        return self._targets.get(page_id)

    # @intent:responsibility 画面を運ぶページの定義を返します。
    @property
    def display_target(self) -> Optional[PageTarget]:
        for target in self._targets.values():
            if target.kind is PageKind.DISPLAY:
                return target
        return None

    # @intent:responsibility ページ番号に対応する書き込み先カーソルを生成します。
    # @intent:pre-condition scratch は少なくとも16384バイトの一時領域です。
    def route(self, page_id: int, memory: bytearray, scratch: bytearray, default_offset: int = 0) -> Destination:
        """
        ページ番号を書き込み先に解決します。
        未知のページ番号は拒否せず、現在選択中の主記憶オフセット (default_offset) へ解決します。
        """
        target = self._targets.get(page_id)
        if target is None:
            capacity = min(PAGE_SIZE, len(memory) - default_offset)
            return Destination(page_id, PageKind.RAM, MemoryCursor(memory, default_offset, capacity), known=False)

        if target.kind is PageKind.DISPLAY:
            return Destination(page_id, target.kind, MemoryCursor(scratch, 0, PAGE_SIZE))

        return Destination(page_id, target.kind, MemoryCursor(memory, target.address - self._ram_start, PAGE_SIZE))


# @intent:responsibility start から始まるページブロックを順に列挙します。
def iter_page_blocks(data: bytes, start: int) -> Iterator[PageBlock]:
    """
    3バイトのブロックヘッダー（2バイト長 + 1バイトページ番号）を読み、PageBlockを返します。
    長さ 0xFFFF は非圧縮16384バイトを意味します。
    バッファの終端、または長さ0のブロックでストリームは終了します。
    """
    offset = start
    end = len(data)
    while offset < end:
        remaining = end - offset
        if remaining < BLOCK_HEADER_SIZE:
            # ページ番号の無い長さ0は終端とみなす
            if not any(data[offset:end]):
                return
            raise TruncatedBlockError(
                f"Block header at offset {offset:#x} needs {BLOCK_HEADER_SIZE} bytes but only {remaining} remain.",
                offset=offset,
                declared=BLOCK_HEADER_SIZE,
                available=remaining,
            )

        length, page_id = struct.unpack_from("<HB", data, offset)
        if length == 0:
            return

        compressed = length != UNCOMPRESSED_MARKER
        size = length if compressed else PAGE_SIZE
        payload = offset + BLOCK_HEADER_SIZE
        available = end - payload
        if size > available:
            raise TruncatedBlockError(
                f"Page {page_id} at offset {offset:#x} declares {size} bytes but only {available} remain.",
                offset=offset,
                declared=size,
                available=available,
            )

        yield PageBlock(page_id=page_id, offset=payload, length=size, compressed=compressed)
        offset = payload + size
