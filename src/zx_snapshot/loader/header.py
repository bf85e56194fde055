# zx_snapshot/loader/header.py
"""
.z80 スナップショットの固定ヘッダー解析。

ヘッダーはメモリ配置の再解釈ではなく、名前付きオフセットと幅・エンディアンを
明示したフィールド表に従って1フィールドずつ読み出します。
"""
import struct
from dataclasses import dataclass
from typing import Optional, Tuple

from zx_snapshot.common.errors import MalformedHeaderError

# バージョン1の固定ヘッダー長。バージョン2/3では直後に追加ヘッダー長が続く。
FIXED_HEADER_SIZE = 30
ADDITIONAL_LENGTH_OFFSET = 30
# 追加ヘッダーの基点 (追加ヘッダー長フィールドの直後)
EXTENDED_HEADER_BASE = 32
PC_OFFSET = 32
HARDWARE_MODE_OFFSET = 34

# (フィールド名, オフセット, structフォーマット) リトルエンディアン
_FIELDS: Tuple[Tuple[str, int, str], ...] = (
    ("a", 0, "B"),
    ("f", 1, "B"),
    ("bc", 2, "H"),
    ("hl", 4, "H"),
    ("version_word", 6, "H"),
    ("sp", 8, "H"),
    ("i", 10, "B"),
    ("r", 11, "B"),
    ("flags1", 12, "B"),
    ("de", 13, "H"),
    ("bc_", 15, "H"),
    ("de_", 17, "H"),
    ("hl_", 19, "H"),
    ("a_", 21, "B"),
    ("f_", 22, "B"),
    ("iy", 23, "H"),
    ("ix", 25, "H"),
    ("iff1", 27, "B"),
    ("iff2", 28, "B"),
    ("flags2", 29, "B"),
)

# Flags2 bit 6-7 の意味
JOYSTICK_TYPES = ("Cursor/Protek/AGF", "Kempston", "Sinclair 2 Left", "Sinclair 2 Right")


# @intent:responsibility スナップショット先頭の固定ヘッダーを不変に保持します。
@dataclass(frozen=True)
class SnapshotHeader:
    """
    .z80 ファイルのヘッダー。読み込みごとに一度だけ解析され、以後変更されません。
    バージョン1ではプログラムカウンタはオフセット6に、バージョン2/3ではオフセット32にあります。
    """
    a: int
    f: int
    bc: int
    hl: int
    version_word: int
    sp: int
    i: int
    r: int
    flags1: int
    de: int
    bc_: int
    de_: int
    hl_: int
    a_: int
    f_: int
    iy: int
    ix: int
    iff1: int
    iff2: int
    flags2: int
    pc: int
    additional_length: int = 0
    hardware_mode: Optional[int] = None

    @property
    def version(self) -> int:
        if self.version_word != 0:
            return 1
        if self.additional_length >= 54:
            return 3
        return 2

    # @intent:responsibility 最初のページブロックが始まるバイトオフセットを返します。
    @property
    def data_offset(self) -> int:
        if self.version == 1:
            return FIXED_HEADER_SIZE
        return EXTENDED_HEADER_BASE + self.additional_length

    @property
    def refresh_high_bit(self) -> int:
        return self.flags1 & 0x01

    # ボーダー色 (Flags1 bit 1-3)
    @property
    def border(self) -> int:
        return (self.flags1 >> 1) & 0x07

    # バージョン1のみ: Flags1 bit 5 がセットならメモリブロックは圧縮されている
    @property
    def is_compressed(self) -> bool:
        return bool(self.flags1 & 0x20)

    @property
    def interrupt_mode(self) -> int:
        return self.flags2 & 0x03

    @property
    def issue2_emulation(self) -> bool:
        return bool(self.flags2 & 0x04)

    @property
    def double_interrupt_frequency(self) -> bool:
        return bool(self.flags2 & 0x08)

    @property
    def joystick_type(self) -> str:
        return JOYSTICK_TYPES[(self.flags2 >> 6) & 0x03]


def _read_field(data: bytes, offset: int, fmt: str) -> int:
    return struct.unpack_from("<" + fmt, data, offset)[0]


# @intent:responsibility バイト列の先頭からヘッダーを解析します。
# @intent:pre-condition data は読み込み済みのスナップショット全体です。
def parse_header(data: bytes) -> SnapshotHeader:
    """
    スナップショットのヘッダーを解析して SnapshotHeader を返します。
    バッファが固定ヘッダー（またはバージョン2/3の追加ヘッダー）より短い場合は
    MalformedHeaderError を送出します。
    """
    if len(data) < FIXED_HEADER_SIZE:
        raise MalformedHeaderError(
            f"Snapshot is {len(data)} bytes, shorter than the {FIXED_HEADER_SIZE}-byte fixed header."
        )

    fields = {name: _read_field(data, offset, fmt) for name, offset, fmt in _FIELDS}

    # 互換性のため、Flags1 が 255 の場合は 1 とみなす
    if fields["flags1"] == 0xFF:
        fields["flags1"] = 0x01

    if fields["version_word"] != 0:
        return SnapshotHeader(pc=fields["version_word"], **fields)

    if len(data) < PC_OFFSET + 2:
        raise MalformedHeaderError(
            f"Snapshot is {len(data)} bytes, too short for the extended header length and program counter."
        )
    additional_length = _read_field(data, ADDITIONAL_LENGTH_OFFSET, "H")
    if len(data) < EXTENDED_HEADER_BASE + additional_length:
        raise MalformedHeaderError(
            f"Extended header declares {additional_length} bytes but only "
            f"{len(data) - EXTENDED_HEADER_BASE} are available."
        )

    hardware_mode = None
    if additional_length > HARDWARE_MODE_OFFSET - EXTENDED_HEADER_BASE:
        hardware_mode = data[HARDWARE_MODE_OFFSET]

    return SnapshotHeader(
        pc=_read_field(data, PC_OFFSET, "H"),
        additional_length=additional_length,
        hardware_mode=hardware_mode,
        **fields,
    )
