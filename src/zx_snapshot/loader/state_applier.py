# zx_snapshot/loader/state_applier.py
"""
解析済みヘッダーをCPU状態へ適用するモジュール。
"""
from typing import Any

from zx_snapshot.arch.z80.state import Z80CpuState
from zx_snapshot.common.types import ColorConverter
from zx_snapshot.loader.header import SnapshotHeader


# @intent:responsibility ボーダー色のインデックス(0-7)を求めます。
# legacy_border_collapse が真の場合は (Flags1 & 0x0E) > 1 の真偽値(0/1)を返します。
def border_color_index(header: SnapshotHeader, legacy_border_collapse: bool = False) -> int:
    if legacy_border_collapse:
        return int((header.flags1 & 0x0E) > 1)
    return header.border


# @intent:responsibility ヘッダーの各フィールドをCPU状態へコピーし、ボーダー色を返します。
# @intent:pre-condition header は parse_header() で解析済みであること。
def apply_header(
    state: Z80CpuState,
    header: SnapshotHeader,
    color_converter: ColorConverter,
    legacy_border_collapse: bool = False,
) -> Any:
    """
    ヘッダーの値をCPU状態に適用します。
    Rレジスタのbit7はFlags1のbit0から、割り込みモードはFlags2の下位2ビットから求めます。
    戻り値は color_converter が返すボーダー色です。
    """
    state.a = header.a
    state.f = header.f
    state.bc = header.bc
    state.hl = header.hl
    state.de = header.de
    state.sp = header.sp
    state.pc = header.pc
    state.i = header.i
    state.r = (header.r & 0x7F) | (header.refresh_high_bit << 7)
    state.im = header.interrupt_mode
    state.bc_ = header.bc_
    state.de_ = header.de_
    state.hl_ = header.hl_
    state.af_ = header.f_ | (header.a_ << 8)
    state.iy = header.iy
    state.ix = header.ix
    state.iff1 = header.iff1 != 0
    state.iff2 = header.iff2 != 0

    return color_converter(border_color_index(header, legacy_border_collapse))
