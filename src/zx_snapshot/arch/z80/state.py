# zx_snapshot/arch/z80/state.py
"""
Z80 CPU固有の状態定義。

このモジュールは、スナップショットから復元されるZ80 CPUのレジスタ、
割り込み状態を保持するデータ構造を定義します。
"""
from dataclasses import dataclass
from typing import Dict, List

from zx_snapshot.core.state import CpuState
from zx_snapshot.common.types import RegisterInfo, RegisterLayoutInfo


# @intent:accessor 2つの8bitレジスタを1つの16bitレジスタペアとして読み書きするデスクリプタ。
class RegisterPair:
    def __init__(self, high: str, low: str):
        self.high = high
        self.low = low

    def __get__(self, state, owner=None):
        if state is None:
            return self
        return (getattr(state, self.high) << 8) | getattr(state, self.low)

    def __set__(self, state, value: int) -> None:
        setattr(state, self.high, (value >> 8) & 0xFF)
        setattr(state, self.low, value & 0xFF)


# @intent:responsibility Z80 CPUの全てのレジスタと割り込み状態を保持します。
@dataclass
class Z80CpuState(CpuState):
    """
    Z80 CPUのレジスタ状態を保持するデータクラス。
    CpuStateを拡張し、Z80固有のレジスタを含みます。
    エミュレータが所有し、スナップショットの適用時にその場で更新されます。
    """
    # Main registers
    a: int = 0x00
    b: int = 0x00
    c: int = 0x00
    d: int = 0x00
    e: int = 0x00
    h: int = 0x00
    l: int = 0x00
    f: int = 0x00  # Flag register

    # Alternate registers
    a_: int = 0x00
    b_: int = 0x00
    c_: int = 0x00
    d_: int = 0x00
    e_: int = 0x00
    h_: int = 0x00
    l_: int = 0x00
    f_: int = 0x00

    # Index registers
    ix: int = 0x0000
    iy: int = 0x0000

    # Special purpose registers
    i: int = 0x00  # Interrupt Vector
    r: int = 0x00  # Refresh Register

    # Interrupt state
    iff1: bool = False
    iff2: bool = False
    im: int = 0  # Interrupt mode (0, 1, 2)

    # 16-bit register pairs
    af = RegisterPair("a", "f")
    bc = RegisterPair("b", "c")
    de = RegisterPair("d", "e")
    hl = RegisterPair("h", "l")
    af_ = RegisterPair("a_", "f_")
    bc_ = RegisterPair("b_", "c_")
    de_ = RegisterPair("d_", "e_")
    hl_ = RegisterPair("h_", "l_")

    # @intent:responsibility レジスタ名と現在値の対応表を返します。UIの表示更新に使用されます。
    def get_register_map(self) -> Dict[str, int]:
        return {
            "AF": self.af, "BC": self.bc, "DE": self.de, "HL": self.hl,
            "AF'": self.af_, "BC'": self.bc_, "DE'": self.de_, "HL'": self.hl_,
            "IX": self.ix, "IY": self.iy, "SP": self.sp, "PC": self.pc,
            "I": self.i, "R": self.r, "IM": self.im,
            "IFF1": int(self.iff1), "IFF2": int(self.iff2),
        }

    # @intent:responsibility UIがレジスタ表示を動的に構築するためのレイアウト情報を返します。
    @staticmethod
    def get_register_layout() -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("Main Registers", [
                RegisterInfo("AF", 16), RegisterInfo("BC", 16), RegisterInfo("DE", 16), RegisterInfo("HL", 16)
            ]),
            RegisterLayoutInfo("Alternate Registers", [
                RegisterInfo("AF'", 16), RegisterInfo("BC'", 16), RegisterInfo("DE'", 16), RegisterInfo("HL'", 16)
            ]),
            RegisterLayoutInfo("Index & Control", [
                RegisterInfo("IX", 16), RegisterInfo("IY", 16), RegisterInfo("SP", 16), RegisterInfo("PC", 16)
            ]),
            RegisterLayoutInfo("Special", [
                RegisterInfo("I", 8), RegisterInfo("R", 8), RegisterInfo("IM", 8),
                RegisterInfo("IFF1", 8), RegisterInfo("IFF2", 8)
            ])
        ]
