# zx_snapshot/core/machine.py
"""
エミュレータのマシンコンテキスト。

スナップショットの復元先となるCPU状態、主記憶、派生ハードウェア状態（ボーダー色）をまとめます。
これらはエミュレータが所有し、ローダーの処理よりも長く存続します。
"""
from dataclasses import dataclass
from typing import Any

from zx_snapshot.arch.z80.state import Z80CpuState
from zx_snapshot.config.models import MachineConfig
from zx_snapshot.transport.bus import Bus, RAM


# @intent:responsibility スナップショット適用の対象となるマシン状態一式を保持します。
@dataclass
class ZxMachine:
    config: MachineConfig
    state: Z80CpuState
    bus: Bus
    ram: RAM
    border_color: Any = None  # 表示サブシステム固有の色値

    @property
    def ram_start(self) -> int:
        return self.config.ram.start

    # @intent:responsibility 物理アドレスを主記憶バッファ内のオフセットに変換します。
    def ram_offset(self, address: int) -> int:
        offset = address - self.ram_start
        if not 0 <= offset < self.ram.get_size():
            raise IndexError(f"Address {address:#06x} is outside main memory.")
        return offset
