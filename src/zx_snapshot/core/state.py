# zx_snapshot/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    スナップショットから復元される最小限の共通レジスタ（PC/SP）のみを持ち、
    具体的なCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer
