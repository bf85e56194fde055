"""
レイヤーをまたいで使われる型の定義。
"""
from typing import Any, Callable, List, NamedTuple

# @intent:data_structure 表示サブシステムが提供する色変換関数の型。
# Sinclairカラーインデックス(0-7)を受け取り、レンダラ固有の色値を返します。
ColorConverter = Callable[[int], Any]

# @intent:data_structure レジスタパネルの1項目。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # 8 or 16

# @intent:data_structure レジスタパネルのグループ（"Main Registers" など）。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
