"""
スナップショット読み込み時のエラー分類を定義するモジュール。

全てのエラーは SnapshotError (ValueError) を基底とし、呼び出し元が結果を
判別できるように LoadStatus を保持します。
"""
from enum import Enum


# @intent:responsibility 読み込み結果の種別を定義します。
class LoadStatus(Enum):
    OK = "OK"
    MALFORMED_HEADER = "MALFORMED_HEADER"
    TRUNCATED_BLOCK = "TRUNCATED_BLOCK"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INVALID_SCREEN = "INVALID_SCREEN"


class SnapshotError(ValueError):
    """スナップショットの形式違反を表す例外の基底クラス。"""
    status = LoadStatus.MALFORMED_HEADER


# @intent:responsibility 固定ヘッダーを読むのに必要なバイト数が足りないことを表します。
class MalformedHeaderError(SnapshotError):
    status = LoadStatus.MALFORMED_HEADER


# @intent:responsibility ブロックの宣言長が残りのバッファを超えていることを表します。
class TruncatedBlockError(SnapshotError):
    status = LoadStatus.TRUNCATED_BLOCK

    def __init__(self, message: str, offset: int = 0, declared: int = 0, available: int = 0):
        super().__init__(message)
        self.offset = offset
        self.declared = declared
        self.available = available


# @intent:responsibility 展開結果が書き込み先領域の容量を超えることを表します。
class CapacityExceededError(SnapshotError):
    status = LoadStatus.CAPACITY_EXCEEDED

    def __init__(self, message: str, capacity: int = 0):
        super().__init__(message)
        self.capacity = capacity


# @intent:responsibility .scr 画面データの長さが不正であることを表します。
class InvalidScreenError(SnapshotError):
    status = LoadStatus.INVALID_SCREEN
