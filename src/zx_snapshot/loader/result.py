# zx_snapshot/loader/result.py
"""
スナップショット読み込み結果。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from zx_snapshot.common.errors import LoadStatus, SnapshotError
from zx_snapshot.loader.header import SnapshotHeader
from zx_snapshot.loader.pages import PageBlock


# @intent:responsibility 読み込みの成否と、失敗時点までに適用された内容を呼び出し元へ返します。
# @intent:post-condition 失敗時も適用済みの状態は残り、blocks は適用済みのブロックを列挙します。
@dataclass
class LoadResult:
    status: LoadStatus = LoadStatus.OK
    header: Optional[SnapshotHeader] = None
    blocks: List[PageBlock] = field(default_factory=list)
    unknown_pages: List[int] = field(default_factory=list)
    screen: Optional[bytes] = None  # 画面ページの先頭6912バイト
    error: Optional[SnapshotError] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.OK

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise self.error
