# zx_snapshot/loader/rle.py
"""
.z80 形式のランレングス展開。

圧縮されたページは ED ED nn vv (「vv を nn 回」) のエスケープ列と、
それ以外のリテラルバイトから構成されます。
00 ED ED 00 はブロックの早期終端を表します。
"""
from zx_snapshot.common.errors import TruncatedBlockError
from zx_snapshot.transport.cursor import MemoryCursor

PAGE_SIZE = 0x4000  # 16KB
ESCAPE = 0xED
# エスケープ列と終端列の長さ
SEQUENCE_LENGTH = 4


# @intent:responsibility 1ページ分のデータを展開（またはそのままコピー）し、カーソルを進めます。
# @intent:post-condition 戻り値はカーソルに書き込まれたバイト数です。
def decompress_page(source: bytes, cursor: MemoryCursor, is_compressed: bool) -> int:
    """
    ページデータをカーソルの位置へ展開します。
    is_compressed が False の場合は、ソース長に関係なく 16384 バイトをそのままコピーします。
    """
    if not is_compressed:
        return copy_page(source, cursor)

    start = cursor.offset
    length = len(source)
    i = 0
    while i < length:
        # 終端列は最低4バイトの先読みがある場合のみ検出
        if (i <= length - SEQUENCE_LENGTH
                and source[i] == 0x00 and source[i + 1] == ESCAPE
                and source[i + 2] == ESCAPE and source[i + 3] == 0x00):
            break

        # エスケープ列はブロック末尾の4バイトでは開始できない
        if i < length - SEQUENCE_LENGTH and source[i] == ESCAPE and source[i + 1] == ESCAPE:
            cursor.fill(source[i + 3], source[i + 2])
            i += SEQUENCE_LENGTH
            continue

        cursor.write_byte(source[i])
        i += 1

    return cursor.offset - start


# @intent:responsibility 非圧縮ページを length バイトそのままコピーします。
def copy_page(source: bytes, cursor: MemoryCursor, length: int = PAGE_SIZE) -> int:
    if len(source) < length:
        raise TruncatedBlockError(
            f"Uncompressed page needs {length} bytes but only {len(source)} are available.",
            declared=length,
            available=len(source),
        )
    cursor.write_bytes(bytes(source[:length]))
    return length
