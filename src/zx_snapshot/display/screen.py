# zx_snapshot/display/screen.py
"""
ZX Spectrum 画面形式の変換。

ピクセル(6144バイト)とアトリビュート(768バイト)からなる画面データを
PySide6 の QImage に変換し、Sinclair パレットの色変換を提供します。
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from PySide6.QtGui import QColor, QImage

SCREEN_WIDTH = 256
SCREEN_HEIGHT = 192
BITMAP_SIZE = 6144
ATTRIBUTE_SIZE = 768
SCREEN_SIZE = BITMAP_SIZE + ATTRIBUTE_SIZE  # 6912

_NORMAL_LEVEL = 0xD7
_BRIGHT_LEVEL = 0xFF


# @intent:responsibility Sinclairカラーインデックス(0-7)をRGBに変換します。
# ビット0が青、ビット1が赤、ビット2が緑です。
def sinclair_rgb(index: int, bright: bool = False) -> Tuple[int, int, int]:
    level = _BRIGHT_LEVEL if bright else _NORMAL_LEVEL
    index &= 0x07
    red = level if index & 0x02 else 0
    green = level if index & 0x04 else 0
    blue = level if index & 0x01 else 0
    return red, green, blue


# @intent:responsibility 表示サブシステムの色変換関数。レンダラ固有の色値(QColor)を返します。
def convert_sinclair_color(index: int, bright: bool = False) -> QColor:
    return QColor(*sinclair_rgb(index, bright))


# [bright][index] -> RGB bytes
_PALETTE: List[List[bytes]] = [
    [bytes(sinclair_rgb(index, bright)) for index in range(8)]
    for bright in (False, True)
]


# @intent:responsibility 画面上の座標 (x, y) に対応するピクセルデータのオフセットを返します。
# y の上位2ビットが画面の1/3区画、下位3ビットが文字内の行、中位3ビットが文字行を選びます。
def bitmap_offset(x: int, y: int) -> int:
    return ((y & 0xC0) << 5) | ((y & 0x07) << 8) | ((y & 0x38) << 2) | (x >> 3)


def attribute_offset(x: int, y: int) -> int:
    return BITMAP_SIZE + (y >> 3) * 32 + (x >> 3)


# @intent:responsibility 画面データを 256x192 の RGB888 バイト列に変換します。
# @intent:pre-condition screen は少なくとも6912バイトです。
def render_screen_rgb(screen: bytes) -> bytes:
    """
    画面データをRGB888のバイト列へ変換します。
    FLASH属性は反転していない位相で描画します。
    """
    if len(screen) < SCREEN_SIZE:
        raise ValueError(f"Screen data must be at least {SCREEN_SIZE} bytes, got {len(screen)}.")

    rgb = bytearray(SCREEN_WIDTH * SCREEN_HEIGHT * 3)
    for y in range(SCREEN_HEIGHT):
        row_base = bitmap_offset(0, y)
        attr_base = attribute_offset(0, y)
        p = y * SCREEN_WIDTH * 3
        for column in range(SCREEN_WIDTH // 8):
            bits = screen[row_base + column]
            attr = screen[attr_base + column]
            palette = _PALETTE[1 if attr & 0x40 else 0]
            ink = palette[attr & 0x07]
            paper = palette[(attr >> 3) & 0x07]
            for bit in range(8):
                rgb[p:p + 3] = ink if bits & (0x80 >> bit) else paper
                p += 3
    return bytes(rgb)


def render_screen(screen: bytes) -> QImage:
    rgb = render_screen_rgb(screen)
    image = QImage(rgb, SCREEN_WIDTH, SCREEN_HEIGHT, SCREEN_WIDTH * 3, QImage.Format.Format_RGB888)
    # QImage は渡したバッファを参照するだけなので、所有するコピーを返す
    return image.copy()


# @intent:responsibility スクリーンショットの表示先（外部の表示出力）を表す抽象インターフェース。
class ScreenshotSink(ABC):
    @abstractmethod
    def show_screenshot(self, screen: bytes) -> None:
        """6912バイトの画面データを受け取り、表示または保持します。"""
        pass


# @intent:responsibility 受け取った画面データを QImage に描画して保持します。
class QImageScreenshotSink(ScreenshotSink):
    def __init__(self):
        self.image: Optional[QImage] = None
        self.screen: Optional[bytes] = None

    def show_screenshot(self, screen: bytes) -> None:
        self.screen = bytes(screen)
        self.image = render_screen(self.screen)


# @intent:responsibility 展開済みの画面ページから画面部分を切り出し、表示先へ渡します。
# @intent:pre-condition 主記憶への再配置より前に呼び出されます。
def extract_screenshot(page: bytes, sink: Optional[ScreenshotSink] = None) -> bytes:
    screen = bytes(page[:SCREEN_SIZE])
    if sink is not None:
        sink.show_screenshot(screen)
    return screen
