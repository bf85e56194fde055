# tests/display/test_screen.py
"""
zx_snapshot.display.screenモジュールの単体テスト。
"""
import pytest
from PySide6.QtGui import QColor

from zx_snapshot.display.screen import (
    SCREEN_SIZE, BITMAP_SIZE, QImageScreenshotSink, attribute_offset, bitmap_offset,
    convert_sinclair_color, extract_screenshot, render_screen, render_screen_rgb, sinclair_rgb,
)

# @intent:test_suite ZX Spectrum 画面形式の変換を検証します。

class TestPalette:
    @pytest.mark.parametrize("index, rgb", [
        (0, (0, 0, 0)), (1, (0, 0, 0xD7)), (2, (0xD7, 0, 0)), (4, (0, 0xD7, 0)), (7, (0xD7, 0xD7, 0xD7)),
    ])
    def test_normal_colors(self, index, rgb):
        assert sinclair_rgb(index) == rgb

    def test_bright_colors(self):
        assert sinclair_rgb(6, bright=True) == (0xFF, 0xFF, 0)

    def test_convert_returns_qcolor(self):
        assert convert_sinclair_color(2) == QColor(0xD7, 0, 0)


class TestScreenLayout:
    # @intent:test_case_layout 画面の1/3区画、文字内の行、文字行のインターリーブを検証します。
    @pytest.mark.parametrize("x, y, offset", [
        (0, 0, 0x0000), (8, 0, 0x0001), (0, 1, 0x0100), (0, 8, 0x0020), (0, 64, 0x0800), (255, 191, 0x17FF),
    ])
    def test_bitmap_offset(self, x, y, offset):
        assert bitmap_offset(x, y) == offset

    def test_attribute_offset(self):
        assert attribute_offset(0, 0) == BITMAP_SIZE
        assert attribute_offset(255, 191) == SCREEN_SIZE - 1


class TestRenderScreen:
    def test_ink_and_paper(self):
        screen = bytearray(SCREEN_SIZE)
        screen[bitmap_offset(0, 0)] = 0x80          # 左上の1ピクセルだけインク
        screen[attribute_offset(0, 0)] = 0x40 | (1 << 3) | 2  # bright, paper blue, ink red
        image = render_screen(bytes(screen))

        assert image.pixelColor(0, 0) == QColor(0xFF, 0, 0)
        assert image.pixelColor(1, 0) == QColor(0, 0, 0xFF)
        assert image.pixelColor(8, 0) == QColor(0, 0, 0)

    def test_blank_screen_is_black(self):
        rgb = render_screen_rgb(bytes(SCREEN_SIZE))
        assert rgb == bytes(256 * 192 * 3)

    def test_short_screen_rejected(self):
        with pytest.raises(ValueError):
            render_screen_rgb(bytes(100))


class TestExtractScreenshot:
    # @intent:test_case_extract ページ先頭の6912バイトだけが表示先へ渡されることを検証します。
    def test_passes_screen_part_to_sink(self):
        page = bytes([0x01]) * SCREEN_SIZE + bytes([0x02]) * 100
        sink = QImageScreenshotSink()
        assert extract_screenshot(page, sink) == bytes([0x01]) * SCREEN_SIZE
        assert sink.screen == bytes([0x01]) * SCREEN_SIZE
        assert sink.image.width() == 256

    def test_without_sink(self):
        assert len(extract_screenshot(bytes(0x4000))) == SCREEN_SIZE
