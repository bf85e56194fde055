# src/zx_snapshot/ui/snapshot_window.py
"""
スナップショットビューアのウィンドウ。
ボーダー色で縁取りしたスクリーンショットと、復元されたレジスタを表示します。
"""
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QLabel, QDockWidget
from PySide6.QtGui import QColor, QImage, QPainter, QPixmap
from PySide6.QtCore import Qt

from zx_snapshot.core.machine import ZxMachine
from zx_snapshot.loader.result import LoadResult
from zx_snapshot.display.screen import SCREEN_WIDTH, SCREEN_HEIGHT, render_screen
from .register_view import RegisterView

BORDER_SIZE = 32
SCALE = 2
PC_PEEK_LENGTH = 4

# @intent:responsibility PCが指す主記憶の先頭数バイトをバス経由で読み出し、ステータス表示用の文字列にします。
def pc_peek_text(machine: ZxMachine, length: int = PC_PEEK_LENGTH) -> str:
    pc = machine.state.pc
    ram_end = machine.ram_start + machine.ram.get_size()
    if not machine.ram_start <= pc <= ram_end - length:
        return f"PC {pc:04X}: (outside main memory)"
    data = machine.bus.read_block(pc, length)
    return f"PC {pc:04X}: " + " ".join(f"{b:02X}" for b in data)

# @intent:responsibility 画面イメージの周囲をボーダー色で塗った新しいイメージを返します。
def compose_with_border(screen: QImage, border_color: Optional[QColor], border: int = BORDER_SIZE) -> QImage:
    framed = QImage(SCREEN_WIDTH + border * 2, SCREEN_HEIGHT + border * 2, QImage.Format.Format_RGB32)
    framed.fill(border_color if border_color is not None else QColor(0, 0, 0))
    painter = QPainter(framed)
    painter.drawImage(border, border, screen)
    painter.end()
    return framed

class SnapshotWindow(QMainWindow):
    def __init__(self, machine: ZxMachine, result: LoadResult, title: str = "", parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"ZX Snapshot Viewer - {title}" if title else "ZX Snapshot Viewer")

        self.screen_label = QLabel()
        self.screen_label.setAlignment(Qt.AlignCenter)
        self.setCentralWidget(self.screen_label)

        self.register_view = RegisterView()
        self.register_view.set_state(machine.state)
        dock = QDockWidget("Registers", self)
        dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)
        self.statusBar().showMessage(pc_peek_text(machine))

        self.framed_image: Optional[QImage] = None
        if result.screen is not None:
            self.framed_image = compose_with_border(render_screen(result.screen), machine.border_color)
            pixmap = QPixmap.fromImage(self.framed_image)
            self.screen_label.setPixmap(pixmap.scaled(pixmap.width() * SCALE, pixmap.height() * SCALE))
        else:
            self.screen_label.setText("No screen data")
