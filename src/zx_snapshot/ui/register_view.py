# src/zx_snapshot/ui/register_view.py
"""
復元されたZ80レジスタを表示するウィジェット。
Z80CpuStateのレイアウト情報を利用して動的にUIを構築します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtGui import QFontDatabase
from PySide6.QtCore import Qt

from zx_snapshot.arch.z80.state import Z80CpuState

# @intent:responsibility CPUのレジスタ値を表示するUIウィジェットを提供します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        self._register_labels: Dict[str, QLabel] = {}
        self._register_widths: Dict[str, int] = {}
        self._state: Optional[Z80CpuState] = None

        self._setup_ui()

    def _setup_ui(self):
        for group in Z80CpuState.get_register_layout():
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet("QGroupBox { font-weight: bold; color: #EEE; } QGroupBox::title { color: #00AAAA; }")
            group_layout = QFormLayout(group_box)
            group_layout.setLabelAlignment(Qt.AlignLeft)

            for reg in group.registers:
                hex_width = (reg.width + 3) // 4  # 16bit -> 4chars, 8bit -> 2chars
                self._register_widths[reg.name] = hex_width

                label_value = QLabel(f"0x{'0'*hex_width}")
                label_value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
                label_value.setAlignment(Qt.AlignRight)

                group_layout.addRow(QLabel(f"{reg.name}:"), label_value)
                self._register_labels[reg.name] = label_value

            self.layout.addWidget(group_box)

        self.layout.addStretch()

    def set_state(self, state: Z80CpuState) -> None:
        self._state = state
        self.update_registers()

    def update_registers(self):
        if not self._state:
            return
        for name, value in self._state.get_register_map().items():
            if name in self._register_labels:
                width = self._register_widths[name]
                self._register_labels[name].setText(f"0x{value:0{width}X}")

    def register_text(self, name: str) -> str:
        return self._register_labels[name].text()
