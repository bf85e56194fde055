# src/zx_snapshot/ui/app.py
"""
スナップショットビューアのエントリポイント。
使い方: zx-snapshot-view <snapshot.z80> [machine.yaml]
"""
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox

from zx_snapshot.config.builder import MachineBuilder
from zx_snapshot.config.loader import ConfigLoader
from zx_snapshot.config.models import default_48k_config
from .snapshot_window import SnapshotWindow

# @intent:responsibility 指定されたスナップショットを読み込み、ビューアを表示します。
def main():
    if len(sys.argv) < 2:
        print("usage: zx-snapshot-view <snapshot.z80> [machine.yaml]", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    snapshot_path = sys.argv[1]
    config = ConfigLoader().load_from_file(sys.argv[2]) if len(sys.argv) > 2 else default_48k_config()

    app = QApplication(sys.argv)
    builder = MachineBuilder()
    machine = builder.build_machine(config)
    result = builder.build_loader(config).load_z80(snapshot_path, machine)
    if not result.ok:
        QMessageBox.critical(None, "Load failed", f"{snapshot_path}: {result.error}")

    main_win = SnapshotWindow(machine, result, Path(snapshot_path).name)
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
