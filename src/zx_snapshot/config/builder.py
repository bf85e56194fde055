import logging

from zx_snapshot.arch.z80.state import Z80CpuState
from zx_snapshot.common.types import ColorConverter
from zx_snapshot.core.machine import ZxMachine
from zx_snapshot.display.screen import convert_sinclair_color
from zx_snapshot.loader.pages import PageKind, PageRouter, PageTarget
from zx_snapshot.loader.rle import PAGE_SIZE
from zx_snapshot.loader.z80_loader import Z80SnapshotLoader
from zx_snapshot.transport.bus import Bus, RAM
from .models import MachineConfig

logger = logging.getLogger(__name__)

# @intent:responsibility マシンプロファイル（Config）に基づいて、主記憶・CPU状態・ページルーティング表を生成します。
class MachineBuilder:
    def build_machine(self, config: MachineConfig) -> ZxMachine:
        size = config.ram.end - config.ram.start + 1
        ram = RAM(size)
        bus = Bus()
        bus.register_device(config.ram.start, config.ram.end, ram)
        return ZxMachine(config=config, state=Z80CpuState(), bus=bus, ram=ram)

    # @intent:responsibility ページ番号 → 書き込み先の不変な表を構築します。
    # @intent:pre-condition RAM種別のページと画面ページの再配置部分は主記憶内に完全に収まり、互いに重ならないこと。
    # @intent:pre-condition ページ番号は重複せず、画面ページは高々1つであること。
    def build_router(self, config: MachineConfig) -> PageRouter:
        targets = []
        ram_ranges = []
        seen_ids = set()
        display_id = None
        for page in config.pages:
            if page.page_id in seen_ids:
                raise ValueError(f"Page {page.page_id} is defined more than once.")
            seen_ids.add(page.page_id)

            if page.type == "DISPLAY":
                kind = PageKind.DISPLAY
            elif page.type == "RAM":
                kind = PageKind.RAM
            else:
                logger.warning("Unknown page type '%s' for page %d, defaulting to RAM", page.type, page.page_id)
                kind = PageKind.RAM

            if kind is PageKind.DISPLAY:
                if display_id is not None:
                    raise ValueError(f"Page {page.page_id} is a second display page (page {display_id} already is).")
                display_id = page.page_id
                # 画面部分の後ろだけが主記憶へ再配置される
                start = page.start + config.display.screen_length
            else:
                start = page.start
            end = page.start + PAGE_SIZE - 1

            if start <= end:
                if start < config.ram.start or end > config.ram.end:
                    raise ValueError(
                        f"Page {page.page_id} range {start:04X}-{end:04X} is outside main memory "
                        f"{config.ram.start:04X}-{config.ram.end:04X}."
                    )
                for other_id, other_start, other_end in ram_ranges:
                    if start <= other_end and other_start <= end:
                        raise ValueError(f"Page {page.page_id} overlaps page {other_id}.")
                ram_ranges.append((page.page_id, start, end))

            targets.append(PageTarget(page_id=page.page_id, kind=kind, address=page.start))

        return PageRouter(targets, ram_start=config.ram.start)

    def build_loader(self, config: MachineConfig,
                     color_converter: ColorConverter = convert_sinclair_color) -> Z80SnapshotLoader:
        return Z80SnapshotLoader(self.build_router(config), color_converter)
