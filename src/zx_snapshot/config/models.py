from dataclasses import dataclass, field
from typing import List

@dataclass
class RamRegion:
    start: int
    end: int
    label: str = "RAM"

@dataclass
class PageMapping:
    page_id: int
    start: int
    type: str = "RAM"  # "RAM", "DISPLAY"
    label: str = ""

@dataclass
class DisplayConfig:
    screen_length: int = 6912  # ピクセル(6144) + アトリビュート(768)

@dataclass
class MachineConfig:
    name: str
    ram: RamRegion
    pages: List[PageMapping] = field(default_factory=list)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    legacy_border_collapse: bool = False  # 真の場合ボーダー色を0/1に潰す

# @intent:responsibility ZX Spectrum 48K の標準プロファイルを返します。
# 主記憶は画面領域の直後 (0x5B00) から始まり、ページ8は画面を含む 0x4000-0x7FFF を運びます。
def default_48k_config() -> MachineConfig:
    return MachineConfig(
        name="ZX Spectrum 48K",
        ram=RamRegion(start=0x5B00, end=0xFFFF),
        pages=[
            PageMapping(page_id=8, start=0x4000, type="DISPLAY", label="Screen + 5B00-7FFF"),
            PageMapping(page_id=4, start=0x8000, label="Bank 4"),
            PageMapping(page_id=5, start=0xC000, label="Bank 5"),
        ],
    )
