import yaml
from typing import Dict, Any
from .models import MachineConfig, RamRegion, PageMapping, DisplayConfig

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        ram_data = data.get("ram")
        if not ram_data:
            raise ValueError("Machine profile must define a 'ram' region.")
        ram = RamRegion(
            start=self._parse_int(ram_data.get("start")),
            end=self._parse_int(ram_data.get("end")),
            label=ram_data.get("label", "RAM"),
        )

        pages = []
        for page_data in data.get("pages", []):
            pages.append(PageMapping(
                page_id=self._parse_int(page_data.get("id")),
                start=self._parse_int(page_data.get("start")),
                type=str(page_data.get("type", "RAM")).upper(),
                label=page_data.get("label", ""),
            ))

        display_data = data.get("display", {})
        display = DisplayConfig(
            screen_length=self._parse_int(display_data.get("screen_length", 6912))
        )

        return MachineConfig(
            name=data.get("name", "ZX Spectrum"),
            ram=ram,
            pages=pages,
            display=display,
            legacy_border_collapse=bool(data.get("legacy_border_collapse", False)),
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
