# zx_snapshot/transport/bus.py
"""
Transport Layer (メモリ空間)

ZX Spectrum の16bitアドレス空間と、そこに配置される主記憶(RAM)を定義します。
スナップショットローダーはRAMのバッファへ直接展開し、
ビューアやテストはバス経由で物理アドレスから内容を確認します。
"""
from abc import ABC, abstractmethod
from typing import List, Tuple

# @intent:responsibility アドレス空間に配置できる記憶デバイスのインターフェース。
class Device(ABC):
    """アドレスはデバイス先頭からのオフセットとして渡されます。"""
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

# @intent:responsibility スナップショットの復元先となる主記憶。
class RAM(Device):
    """
    固定長のバイト列を保持する主記憶デバイス。
    ページの展開は get_buffer() で得たバッファに対し、境界チェック付きのカーソルで行います。
    """
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def _check(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")

    def read(self, address: int) -> int:
        self._check(address)
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    def get_size(self) -> int:
        return self._size

    # @intent:responsibility 展開先として内部のバイト列そのものを返します（コピーではありません）。
    def get_buffer(self) -> bytearray:
        return self._memory

# @intent:responsibility 物理アドレスを、そのアドレスを受け持つデバイスとオフセットに解決します。
class Bus:
    """
    ビューアが物理アドレスで主記憶を参照するための窓口。
    ローダーはバスを経由せず、RAMのバッファへ直接展開します。
    """
    def __init__(self):
        # (start_address, end_address, device)
        self._regions: List[Tuple[int, int, Device]] = []

    # @intent:pre-condition 0 <= start_address <= end_address。RAMの場合はサイズが範囲と一致すること。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"Registered RAM device size ({device.get_size()} bytes) does not match "
                f"the address range {start_address:#06x}-{end_address:#06x} ({span} bytes)."
            )
        self._regions.append((start_address, end_address, device))

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._regions:
            if start <= address <= end:
                return device, address - start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    def read_block(self, address: int, length: int) -> bytes:
        return bytes(self.read(address + i) for i in range(length))

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
