# tests/transport/test_bus.py
"""
zx_snapshot.transport.busモジュールの単体テスト。
"""
import pytest
from zx_snapshot.transport.bus import Bus, RAM

# @intent:test_suite 主記憶デバイスとバスのアドレス変換を検証します。

class TestRAM:
    def test_ram_init_valid_size(self):
        ram = RAM(0xA500)
        assert ram.get_size() == 0xA500
        assert all(b == 0 for b in ram.get_buffer())

    @pytest.mark.parametrize("size", [0, -1, 1.5])
    def test_ram_init_invalid_size(self, size):
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(size)

    def test_ram_read_write_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Address 4 out of bounds for RAM of size 4."):
            ram.read(4)
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            ram.write(0, 0x100)

    # @intent:test_case_buffer get_buffer() が内部のバイト列そのものを返すことを検証します。
    def test_buffer_is_shared(self):
        ram = RAM(8)
        ram.get_buffer()[3] = 0x7E
        assert ram.read(3) == 0x7E


class TestBus:
    # @intent:test_case_offset 0x5B00 から始まる主記憶で物理アドレスがオフセットに変換されることを検証します。
    def test_main_memory_mapping(self):
        bus = Bus()
        ram = RAM(0xA500)
        bus.register_device(0x5B00, 0xFFFF, ram)

        ram.get_buffer()[0x8000 - 0x5B00] = 0xC3
        assert bus.read(0x8000) == 0xC3
        bus.write(0xFFFF, 0x12)
        assert ram.read(0xA4FF) == 0x12

    def test_read_block(self):
        bus = Bus()
        ram = RAM(16)
        bus.register_device(0x10, 0x1F, ram)
        ram.get_buffer()[0:3] = b"\x01\x02\x03"
        assert bus.read_block(0x10, 3) == b"\x01\x02\x03"

    def test_unmapped_address(self):
        bus = Bus()
        bus.register_device(0x5B00, 0xFFFF, RAM(0xA500))
        with pytest.raises(IndexError, match="Address 0x4000 not mapped to any device."):
            bus.read(0x4000)

    def test_register_invalid_address_range(self):
        bus = Bus()
        with pytest.raises(ValueError, match="Invalid address range"):
            bus.register_device(0x0010, 0x000F, RAM(16))

    def test_register_ram_size_mismatch(self):
        bus = Bus()
        with pytest.raises(ValueError, match=r"Registered RAM device size \(10 bytes\) does not match"):
            bus.register_device(0x0000, 0x000F, RAM(10))

    def test_register_invalid_device_type(self):
        bus = Bus()
        class MyClass: pass
        with pytest.raises(TypeError, match="Device must be an instance of a class derived from Device."):
            bus.register_device(0x0000, 0x000F, MyClass())
