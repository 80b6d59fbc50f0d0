"""Drive the interpreter from a custom host loop and save the final frame."""

from chip8vm import Chip8, EmulatorConfig
from chip8vm.debug import disassemble
from chip8vm.rendering import save_screenshot

# Draw the digits of V0 = 123 with the built-in font, then loop forever.
ROM = bytes([
    0x60, 0x7B,  # LD V0, 7B
    0xA3, 0x00,  # LD I, 300
    0xF0, 0x33,  # LD B, V0
    0xF2, 0x65,  # LD V2, [I]
    0x63, 0x08,  # LD V3, 08
    0x64, 0x08,  # LD V4, 08
    0xF0, 0x29,  # LD F, V0
    0xD3, 0x45,  # DRW V3, V4, 5
    0x73, 0x06,  # ADD V3, 06
    0xF1, 0x29,  # LD F, V1
    0xD3, 0x45,  # DRW V3, V4, 5
    0x73, 0x06,  # ADD V3, 06
    0xF2, 0x29,  # LD F, V2
    0xD3, 0x45,  # DRW V3, V4, 5
    0x12, 0x1C,  # JP 21C
])


if __name__ == "__main__":
    chip8 = Chip8(EmulatorConfig(clock_rate=600))
    chip8.load_rom(ROM)

    for address in range(0, len(ROM), 2):
        word = (ROM[address] << 8) | ROM[address + 1]
        print(f"0x{0x200 + address:03X}: {word:04X}  {disassemble(word)}")

    for _ in range(6):
        chip8.run_frame()

    save_screenshot(chip8.state.display, "digits.png")
    print(f"{chip8.cycles} cycles, pc=0x{int(chip8.state.pc):03X}, frame saved to digits.png")
