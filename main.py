"""
Run the CHIP-8 interpreter: python main.py rom_path=path/to/game.ch8 [clock_rate=700 ...]
"""

from chip8vm.app import main

if __name__ == "__main__":
    main()
