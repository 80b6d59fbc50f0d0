"""
pygame front end for the CHIP-8 interpreter
"""

import json
import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import hydra
import numpy as np
import pygame
from hydra.utils import to_absolute_path
from omegaconf import DictConfig
from tqdm import tqdm

from chip8vm.config import EmulatorConfig, load_config
from chip8vm.constants import SCREEN_WIDTH, TIMER_HZ
from chip8vm.debug import disassemble
from chip8vm.emulator import Chip8, fetch
from chip8vm.errors import Chip8Error, ConfigurationError
from chip8vm.logging import ConsoleLogger
from chip8vm.rendering import (
    chip8_display_to_rgb, create_color_scheme, memory_to_rgb, save_screenshot, side_by_side
)

# COSMAC VIP hex keypad laid over the left of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D      Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

DEFAULT_DUMP_PATH = "dump.json"


def log_configuration(logger: ConsoleLogger, config: EmulatorConfig):
    logger.info("Emulator configuration:")
    logger.info(f"  ROM path:     {config.rom_path}")
    logger.info(f"  Step mode:    {'ON' if config.step_mode else 'OFF'}")
    logger.info(f"  Legacy mode:  {'ON' if config.legacy_mode else 'OFF'}")
    if config.cycles_to_run != -1:
        logger.info(f"  Cycles:       {config.cycles_to_run}")
    logger.info(f"  Clock rate:   {config.clock_rate} Hz")
    logger.info(f"  Scale factor: {config.scale_factor}x")
    logger.info(f"  Memory view:  {'ON' if config.show_memory else 'OFF'}")


def write_dump(chip8: Chip8, path: str) -> str:
    """Write the machine snapshot as JSON and return the path written."""
    with open(path, "w") as f:
        json.dump(chip8.dump_state(), f)
    chip8.logger.info(f"State dumped to {path}")
    return path


def run_headless(chip8: Chip8, cycles: int, show_progress: bool = True) -> Chip8:
    """Run a fixed number of cycles without a window, ticking timers at 60 Hz."""
    per_tick = chip8.cycles_per_tick
    for cycle in tqdm(range(cycles), desc="Emulating", unit="cycle", disable=not show_progress):
        chip8.step()
        if (cycle + 1) % per_tick == 0:
            chip8.decay_timers()
    return chip8


def run_step_mode(chip8: Chip8, dump_path: str = DEFAULT_DUMP_PATH, input_fn=input) -> Chip8:
    """Execute one cycle per Enter press; ``d`` dumps state and exits, ``q`` quits."""
    while not chip8.halted:
        pc = int(chip8.state.pc)
        instruction = fetch(chip8.state)
        try:
            reply = input_fn(
                f"Cycle {chip8.cycles:15d} | 0x{pc:03X}: {instruction:04X} {disassemble(instruction):<16s}"
                f"| Enter to step, D to dump state and exit, Q to quit > "
            )
        except EOFError:
            break

        command = reply.strip().lower()
        if command == "d":
            write_dump(chip8, dump_path)
            break
        if command == "q":
            break

        chip8.step()
        if chip8.cycles % chip8.cycles_per_tick == 0:
            chip8.decay_timers()
    return chip8


def compose_frame(chip8: Chip8, config: EmulatorConfig, on_color, off_color) -> np.ndarray:
    """Window contents: the framebuffer, plus the memory heat map to its right when enabled.

    Memory is drawn 64 bytes per row with cells half the display scale, so
    the panel is as tall as the display for even scale factors.
    """
    frame = chip8_display_to_rgb(chip8.state.display, config.scale_factor, on_color, off_color)
    if not config.show_memory:
        return frame
    cell_size = max(1, config.scale_factor // 2)
    panel = memory_to_rgb(chip8.state.memory, bytes_per_row=SCREEN_WIDTH, cell_size=cell_size)
    return side_by_side(frame, panel)


def run_window(chip8: Chip8, config: EmulatorConfig):
    """Main emulator loop: read input, run a frame of cycles, decay timers, render."""
    pygame.init()
    scale = config.scale_factor
    on_color, off_color = create_color_scheme(config.color_scheme)
    height, width, _ = compose_frame(chip8, config, on_color, off_color).shape
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()
    dump_path = config.dump_path or DEFAULT_DUMP_PATH

    chip8.logger.info("Controls: ESC=Quit, P=Pause, F5=Dump state, F12=Screenshot")

    running = True
    paused = False
    while running:
        elapsed = clock.tick(TIMER_HZ) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F5:
                    write_dump(chip8, dump_path)
                elif event.key == pygame.K_F12:
                    filename = f"screenshot_{chip8.cycles}.png"
                    save_screenshot(chip8.state.display, filename, scale, config.color_scheme)
                    chip8.logger.info(f"Screenshot saved to {filename}")
                elif event.key in KEY_MAP:
                    chip8.set_key(KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    chip8.set_key(KEY_MAP[event.key], False)

        if not paused and not chip8.halted:
            try:
                for _ in range(chip8.cycles_per_tick):
                    chip8.step()
            except Chip8Error as e:
                chip8.logger.error(f"Emulation stopped: {e}")
            chip8.decay_timers(elapsed)

        # Memory changes without a draw, so the heat map repaints every frame
        if chip8.state.draw_flag or config.show_memory:
            frame = compose_frame(chip8, config, on_color, off_color)
            surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
            screen.blit(surface, (0, 0))
            pygame.display.flip()
            chip8.acknowledge_frame()

    pygame.quit()


def run(config: EmulatorConfig) -> Chip8:
    """Build a session from ``config`` and run it in the selected mode."""
    chip8 = Chip8(config)
    if config.rom_path is None:
        raise ConfigurationError("Missing required rom_path")
    chip8.load_rom_file(to_absolute_path(config.rom_path))
    log_configuration(chip8.logger, config)

    if config.step_mode:
        run_step_mode(chip8, to_absolute_path(config.dump_path or DEFAULT_DUMP_PATH))
    elif config.cycles_to_run != -1:
        try:
            run_headless(chip8, config.cycles_to_run)
            chip8.logger.info(f"{chip8.cycles} cycles completed")
        finally:
            if config.dump_path:
                write_dump(chip8, to_absolute_path(config.dump_path))
    else:
        run_window(chip8, config)
    return chip8


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    logger = ConsoleLogger("chip8vm")
    try:
        config = load_config(cfg)
        run(config)
    except (ConfigurationError, OSError) as e:
        logger.error(str(e))
        raise SystemExit(1)
    except Chip8Error as e:
        logger.critical(str(e))
        raise SystemExit(1)


if __name__ == "__main__":
    main()
