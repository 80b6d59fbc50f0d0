"""CHIP-8 rendering utilities for visualization."""

from typing import Tuple

import numpy as np
from PIL import Image

Color = Tuple[int, int, int]

MEMORY_PANEL_BACKGROUND = (20, 20, 40)  # Dark blue

COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black, as on the COSMAC VIP
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "white", "amber", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def chip8_display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Convert the CHIP-8 framebuffer to an RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (32, 64), indexed [y, x]
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.asarray(display, dtype=np.bool_)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbour upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def memory_to_rgb(memory, bytes_per_row: int = 64, cell_size: int = 8) -> np.ndarray:
    """Render memory as a grey-scale heat map, one square cell per byte.

    Brightness equals the byte value, so 4096 bytes at 64 per row give a
    64x64 grid of cells.
    """
    values = np.asarray(memory, dtype=np.uint8)
    rows = -(-len(values) // bytes_per_row)
    grid = np.zeros(rows * bytes_per_row, dtype=np.uint8)
    grid[:len(values)] = values
    grid = grid.reshape(rows, bytes_per_row)

    rgb = np.repeat(grid[:, :, None], 3, axis=2)
    if cell_size > 1:
        rgb = np.repeat(np.repeat(rgb, cell_size, axis=0), cell_size, axis=1)
    return rgb


def save_screenshot(display, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Write the framebuffer to an image file (format taken from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    frame = chip8_display_to_rgb(display, scale=scale, on_color=on_color, off_color=off_color)
    Image.fromarray(frame).save(filename)


def side_by_side(left: np.ndarray, right: np.ndarray, background: Color = MEMORY_PANEL_BACKGROUND) -> np.ndarray:
    """Place two RGB images next to each other, top-aligned, padding the shorter one."""
    height = max(left.shape[0], right.shape[0])
    canvas = np.empty((height, left.shape[1] + right.shape[1], 3), dtype=np.uint8)
    canvas[:] = background
    canvas[:left.shape[0], :left.shape[1]] = left
    canvas[:right.shape[0], left.shape[1]:] = right
    return canvas
