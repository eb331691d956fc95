"""Seeded color palette for clusters."""

import colorsys
import random
from collections.abc import Callable

Palette = Callable[[int, str], list[str]]

GOLDEN_RATIO_CONJUGATE = 0.618033988749895


def generate_palette(count: int, seed: str) -> list[str]:
    """Generate ``count`` distinct hex colors, deterministic for a given seed.

    Hues are spread with the golden ratio from a seeded starting hue, with a
    little seeded jitter on lightness and saturation so neighbors differ.
    """
    if count <= 0:
        return []
    rng = random.Random(seed)
    hue = rng.random()
    colors = []
    for _ in range(count):
        hue = (hue + GOLDEN_RATIO_CONJUGATE) % 1.0
        lightness = 0.45 + rng.random() * 0.15
        saturation = 0.55 + rng.random() * 0.3
        r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
        colors.append(f"#{int(r * 255):02x}{int(g * 255):02x}{int(b * 255):02x}")
    return colors
