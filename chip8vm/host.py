"""Display collaborators that consume frame snapshots from the scheduler."""

import logging
import os
from typing import Tuple

import numpy as np

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"
import pygame

from .constants import COLORS, DISPLAY_H, DISPLAY_W, SCALE
from .state import frame_to_text

logger = logging.getLogger(__name__)


class ConsoleHost:
    """Log every frame as a 64x32 grid of 0/1 at info level"""

    def __init__(self):
        self.frames = 0

    def __call__(self, framebuffer: np.ndarray):
        self.frames += 1
        logger.info("frame %d:\n%s", self.frames, frame_to_text(framebuffer))


class PygameHost:
    """Scaled pygame window showing the CHIP-8 display"""

    def __init__(self, title: str = "CHIP-8", scale: int = SCALE,
                 fg_color: Tuple[int, int, int] = COLORS['fg_green'],
                 bg_color: Tuple[int, int, int] = COLORS['bg_dark']):
        self.scale = scale
        self.fg_color = np.array(fg_color, dtype=np.uint8)
        self.bg_color = np.array(bg_color, dtype=np.uint8)
        self.final_size = (DISPLAY_W * scale, DISPLAY_H * scale)
        self.frames = 0
        self.closed = False

        pygame.init()
        pygame.display.set_caption(title)
        self.screen = pygame.display.set_mode(self.final_size)
        self.screen.fill(bg_color)

    def colorize(self, framebuffer: np.ndarray) -> np.ndarray:
        """(height, width) boolean frame to a (width, height, 3) RGB array"""
        rgb = np.where(framebuffer[..., None], self.fg_color, self.bg_color)
        return np.ascontiguousarray(rgb.astype(np.uint8).transpose(1, 0, 2))

    def __call__(self, framebuffer: np.ndarray):
        surf = pygame.surfarray.make_surface(self.colorize(framebuffer))
        self.screen.blit(pygame.transform.scale(surf, self.final_size), (0, 0))
        pygame.display.flip()
        self.frames += 1

    def pump(self) -> bool:
        """Drain window events; True once the window was closed or ESC hit"""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.closed = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.closed = True
        return self.closed

    def close(self):
        pygame.quit()
