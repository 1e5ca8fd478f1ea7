"""
2Dカメラ（ワールド座標 ⇔ スクリーン座標）

screen = (world - offset) * zoom + screen_center
world  = (screen - screen_center) / zoom + offset
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import numpy as np


PAN_SPEED = 300.0
ZOOM_STEP = 0.1
ZOOM_FACTOR_MIN = 0.1
ZOOM_FACTOR_MAX = 10.0


def world_to_screen(world, offset, zoom: float, screen_center) -> np.ndarray:
    """ワールド座標 → スクリーン座標（(2,) でも (n, 2) でも可）"""
    return (np.asarray(world, dtype=float) - np.asarray(offset, dtype=float)) * zoom \
        + np.asarray(screen_center, dtype=float)


def screen_to_world(screen, offset, zoom: float, screen_center) -> np.ndarray:
    """スクリーン座標 → ワールド座標"""
    return (np.asarray(screen, dtype=float) - np.asarray(screen_center, dtype=float)) / zoom \
        + np.asarray(offset, dtype=float)


@dataclass
class Camera:
    """
    パン・ズーム可能なカメラ

    Attributes:
        offset: ワールド座標でのカメラ位置
        zoom: 拡大率（> 0）
        zoom_limits: (最小, 最大) を指定するとズーム値そのものをクランプ。
                     None ならフレーム毎の倍率のみクランプ（累積は無制限）。
    """
    offset: np.ndarray = field(default_factory=lambda: np.zeros(2))
    zoom: float = 1.0
    zoom_limits: Optional[Tuple[float, float]] = None

    def world_to_screen(self, world, screen_center) -> np.ndarray:
        return world_to_screen(world, self.offset, self.zoom, screen_center)

    def screen_to_world(self, screen, screen_center) -> np.ndarray:
        return screen_to_world(screen, self.offset, self.zoom, screen_center)

    def pan(self, dx: float, dy: float, dt: float, speed: float = PAN_SPEED):
        """ズームに反比例した速度でパン（画面上では一定速度に見える）"""
        pan_speed = speed * dt / self.zoom
        self.offset = self.offset + np.array([dx, dy], dtype=float) * pan_speed

    def apply_scroll(self, scroll_y: float):
        """スクロール量に応じて倍率を掛ける"""
        factor = min(max(1.0 + scroll_y * ZOOM_STEP, ZOOM_FACTOR_MIN), ZOOM_FACTOR_MAX)
        self.zoom *= factor
        if self.zoom_limits is not None:
            lo, hi = self.zoom_limits
            self.zoom = min(max(self.zoom, lo), hi)

    def reset(self):
        self.offset = np.zeros(2)
        self.zoom = 1.0


def pan_direction(keys_down: Sequence[str]) -> Tuple[float, float]:
    """WASD の押下状態からパン方向を求める（W: -y, S: +y, A: -x, D: +x）"""
    dx, dy = 0.0, 0.0
    if 'W' in keys_down:
        dy -= 1.0
    if 'S' in keys_down:
        dy += 1.0
    if 'A' in keys_down:
        dx -= 1.0
    if 'D' in keys_down:
        dx += 1.0
    return dx, dy
