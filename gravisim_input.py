"""
入力処理: フレーム単位の入力スナップショット・生成ジェスチャ・フレームクロック

バックエンド（Vispy）のイベントを InputCollector に溜めておき、
各フレームの先頭で poll() して InputFrame として取り出す。
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple
import time
import numpy as np

from gravisim_physics import Body, make_body


DRAG_DIVISOR = 20.0


# ============================================================
# フレーム入力
# ============================================================

@dataclass
class InputFrame:
    """1フレーム分の入力"""
    keys_pressed: Set[str] = field(default_factory=set)
    keys_down: Set[str] = field(default_factory=set)
    pointer_pressed: bool = False
    pointer_released: bool = False
    hover_pos: Optional[Tuple[float, float]] = None
    scroll_y: float = 0.0
    dt: float = 1.0 / 60.0


class InputCollector:
    """イベントを蓄積してフレーム毎の InputFrame を作る"""

    def __init__(self):
        self.keys_down: Set[str] = set()
        self.hover_pos: Optional[Tuple[float, float]] = None
        self._keys_pressed: Set[str] = set()
        self._pointer_pressed = False
        self._pointer_released = False
        self._scroll_y = 0.0

    def key_press(self, name: str):
        name = name.upper()
        # キーリピートはエッジとして扱わない
        if name not in self.keys_down:
            self._keys_pressed.add(name)
        self.keys_down.add(name)

    def key_release(self, name: str):
        self.keys_down.discard(name.upper())

    def mouse_move(self, pos):
        # Vispy にはポインタ離脱イベントがないため、最後のホバー位置を保持し続ける
        self.hover_pos = (float(pos[0]), float(pos[1]))

    def mouse_press(self, pos):
        self.mouse_move(pos)
        self._pointer_pressed = True

    def mouse_release(self, pos):
        self.mouse_move(pos)
        self._pointer_released = True

    def mouse_wheel(self, delta_y: float):
        self._scroll_y += float(delta_y)

    def poll(self, dt: float) -> InputFrame:
        """現在の入力を取り出し、エッジ系の状態をクリア"""
        frame = InputFrame(
            keys_pressed=set(self._keys_pressed),
            keys_down=set(self.keys_down),
            pointer_pressed=self._pointer_pressed,
            pointer_released=self._pointer_released,
            hover_pos=self.hover_pos,
            scroll_y=self._scroll_y,
            dt=dt,
        )
        self._keys_pressed.clear()
        self._pointer_pressed = False
        self._pointer_released = False
        self._scroll_y = 0.0
        return frame


# ============================================================
# 生成ジェスチャ（押下 → ドラッグ → 解放）
# ============================================================

class SpawnGesture:
    """
    天体生成ジェスチャ

    Idle（anchor が None）→ 押下で Armed（anchor を記録）→ 解放で Idle に戻り天体を生成。
    Armed 中の再押下は無視（anchor は保持）。
    """

    def __init__(self):
        self.anchor: Optional[np.ndarray] = None

    @property
    def armed(self) -> bool:
        return self.anchor is not None

    def press(self, world_pos) -> bool:
        if self.anchor is not None:
            return False
        self.anchor = np.array(world_pos, dtype=float)
        return True

    def release(
        self,
        world_pos,
        density: float,
        size: float,
        divisor: float = DRAG_DIVISOR
    ) -> Optional[Body]:
        if self.anchor is None:
            return None
        start = self.anchor
        self.anchor = None
        velocity = (np.array(world_pos, dtype=float) - start) / divisor
        return make_body(start, velocity, density, size)


# ============================================================
# フレームクロック
# ============================================================

class FrameClock:
    """
    安定化したフレーム時間

    生のフレーム時間を [0, max_dt] にクランプし、直近 window フレームの平均を返す。
    """

    def __init__(self, max_dt: float = 0.1, window: int = 30, initial_dt: float = 1.0 / 60.0):
        self.max_dt = max_dt
        self.window = window
        self.initial_dt = initial_dt
        self.frame_times: List[float] = []
        self.last_time: Optional[float] = None

    def tick(self, now: Optional[float] = None) -> float:
        if now is None:
            now = time.time()
        if self.last_time is None:
            self.last_time = now
            return self.initial_dt

        raw = min(max(now - self.last_time, 0.0), self.max_dt)
        self.last_time = now
        self.frame_times.append(raw)
        if len(self.frame_times) > self.window:
            self.frame_times.pop(0)
        return float(np.mean(self.frame_times))
