"""
シミュレーション状態とフレーム更新

描画バックエンドに依存しない純粋なステップ関数 step_frame() を提供する。
状態は SandboxState にまとめて参照渡しする（グローバル変数は使わない）。
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np

from gravisim_physics import Body, G, MIN_DIST_SQ, apply_gravity_all, integrate
from gravisim_camera import Camera, PAN_SPEED, pan_direction
from gravisim_input import DRAG_DIVISOR, InputFrame, SpawnGesture


# ============================================================
# 設定
# ============================================================

@dataclass
class Config:
    """シミュレーション設定"""
    window_size: Tuple[int, int] = (1280, 720)
    title: str = 'Gravisim (Vispy)'
    g: float = G
    min_dist_sq: float = MIN_DIST_SQ
    drag_divisor: float = DRAG_DIVISOR
    pan_speed: float = PAN_SPEED
    default_size: float = 50.0
    default_density: float = 1.0
    symmetric_gravity: bool = False
    zoom_limits: Optional[Tuple[float, float]] = None
    max_dt: float = 0.1
    dt_window: int = 30
    target_fps: int = 60


def validate_config(config: Config):
    """設定値の検証"""
    if config.default_size <= 0 or config.default_density <= 0:
        raise ValueError("サイズと密度は正の値である必要があります")
    if config.g <= 0:
        raise ValueError("重力定数は正の値である必要があります")
    if config.drag_divisor <= 0:
        raise ValueError("ドラッグ除数は正の値である必要があります")
    if config.pan_speed <= 0:
        raise ValueError("パン速度は正の値である必要があります")
    if config.window_size[0] <= 0 or config.window_size[1] <= 0:
        raise ValueError(f"ウィンドウサイズが不正です: {config.window_size}")
    if config.target_fps <= 0 or config.max_dt <= 0 or config.dt_window < 1:
        raise ValueError("フレーム設定が不正です")
    if config.zoom_limits is not None:
        lo, hi = config.zoom_limits
        if lo <= 0 or lo > hi:
            raise ValueError(f"ズーム範囲が不正です: {config.zoom_limits}")


# ============================================================
# 状態
# ============================================================

@dataclass
class SandboxState:
    """サンドボックス全体の状態"""
    bodies: List[Body] = field(default_factory=list)
    camera: Camera = field(default_factory=Camera)
    gesture: SpawnGesture = field(default_factory=SpawnGesture)
    selected_size: float = 50.0
    selected_density: float = 1.0
    show_hud: bool = True
    elastic: bool = False
    last_world_mouse: np.ndarray = field(default_factory=lambda: np.zeros(2))


@dataclass
class FrameEvents:
    """1フレームで起きた出来事（ホスト側の表示用）"""
    reset: bool = False
    hud_toggled: bool = False
    elastic_toggled: bool = False
    armed: bool = False
    spawned: Optional[Body] = None


def new_state(config: Optional[Config] = None) -> SandboxState:
    config = config or Config()
    validate_config(config)
    return SandboxState(
        camera=Camera(zoom_limits=config.zoom_limits),
        selected_size=config.default_size,
        selected_density=config.default_density,
    )


def reset(state: SandboxState):
    """天体を全消去し、カメラを初期位置・等倍に戻す"""
    state.bodies.clear()
    state.camera.reset()


# ============================================================
# フレーム更新
# ============================================================

def step_frame(
    state: SandboxState,
    frame: InputFrame,
    screen_center,
    config: Optional[Config] = None
) -> FrameEvents:
    """
    1フレーム分の更新

    順序: キー入力 → パン → ズーム → 重力 → 積分 → マウス位置 → 天体生成
    """
    config = config or Config()
    events = FrameEvents()

    # キー入力
    if 'R' in frame.keys_pressed:
        reset(state)
        events.reset = True
    if 'H' in frame.keys_pressed:
        state.show_hud = not state.show_hud
        events.hud_toggled = True
    if 'E' in frame.keys_pressed:
        state.elastic = not state.elastic
        events.elastic_toggled = True

    # パン
    dx, dy = pan_direction(frame.keys_down)
    if dx or dy:
        state.camera.pan(dx, dy, frame.dt, config.pan_speed)

    # ズーム
    state.camera.apply_scroll(frame.scroll_y)

    # 重力・積分
    apply_gravity_all(state.bodies, config.symmetric_gravity, config.g, config.min_dist_sq)
    integrate(state.bodies, frame.dt)

    # マウスのワールド座標（ホバーなしなら画面中心）
    mouse = frame.hover_pos if frame.hover_pos is not None else screen_center
    world_mouse = state.camera.screen_to_world(mouse, screen_center)
    state.last_world_mouse = world_mouse

    # 天体生成
    if frame.pointer_pressed:
        events.armed = state.gesture.press(world_mouse)
    if frame.pointer_released:
        body = state.gesture.release(
            world_mouse, state.selected_density, state.selected_size, config.drag_divisor
        )
        if body is not None:
            state.bodies.append(body)
            events.spawned = body

    return events


# ============================================================
# 描画用ヘルパー
# ============================================================

HUD_LEGEND = [
    "Controls:",
    "R: Reset",
    "H: Toggle HUD",
    "E: Toggle Elastic",
    "WASD: Pan",
    "Scroll: Zoom",
    "Click-Drag: Spawn",
]


def hud_lines(state: SandboxState) -> List[str]:
    return [
        f"Bodies: {len(state.bodies)}",
        f"Zoom: {state.camera.zoom:.2f}",
        f"Elastic Collisions: {'ON' if state.elastic else 'OFF'}",
    ] + HUD_LEGEND


def body_screen_geometry(state: SandboxState, screen_center) -> Tuple[np.ndarray, np.ndarray]:
    """全天体のスクリーン座標 (n, 2) と画面上の半径 (n,)"""
    if not state.bodies:
        return np.zeros((0, 2)), np.zeros(0)
    positions = np.array([b.position for b in state.bodies])
    radii = np.array([b.radius for b in state.bodies]) * state.camera.zoom
    return state.camera.world_to_screen(positions, screen_center), radii


def preview_circle(state: SandboxState, screen_center) -> Optional[Tuple[np.ndarray, float]]:
    """生成待ちの間、カーソル位置に出す配置プレビュー（位置, 半径）"""
    if not state.gesture.armed:
        return None
    pos = state.camera.world_to_screen(state.last_world_mouse, screen_center)
    return pos, state.selected_size * state.camera.zoom
