#!/usr/bin/env python3
"""
Gravisim Vispy Edition

クリック＆ドラッグで天体を生成し、万有引力で運動させる2Dサンドボックス。
描画は Vispy（GPU）、物理は gravisim_physics（NumPy）。
"""

from __future__ import annotations
import numpy as np
from vispy import app, scene
from typing import Optional

from gravisim_input import FrameClock, InputCollector
from gravisim_state import (
    Config, SandboxState, new_state, step_frame,
    hud_lines, body_screen_geometry, preview_circle
)


PREVIEW_COLOR = (0.56, 0.93, 0.56, 1.0)  # light green
HUD_LINE_HEIGHT = 18


class GravisimApp:
    """Gravisim（Vispy版）"""

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.state: SandboxState = new_state(self.config)
        self.input = InputCollector()
        self.clock = FrameClock(self.config.max_dt, self.config.dt_window)

        # Canvas作成（キー操作は自前で処理）
        self.canvas = scene.SceneCanvas(
            keys=None,
            size=self.config.window_size,
            show=True,
            title=self.config.title,
            bgcolor='black'
        )

        # 天体（スクリーン座標で描画）
        self.body_visual = scene.visuals.Markers(parent=self.canvas.scene)
        self.body_visual.visible = False

        # 配置プレビュー
        self.preview_visual = scene.visuals.Markers(parent=self.canvas.scene)
        self.preview_visual.visible = False

        # HUD
        self.hud_visual = scene.visuals.Text(
            [''],
            pos=[(10, 10)],
            color='white',
            font_size=10,
            anchor_x='left',
            anchor_y='top',
            parent=self.canvas.scene
        )

        # イベントハンドラ
        self.canvas.events.key_press.connect(self.on_key_press)
        self.canvas.events.key_release.connect(self.on_key_release)
        self.canvas.events.mouse_press.connect(self.on_mouse_press)
        self.canvas.events.mouse_release.connect(self.on_mouse_release)
        self.canvas.events.mouse_move.connect(self.on_mouse_move)
        self.canvas.events.mouse_wheel.connect(self.on_mouse_wheel)

        # 毎フレーム再描画
        self.timer = app.Timer(
            interval=1.0 / self.config.target_fps,
            connect=self.on_timer,
            start=True
        )

    @staticmethod
    def _key_name(event) -> Optional[str]:
        if event.key is not None:
            return event.key.name
        return event.text or None

    # ------------------------------------------------------------
    # 入力イベント
    # ------------------------------------------------------------

    def on_key_press(self, event):
        name = self._key_name(event)
        if name:
            self.input.key_press(name)

    def on_key_release(self, event):
        name = self._key_name(event)
        if name:
            self.input.key_release(name)

    def on_mouse_press(self, event):
        self.input.mouse_press(event.pos)

    def on_mouse_release(self, event):
        self.input.mouse_release(event.pos)

    def on_mouse_move(self, event):
        self.input.mouse_move(event.pos)

    def on_mouse_wheel(self, event):
        self.input.mouse_wheel(event.delta[1])

    # ------------------------------------------------------------
    # フレーム更新
    # ------------------------------------------------------------

    def screen_center(self) -> np.ndarray:
        width, height = self.canvas.size
        return np.array([width / 2.0, height / 2.0])

    def on_timer(self, event):
        frame = self.input.poll(self.clock.tick())
        center = self.screen_center()
        events = step_frame(self.state, frame, center, self.config)

        if events.reset:
            print("🔄 Reset")
        if events.hud_toggled:
            print(f"[H] HUD: {'ON' if self.state.show_hud else 'OFF'}")
        if events.elastic_toggled:
            print(f"[E] Elastic collisions: {'ON' if self.state.elastic else 'OFF'}")
        if events.armed:
            ax, ay = self.state.gesture.anchor
            print(f"📍 Spawn armed at ({ax:.1f}, {ay:.1f})")
        if events.spawned is not None:
            vx, vy = events.spawned.velocity
            print(f"✨ Body {len(self.state.bodies)} spawned (v=({vx:.2f}, {vy:.2f}))")

        self.draw(center)
        self.canvas.update()

    def draw(self, center: np.ndarray):
        positions, radii = body_screen_geometry(self.state, center)
        if len(positions):
            colors = np.array([(*b.color, 255) for b in self.state.bodies]) / 255.0
            self.body_visual.set_data(
                pos=positions,
                size=np.maximum(radii * 2.0, 1.0),
                face_color=colors,
                edge_width=0
            )
            self.body_visual.visible = True
        else:
            self.body_visual.visible = False

        preview = preview_circle(self.state, center)
        if preview is not None:
            pos, radius = preview
            self.preview_visual.set_data(
                pos=np.array([pos]),
                size=max(radius * 2.0, 1.0),
                face_color=(0, 0, 0, 0),
                edge_color=PREVIEW_COLOR,
                edge_width=1
            )
            self.preview_visual.visible = True
        else:
            self.preview_visual.visible = False

        if self.state.show_hud:
            lines = hud_lines(self.state)
            self.hud_visual.text = lines
            self.hud_visual.pos = [(10, 10 + i * HUD_LINE_HEIGHT) for i in range(len(lines))]
            self.hud_visual.visible = True
        else:
            self.hud_visual.visible = False

    def run(self):
        """メインループ開始"""
        app.run()


def main():
    print("=" * 65)
    print("Gravisim (Vispy Edition)")
    print("=" * 65)
    print()
    print("🎮 Controls:")
    print("  [R]          = Reset (clear bodies, camera, zoom)")
    print("  [H]          = Toggle HUD")
    print("  [E]          = Toggle elastic collisions flag")
    print("  [W/A/S/D]    = Pan")
    print("  [Scroll]     = Zoom")
    print("  [Click-Drag] = Spawn body (drag sets velocity)")
    print()

    sim = GravisimApp(Config())
    sim.run()


if __name__ == '__main__':
    main()
