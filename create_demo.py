"""
デモ動画生成スクリプト
ドラッグ操作を再現して天体を配置し、シミュレーションをGIFとして保存
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.patches import Circle

from gravisim_input import InputFrame
from gravisim_physics import kinetic_energy
from gravisim_state import Config, new_state, step_frame


# 設定
SCREEN_SIZE = (1280, 720)
SCREEN_CENTER = np.array([SCREEN_SIZE[0] / 2.0, SCREEN_SIZE[1] / 2.0])
DT = 1.0 / 30.0
STEPS_PER_FRAME = 2
TOTAL_FRAMES = 300  # 10秒 @ 30fps

# (開始位置, 終了位置, 密度, サイズ) ※スクリーン座標
DEMO_GESTURES = [
    ((640, 360), (640, 360), 40.0, 50.0),
    ((640, 110), (700, 110), 1.0, 15.0),
    ((340, 360), (340, 290), 1.0, 20.0),
    ((960, 360), (960, 420), 1.0, 10.0),
]


def gesture_frames(start, end, dt=DT):
    """押下 → 解放 の2フレーム"""
    return [
        InputFrame(pointer_pressed=True, hover_pos=start, dt=dt),
        InputFrame(pointer_released=True, hover_pos=end, dt=dt),
    ]


def build_demo_scene(config=None):
    """ジェスチャを再生してデモ用の状態を作る"""
    config = config or Config(symmetric_gravity=True)
    state = new_state(config)
    for start, end, density, size in DEMO_GESTURES:
        state.selected_density = density
        state.selected_size = size
        for frame in gesture_frames(start, end):
            step_frame(state, frame, SCREEN_CENTER, config)
    return state, config


def create_demo_gif(output_file='demo.gif'):
    """デモGIFを作成"""
    print("🎬 デモ動画生成を開始...")

    state, config = build_demo_scene()

    fig = plt.figure(figsize=(12.8, 7.2), facecolor='black')
    ax = fig.add_subplot(111, facecolor='black')
    ax.set_xlim(-SCREEN_SIZE[0] / 2, SCREEN_SIZE[0] / 2)
    ax.set_ylim(SCREEN_SIZE[1] / 2, -SCREEN_SIZE[1] / 2)  # スクリーンと同じく y 下向き
    ax.set_aspect('equal')
    ax.axis('off')

    info_text = fig.text(0.02, 0.02, '', color='#00ff88', fontsize=9,
                         fontfamily='monospace', verticalalignment='bottom')

    patches = []
    sim_time = [0.0]

    def update(frame):
        for _ in range(STEPS_PER_FRAME):
            step_frame(state, InputFrame(dt=DT), SCREEN_CENTER, config)
            sim_time[0] += DT

        for patch in patches:
            patch.remove()
        patches.clear()

        for body in state.bodies:
            color = np.array(body.color) / 255.0
            patch = Circle(body.position, body.radius, color=color)
            ax.add_patch(patch)
            patches.append(patch)

        info_text.set_text(
            f"Time: {sim_time[0]:.1f}  |  Bodies: {len(state.bodies)}"
            f"  |  KE: {kinetic_energy(state.bodies):.1f}"
        )

        # 進捗表示
        if frame % 30 == 0:
            print(f"  進捗: {frame}/{TOTAL_FRAMES} ({100*frame/TOTAL_FRAMES:.0f}%)")

        return patches + [info_text]

    print("📹 録画中...")
    anim = FuncAnimation(fig, update, frames=TOTAL_FRAMES, blit=False, interval=33)

    print(f"💾 保存中: {output_file}")
    anim.save(output_file, writer='pillow', fps=30, dpi=80)

    print(f"✅ 完了: {output_file}")
    plt.close(fig)

    return output_file


if __name__ == "__main__":
    create_demo_gif()
