"""
Gravisim 物理計算モジュール

=== 機能一覧 ===
- 円盤状の質点（Body）の生成: 質量 = 密度 × 半径²（面積比例モデル）
- 万有引力による速度更新（全ペア O(n²)）
- 陽的オイラー法による位置更新
- NumPyベクトル化版の加速度計算（対称モード検証・ベンチマーク用）

物理モデル: 万有引力の法則 + 最小距離²による除外（距離² < 1.0 のペアは無視）
計算手法: 固定 dt の陽的オイラー法
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import numpy as np


# ============================================================
# 定数
# ============================================================

G = 0.0005
MIN_DIST_SQ = 1.0
BODY_COLOR = (200, 200, 255)


# ============================================================
# 天体
# ============================================================

@dataclass(eq=False)
class Body:
    """円盤状の質点（位置・速度・質量・半径・色）"""
    position: np.ndarray
    velocity: np.ndarray
    mass: float
    radius: float
    color: Tuple[int, int, int] = field(default=BODY_COLOR)

    def apply_gravity(self, other: "Body", g: float = G, min_dist_sq: float = MIN_DIST_SQ):
        """other からの引力で自分の速度だけを更新する"""
        self.velocity += gravitational_force(self, other, g, min_dist_sq) / self.mass

    def update(self, dt: float):
        """位置更新（position += velocity * dt）"""
        self.position += self.velocity * dt


def make_body(
    position: Sequence[float],
    velocity: Sequence[float],
    density: float,
    size: float,
    color: Tuple[int, int, int] = BODY_COLOR
) -> Body:
    """密度とサイズから天体を生成"""
    if density <= 0:
        raise ValueError(f"密度は正の値である必要があります: {density}")
    if size <= 0:
        raise ValueError(f"サイズは正の値である必要があります: {size}")

    radius = float(size)
    mass = density * radius * radius
    return Body(
        position=np.array(position, dtype=float),
        velocity=np.array(velocity, dtype=float),
        mass=mass,
        radius=radius,
        color=color,
    )


# ============================================================
# 重力・積分
# ============================================================

def gravitational_force(
    body: Body,
    other: Body,
    g: float = G,
    min_dist_sq: float = MIN_DIST_SQ
) -> np.ndarray:
    """body が other から受ける力ベクトル（除外距離内ならゼロ）"""
    direction = other.position - body.position
    dist_sq = float(np.dot(direction, direction))
    if dist_sq < min_dist_sq:
        return np.zeros(2)
    force_mag = g * body.mass * other.mass / dist_sq
    return direction / np.sqrt(dist_sq) * force_mag


def apply_gravity_all(
    bodies: List[Body],
    symmetric: bool = False,
    g: float = G,
    min_dist_sq: float = MIN_DIST_SQ
):
    """
    全ペアの引力で速度を更新

    Args:
        bodies: 天体リスト（その場で更新）
        symmetric: False の場合、各天体はリスト上で後ろにある天体からの
                   引力だけを受ける（後ろ側は不動として扱う）。
                   True の場合は全ての順序対に適用（作用・反作用が成立）。
    """
    n = len(bodies)
    if symmetric:
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                bodies[i].apply_gravity(bodies[j], g, min_dist_sq)
        return

    for i in range(n):
        this = bodies[i]
        for other in bodies[i + 1:]:
            this.apply_gravity(other, g, min_dist_sq)


def integrate(bodies: List[Body], dt: float):
    """全天体の位置を dt だけ進める"""
    for body in bodies:
        body.update(dt)


def compute_accelerations_vectorized(
    positions: np.ndarray,
    masses: np.ndarray,
    min_dist_sq: float = MIN_DIST_SQ,
    g: float = G
) -> np.ndarray:
    """ベクトル化された加速度計算（対称モード相当）"""
    r_ij = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    r2 = np.sum(r_ij ** 2, axis=2)

    # 自分自身と近すぎるペアを除外
    excluded = r2 < min_dist_sq
    np.fill_diagonal(excluded, True)
    r2 = np.where(excluded, 1.0, r2)

    inv_r3 = r2 ** (-1.5)
    inv_r3[excluded] = 0.0

    accelerations = g * np.sum(
        masses[np.newaxis, :, np.newaxis] * r_ij * inv_r3[:, :, np.newaxis],
        axis=1
    )
    return accelerations


# ============================================================
# 診断量
# ============================================================

def total_momentum(bodies: List[Body]) -> np.ndarray:
    """全運動量"""
    if not bodies:
        return np.zeros(2)
    return np.sum([b.mass * b.velocity for b in bodies], axis=0)


def kinetic_energy(bodies: List[Body]) -> float:
    """運動エネルギー"""
    return float(sum(0.5 * b.mass * np.dot(b.velocity, b.velocity) for b in bodies))
