#!/usr/bin/env python3
"""
重力計算ベンチマーク比較

非対称ループ vs 対称ループ vs NumPyベクトル化
"""

import time
import numpy as np

from gravisim_physics import (
    apply_gravity_all,
    compute_accelerations_vectorized,
    make_body,
    total_momentum,
)


def random_bodies(n_bodies: int, seed: int = 42) -> list:
    """ランダムな天体を生成（ワールド座標 ±500 の範囲）"""
    rng = np.random.default_rng(seed)
    positions = rng.uniform(-500.0, 500.0, size=(n_bodies, 2))
    velocities = rng.uniform(-5.0, 5.0, size=(n_bodies, 2))
    sizes = rng.uniform(5.0, 50.0, size=n_bodies)
    return [make_body(p, v, 1.0, s) for p, v, s in zip(positions, velocities, sizes)]


def benchmark_loop(n_bodies: int, symmetric: bool, steps: int = 20) -> tuple:
    """ループ版ベンチマーク（速度更新のみ）"""
    bodies = random_bodies(n_bodies)
    p0 = total_momentum(bodies)

    start = time.perf_counter()
    for _ in range(steps):
        apply_gravity_all(bodies, symmetric=symmetric)
    elapsed = time.perf_counter() - start

    drift = float(np.linalg.norm(total_momentum(bodies) - p0))
    return elapsed / steps, drift


def benchmark_vectorized(n_bodies: int, steps: int = 20) -> float:
    """NumPyベクトル化版ベンチマーク"""
    bodies = random_bodies(n_bodies)
    positions = np.array([b.position for b in bodies])
    velocities = np.array([b.velocity for b in bodies])
    masses = np.array([b.mass for b in bodies])

    start = time.perf_counter()
    for _ in range(steps):
        velocities = velocities + compute_accelerations_vectorized(positions, masses)
    elapsed = time.perf_counter() - start

    return elapsed / steps


def main():
    print("=" * 72)
    print("Gravisim Gravity Benchmark")
    print("Asymmetric loop vs Symmetric loop vs NumPy vectorized")
    print("=" * 72)
    print()
    print(f"{'N':>5} | {'asym [ms]':>10} | {'sym [ms]':>10} | {'numpy [ms]':>10} | "
          f"{'asym drift':>11} | {'sym drift':>10}")
    print("-" * 72)

    for n in (10, 50, 100, 200):
        asym_time, asym_drift = benchmark_loop(n, symmetric=False)
        sym_time, sym_drift = benchmark_loop(n, symmetric=True)
        vec_time = benchmark_vectorized(n)
        print(f"{n:>5} | {asym_time*1000:>10.3f} | {sym_time*1000:>10.3f} | "
              f"{vec_time*1000:>10.3f} | {asym_drift:>11.3e} | {sym_drift:>10.3e}")

    print("=" * 72)
    print("drift = |total momentum after - before| (symmetric mode stays ~0)")


if __name__ == "__main__":
    main()
