"""
Synthetic court walk: waypoints to wearable sample streams.

Walk model:
    - Constant walking speed along straight segments between waypoints.
    - Relative heading of a segment with direction (dx, dy) is
      ψ = atan2(-dx, dy), the inverse of the court step update
      (-L·sin ψ, L·cos ψ).
    - Device yaw = normalize(reference_heading + ψ) + yaw noise.
    - Linear acceleration magnitude = peak · max(0, sin(2π f t)), one peak
      per step period, plus noise.
    - Rotation rate is small noise, except around gesture times where the
      z axis spikes to ``gesture_rate``.
    - Cumulative distance = walked distance + noise, forced monotonic.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from courttrail.sensors.types import MotionSample
from courttrail.utils.angles import normalize_angle_array


def court_loop_waypoints(half_width: float = 3.0, depth: float = 4.0) -> np.ndarray:
    """
    Rectangular loop starting and ending at the calibration point.

    The walker goes toward the net, across to the right, back, and returns
    along the baseline.

    Args:
        half_width: Lateral extent of the loop (m).
        depth: Extent toward the net (m).

    Returns:
        waypoints: Shape (6, 2). Units: m.
    """
    return np.array([
        [0.0, 0.0],
        [0.0, depth],
        [half_width, depth],
        [half_width, 0.0],
        [0.0, 0.0],
        [-half_width, 0.0],
    ])


def interpolate_along_path(waypoints: np.ndarray, s: np.ndarray) -> np.ndarray:
    """
    Positions at arc lengths ``s`` along a polyline.

    Args:
        waypoints: Polyline vertices, shape (K, 2).
        s: Arc lengths (m), shape (N,). Clipped to [0, total length].

    Returns:
        positions: Shape (N, 2).
    """
    waypoints = np.asarray(waypoints, dtype=float)
    seg = np.diff(waypoints, axis=0)
    seg_len = np.linalg.norm(seg, axis=1)
    cum = np.concatenate([[0.0], np.cumsum(seg_len)])
    s = np.clip(np.asarray(s, dtype=float), 0.0, cum[-1])
    x = np.interp(s, cum, waypoints[:, 0])
    y = np.interp(s, cum, waypoints[:, 1])
    return np.column_stack([x, y])


def _segment_headings(waypoints: np.ndarray, s: np.ndarray) -> np.ndarray:
    seg = np.diff(waypoints, axis=0)
    seg_len = np.linalg.norm(seg, axis=1)
    cum = np.cumsum(seg_len)
    idx = np.minimum(np.searchsorted(cum, s, side='right'), len(seg) - 1)
    return np.arctan2(-seg[idx, 0], seg[idx, 1])


def generate_court_walk(
    waypoints: Optional[np.ndarray] = None,
    reference_heading: float = 0.0,
    speed: float = 1.2,
    step_freq: float = 2.0,
    motion_rate_hz: float = 50.0,
    pedometer_rate_hz: float = 2.0,
    accel_peak: float = 0.5,
    accel_noise: float = 0.02,
    yaw_noise: float = 0.0,
    gyro_noise: float = 0.05,
    distance_noise: float = 0.0,
    gesture_times: Sequence[float] = (),
    gesture_rate: float = 3.0,
    seed: Optional[int] = None,
) -> Dict[str, object]:
    """
    Generate device-motion and pedometer samples for a walk.

    Args:
        waypoints: Walk polyline, shape (K, 2). Default: court_loop_waypoints().
        reference_heading: Calibration heading (rad).
        speed: Walking speed (m/s).
        step_freq: Step frequency (Hz).
        motion_rate_hz: Device-motion sample rate (Hz).
        pedometer_rate_hz: Pedometer update rate (Hz).
        accel_peak: Peak linear acceleration per step (g).
        accel_noise: Acceleration noise std dev (g).
        yaw_noise: Yaw noise std dev (rad).
        gyro_noise: Rotation-rate noise std dev (rad/s).
        distance_noise: Cumulative-distance noise std dev (m).
        gesture_times: Times (s) of wrist gestures; rotation rate spikes
                       for ±0.25 s around each.
        gesture_rate: Rotation rate during a gesture (rad/s).
        seed: Random seed.

    Returns:
        Dictionary with:
            'samples': List[MotionSample] merged and sorted by time
            't_pedometer': Pedometer tick times, shape (M,)
            'truth_xy': True positions at pedometer ticks, shape (M, 2)
            'duration': Walk duration (s)
            'length': Walk length (m)
    """
    if speed <= 0 or step_freq <= 0:
        raise ValueError(f"speed and step_freq must be positive, got {speed}, {step_freq}")
    if motion_rate_hz <= 0 or pedometer_rate_hz <= 0:
        raise ValueError("sample rates must be positive")

    rng = np.random.default_rng(seed)
    if waypoints is None:
        waypoints = court_loop_waypoints()
    waypoints = np.asarray(waypoints, dtype=float)
    if waypoints.ndim != 2 or waypoints.shape[1] != 2 or len(waypoints) < 2:
        raise ValueError(f"waypoints must have shape (K>=2, 2), got {waypoints.shape}")

    length = float(np.sum(np.linalg.norm(np.diff(waypoints, axis=0), axis=1)))
    duration = length / speed

    # Device-motion stream
    t_motion = np.arange(0.0, duration, 1.0 / motion_rate_hz)
    s_motion = speed * t_motion
    psi = _segment_headings(waypoints, s_motion)
    yaw = normalize_angle_array(reference_heading + psi)
    yaw = yaw + yaw_noise * rng.standard_normal(len(t_motion))

    gyro = gyro_noise * rng.standard_normal((len(t_motion), 3))
    for t_g in gesture_times:
        gyro[np.abs(t_motion - t_g) <= 0.25, 2] = gesture_rate

    accel_mag = accel_peak * np.maximum(0.0, np.sin(2 * np.pi * step_freq * t_motion))
    accel = np.zeros((len(t_motion), 3))
    accel[:, 2] = accel_mag
    accel += accel_noise * rng.standard_normal(accel.shape)

    # Pedometer stream
    t_ped = np.arange(1.0 / pedometer_rate_hz, duration + 1e-9, 1.0 / pedometer_rate_hz)
    s_ped = np.minimum(speed * t_ped, length)
    dist = s_ped + distance_noise * rng.standard_normal(len(t_ped))
    dist = np.maximum.accumulate(np.maximum(dist, 0.0))

    samples: List[MotionSample] = []
    for k, t in enumerate(t_motion):
        samples.append(MotionSample(
            yaw=float(yaw[k]),
            rotation_rate=gyro[k],
            linear_acceleration=accel[k],
            t=float(t),
        ))
    for k, t in enumerate(t_ped):
        samples.append(MotionSample(cumulative_distance=float(dist[k]), t=float(t)))
    samples.sort(key=lambda smp: smp.t)

    return {
        'samples': samples,
        't_pedometer': t_ped,
        'truth_xy': interpolate_along_path(waypoints, s_ped),
        'duration': duration,
        'length': length,
    }
