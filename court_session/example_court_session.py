"""
Example: Court Session - Calibrate, Record, Hand Off, Heatmap

Runs one complete session through the pipeline:
    1. Calibrate the reference heading at the starting point
    2. Replay wearable motion samples through a TrailSession
    3. Hand the finished trail to the phone side over a LoopbackChannel
    4. Decode it with a TrailReceiver and bin it into a heatmap grid

Can run with:
    - Pre-generated dataset: python example_court_session.py --data court_session_baseline
    - Inline data (default): python example_court_session.py

Save figures with --figs DIR.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from courttrail.config import TrailConfig
from courttrail.heatmap import DEFAULT_COURT_BOUNDS, HeatmapConfig
from courttrail.sensors import MotionSample, PdrConfig, ReplaySampleSource
from courttrail.session import TrailSession
from courttrail.transport import LoopbackChannel, TrailReceiver
from courttrail.eval import (
    compute_position_errors,
    compute_rmse,
    plot_heatmap,
    plot_trail,
    save_figure,
    summarize_trail,
)
from courttrail.sim import generate_court_walk


def load_court_dataset(data_dir: str) -> Dict[str, Any]:
    """Load a court session dataset from directory.

    Args:
        data_dir: Path to dataset directory (e.g., 'data/sim/court_session_baseline')

    Returns:
        Dictionary with samples, optional ground truth and optional config
    """
    path = Path(data_dir)

    with open(path / 'samples.json') as f:
        data: Dict[str, Any] = {
            'samples': [MotionSample.from_dict(d) for d in json.load(f)],
        }

    truth_path = path / 'ground_truth.json'
    if truth_path.exists():
        with open(truth_path) as f:
            truth = json.load(f)
        data['truth_xy'] = np.asarray(truth['xy'], dtype=float).reshape(-1, 2)

    config_path = path / 'config.json'
    if config_path.exists():
        with open(config_path) as f:
            data['config'] = json.load(f)

    return data


def run_session(
    samples: List[MotionSample],
    reference_heading: float,
    config: TrailConfig,
) -> Dict[str, Any]:
    """
    Run one session end to end and return the local and received trails.

    The phone side only ever sees the decoded payload, never the session's
    own path object.
    """
    source = ReplaySampleSource(samples)
    channel = LoopbackChannel()
    channel.activate()
    receiver = TrailReceiver(channel)

    session = TrailSession(source, channel=channel, config=config.pdr)
    session.calibrate(reference_heading)
    session.start()
    deliveries = source.replay()
    result = session.stop()
    receiver.close()

    received = np.array(receiver.latest, dtype=float).reshape(-1, 2)
    grid = config.heatmap.bin(receiver.latest)

    return {
        'result': result,
        'deliveries': deliveries,
        'trail': np.array(result.path, dtype=float).reshape(-1, 2),
        'received': received,
        'grid': grid,
    }


def print_summary(run: Dict[str, Any], truth_xy: Optional[np.ndarray] = None) -> None:
    result = run['result']
    stats = result.stats

    print("\nSession:")
    print(f"  Deliveries:      {run['deliveries']}")
    print(f"  Samples handled: {stats.samples}")
    print(f"  Positions:       {stats.positions}")
    print(f"  Noise rejected:  {stats.noise_rejected}")
    print(f"  Gated:           {stats.gated}")
    print(f"  Sent:            {result.sent}")
    if result.error is not None:
        print(f"  Transport error: {result.error}")

    summary = summarize_trail(run['trail'])
    print("\nTrail:")
    print(f"  Points:          {summary['n_points']}")
    print(f"  Length:          {summary['length']:.2f} m")
    print(f"  Final position:  ({summary['final_x']:.2f}, {summary['final_y']:.2f}) m")
    print(f"  Max range:       {summary['max_range']:.2f} m")
    print(f"  Received points: {len(run['received'])}")

    if truth_xy is not None and len(truth_xy) + 1 == len(run['trail']):
        rmse = compute_rmse(compute_position_errors(truth_xy, run['trail'][1:]))
        print(f"  RMSE vs truth:   {rmse:.3f} m")

    grid = run['grid']
    print("\nHeatmap:")
    print(f"  Grid:            {grid.rows} x {grid.cols}")
    print(f"  Binned points:   {grid.total}")
    print(f"  Max cell count:  {grid.max_value}")


def save_plots(run: Dict[str, Any], config: TrailConfig, figs_dir: Path,
               truth_xy: Optional[np.ndarray] = None) -> None:
    trails = {'Received trail': run['received']}
    if truth_xy is not None:
        trails['Ground truth'] = np.vstack([np.zeros((1, 2)), truth_xy])

    bounds = config.heatmap.bounds
    fig = plot_trail(trails, bounds=bounds, title="Court Session Trail")
    paths = save_figure(fig, figs_dir, "court_session_trail")
    plt.close(fig)

    if bounds is not None:
        fig = plot_heatmap(run['grid'], bounds, trail_xy=run['received'])
        paths += save_figure(fig, figs_dir, "court_session_heatmap")
        plt.close(fig)

    for p in paths:
        print(f"  Saved: {p}")


def run_with_dataset(data_dir: str, figs_dir: Optional[str] = None) -> None:
    """Run the pipeline on a pre-generated dataset."""
    print("\n" + "=" * 70)
    print(f"Court Session (dataset: {Path(data_dir).name})")
    print("=" * 70)

    data = load_court_dataset(data_dir)
    raw_config = data.get('config', {})
    config = TrailConfig.from_dict(raw_config.get('trail_config', {}))
    reference_heading = float(raw_config.get('reference_heading_rad', 0.0))

    print(f"\n  Samples:           {len(data['samples'])}")
    print(f"  Reference heading: {np.rad2deg(reference_heading):.1f} deg")

    run = run_session(data['samples'], reference_heading, config)
    print_summary(run, data.get('truth_xy'))

    if figs_dir:
        print("\nGenerating plots...")
        save_plots(run, config, Path(figs_dir), data.get('truth_xy'))


def run_with_inline_data(figs_dir: Optional[str] = None) -> None:
    """Run the pipeline on an inline simulated walk."""
    print("\n" + "=" * 70)
    print("Court Session (inline generated walk)")
    print("=" * 70)

    reference_heading = np.deg2rad(30.0)
    walk = generate_court_walk(
        reference_heading=reference_heading,
        yaw_noise=0.01,
        distance_noise=0.02,
        gesture_times=[5.0],
        seed=42,
    )
    config = TrailConfig(
        pdr=PdrConfig(rotation_rate_limit=1.0),
        heatmap=HeatmapConfig(rows=16, cols=16, bounds=DEFAULT_COURT_BOUNDS),
    )

    print(f"\n  Walk length:       {walk['length']:.1f} m")
    print(f"  Duration:          {walk['duration']:.1f} s")
    print(f"  Samples:           {len(walk['samples'])}")
    print(f"  Rotation gate:     {config.pdr.rotation_rate_limit} rad/s")

    run = run_session(walk['samples'], float(reference_heading), config)
    print_summary(run, walk['truth_xy'])

    if figs_dir:
        print("\nGenerating plots...")
        save_plots(run, config, Path(figs_dir), walk['truth_xy'])


def main():
    """Main execution with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Court Session: calibrate, record, hand off, heatmap",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with inline generated data (default)
  python example_court_session.py

  # Run with pre-generated dataset
  python example_court_session.py --data court_session_gesture

  # Save figures
  python example_court_session.py --figs figs
        """
    )
    parser.add_argument(
        "--data", type=str, default=None,
        help="Dataset name or path (e.g., 'court_session_baseline' or full path)"
    )
    parser.add_argument(
        "--figs", type=str, default=None,
        help="Directory to save figures (default: no figures)"
    )

    args = parser.parse_args()

    if args.data:
        data_path = Path(args.data)
        if not data_path.exists():
            data_path = Path("data/sim") / args.data
        if not data_path.exists():
            print(f"Error: Dataset not found at '{args.data}' or 'data/sim/{args.data}'")
            print("\nAvailable datasets:")
            sim_dir = Path("data/sim")
            if sim_dir.exists():
                for d in sorted(sim_dir.iterdir()):
                    if d.is_dir() and d.name.startswith("court_session"):
                        print(f"  - {d.name}")
            return

        run_with_dataset(str(data_path), figs_dir=args.figs)
    else:
        run_with_inline_data(figs_dir=args.figs)


if __name__ == "__main__":
    main()
