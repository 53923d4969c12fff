#!/usr/bin/env python3
"""
Synthetic Survey Script
=======================

Standalone script that drives the heatmap engine with a simulated walk.

This script:
    1. Walks a serpentine path across a rectangular floor
    2. Generates a strength reading per step from a single access point,
       with log-distance falloff, noise and an attenuating wall
    3. Stops the session and reports statistics and dead zones
    4. Optionally writes the exported sample set to a file

Usage:
    python scripts/simulate_survey.py --width 8 --depth 6 --step 0.25
    python scripts/simulate_survey.py --export survey.json --seed 7
"""

import argparse
import logging
import math
import os
import sys
from datetime import datetime, timedelta, timezone

import numpy as np

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from signal_heatmap.config import HeatmapConfiguration
from signal_heatmap.engine import HeatmapEngine


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


class SimulatedClock:
    """Deterministic clock advancing a fixed interval per call."""

    def __init__(self, interval: float) -> None:
        self._now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self._interval = timedelta(seconds=interval)

    def __call__(self) -> datetime:
        current = self._now
        self._now += self._interval
        return current


def serpentine_path(width: float, depth: float, step: float, height: float):
    """Yield (x, y, z) positions sweeping the floor row by row."""
    columns = int(width / step) + 1
    rows = int(depth / step) + 1
    for row in range(rows):
        order = range(columns) if row % 2 == 0 else reversed(range(columns))
        for col in order:
            yield (col * step, height, row * step)


def simulated_strength(
    position,
    access_point,
    wall_x: float,
    rng: np.random.Generator,
    noise_db: float,
) -> int:
    """Log-distance path loss with a wall beyond wall_x."""
    d = math.dist(position, access_point)
    strength = -35.0 - 25.0 * math.log10(1.0 + d)
    if position[0] > wall_x:
        strength -= 25.0
    strength += rng.normal(0.0, noise_db)
    return int(max(-100, min(0, round(strength))))


def run_survey(args: argparse.Namespace) -> dict:
    config = HeatmapConfiguration(
        cell_size=args.cell_size,
        smoothing_factor=args.smoothing,
        interpolation_enabled=not args.no_interpolation,
    )
    engine = HeatmapEngine(config=config, clock=SimulatedClock(config.sampling_interval))
    rng = np.random.default_rng(args.seed)
    access_point = (0.5, 2.0, 0.5)

    logger.info("=" * 60)
    logger.info("Synthetic Survey")
    logger.info("=" * 60)
    logger.info(f"Floor: {args.width}m x {args.depth}m, step {args.step}m")
    logger.info(f"Cell size: {config.cell_size}m, smoothing {config.smoothing_factor}")
    logger.info("=" * 60)

    engine.start_recording()
    for position in serpentine_path(args.width, args.depth, args.step, args.height):
        strength = simulated_strength(position, access_point, args.wall_x, rng, args.noise)
        engine.record(position, strength, ssid="simulated", bssid="00:00:00:00:00:00")
    engine.stop_recording()

    stats = engine.statistics()
    zones = engine.dead_zones()

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Samples: {stats.total_samples}")
    logger.info(
        f"Strength min/avg/max: {stats.min_strength}/"
        f"{stats.average_strength}/{stats.max_strength} dBm"
    )
    logger.info(f"Coverage area: {stats.coverage_area:.2f} m²")
    logger.info(f"Cells: {len(engine.cells())}")
    logger.info(f"Dead zones: {len(zones)}")
    for zone in zones:
        logger.info(f"  {zone!r}")
    logger.info("=" * 60)

    if args.export:
        with open(args.export, "wb") as f:
            f.write(engine.export_samples())
        logger.info(f"Exported samples to {args.export}")

    return {
        "samples": stats.total_samples,
        "cells": len(engine.cells()),
        "dead_zones": len(zones),
    }


def main():
    parser = argparse.ArgumentParser(description="Synthetic signal survey")
    parser.add_argument("--width", type=float, default=8.0, help="Floor width in meters")
    parser.add_argument("--depth", type=float, default=6.0, help="Floor depth in meters")
    parser.add_argument("--step", type=float, default=0.25, help="Walk step in meters")
    parser.add_argument("--height", type=float, default=1.2, help="Device height in meters")
    parser.add_argument("--wall-x", type=float, default=5.0, help="X position of attenuating wall")
    parser.add_argument("--noise", type=float, default=3.0, help="Noise std-dev in dB")
    parser.add_argument("--cell-size", type=float, default=0.3, help="Grid cell size in meters")
    parser.add_argument("--smoothing", type=float, default=0.5, help="Smoothing factor [0, 1]")
    parser.add_argument("--no-interpolation", action="store_true", help="Disable interpolation")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--export", type=str, default=None, help="Write sample JSON to this path")

    args = parser.parse_args()
    result = run_survey(args)

    sys.exit(0 if result["samples"] > 0 else 1)


if __name__ == "__main__":
    main()
