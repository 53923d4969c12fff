"""
Signal Heatmap
==============

Spatial signal-coverage engine for tracked-device surveys.

This package turns a stream of discrete (position, signal strength) samples
into a continuous 3D coverage map: samples are aggregated into grid cells,
gaps are filled by inverse-distance interpolation, noise is reduced by
neighborhood smoothing, and weak regions are clustered into dead zones.

Components:
    - grid: Position <-> grid coordinate quantization
    - store: Append-only sample log and live cell map
    - processing: Interpolation, smoothing, dead-zone detection, statistics
    - persistence: Sample-set import/export
    - engine: Session owner and snapshot interface
    - main: FastAPI adapter over the engine

Example:
    from signal_heatmap.engine import HeatmapEngine

    engine = HeatmapEngine()
    engine.start_recording()
    engine.record((0.0, 0.0, 0.0), -48, ssid="office")
    result = engine.stop_recording()
    print(engine.statistics())
"""

__version__ = "0.1.0"
__author__ = "Signal Heatmap Project"

__all__ = [
    "__version__",
]
