"""
Store Module
============

Sample log and live cell map for an active recording session.
"""

from signal_heatmap.store.sample_store import RecordingSession, SampleStore

__all__ = ["RecordingSession", "SampleStore"]
