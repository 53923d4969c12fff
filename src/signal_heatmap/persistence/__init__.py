"""
Persistence Module
==================

Serialization contract for raw sample sets.
"""

from signal_heatmap.persistence.codec import decode_samples, encode_samples

__all__ = ["decode_samples", "encode_samples"]
