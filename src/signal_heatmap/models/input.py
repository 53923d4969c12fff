"""
Input Schemas
=============

Pydantic models for data entering the engine from outside.

SampleRecord is the persistence contract for raw samples. A serialized
sample set is an ordered JSON array of records:

    [
        {
            "id": "8d1f5c2e-...",
            "position": {"x": 0.0, "y": 1.2, "z": -0.6},
            "strength": -58,
            "ssid": "office",
            "bssid": "aa:bb:cc:dd:ee:ff",
            "timestamp": "2026-10-19T08:15:02.120000Z",
            "frequency": 5.0
        }
    ]

``ssid``, ``bssid`` and ``frequency`` are optional. Timestamps without a
zone are read as UTC.

RecordRequest is the body accepted by the HTTP record endpoint.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from signal_heatmap.models.sample import Sample


class PositionModel(BaseModel):
    """World-space position in meters."""

    x: float = Field(..., allow_inf_nan=False, description="X coordinate (m)")
    y: float = Field(..., allow_inf_nan=False, description="Y coordinate (m)")
    z: float = Field(..., allow_inf_nan=False, description="Z coordinate (m)")


class SampleRecord(BaseModel):
    """
    Serialized form of one raw sample.

    Attributes:
        id: Unique sample identifier
        position: Capture position
        strength: Signal strength (dBm)
        ssid: Optional network name
        bssid: Optional source identifier
        timestamp: Capture time (ISO 8601)
        frequency: Optional frequency (GHz)
    """

    id: str = Field(..., min_length=1, description="Unique sample identifier")
    position: PositionModel
    strength: int = Field(..., description="Signal strength in dBm")
    ssid: Optional[str] = Field(default=None, description="Network name")
    bssid: Optional[str] = Field(default=None, description="Source identifier")
    timestamp: datetime = Field(..., description="Capture time")
    frequency: Optional[float] = Field(default=None, description="Frequency in GHz")

    @classmethod
    def from_sample(cls, sample: Sample) -> "SampleRecord":
        x, y, z = sample.position
        return cls(
            id=sample.id,
            position=PositionModel(x=x, y=y, z=z),
            strength=sample.strength,
            ssid=sample.ssid,
            bssid=sample.bssid,
            timestamp=sample.timestamp,
            frequency=sample.frequency,
        )

    def to_sample(self) -> Sample:
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return Sample(
            position=(self.position.x, self.position.y, self.position.z),
            strength=self.strength,
            ssid=self.ssid,
            bssid=self.bssid,
            timestamp=timestamp,
            frequency=self.frequency,
            id=self.id,
        )


class RecordRequest(BaseModel):
    """Body of a single record call from the capture feed."""

    position: PositionModel
    strength: int = Field(..., description="Signal strength in dBm")
    ssid: Optional[str] = None
    bssid: Optional[str] = None
    frequency: Optional[float] = None

    class Config:
        """Pydantic model configuration."""

        json_schema_extra = {
            "example": {
                "position": {"x": 0.4, "y": 1.1, "z": -2.0},
                "strength": -61,
                "ssid": "office",
                "bssid": "aa:bb:cc:dd:ee:ff",
            }
        }
