# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Core data structures for field height measurement"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import numpy as np

from ..attitude.euler import sensor2world
from .constants import MODE_TAG_GPS, MODE_TAG_IMU

__all__ = ['CaptureMode', 'LocalVector', 'Attitude', 'SatelliteFix', 'MeasurementPoint']


class CaptureMode(Enum):
    """Source that produced a measurement.

    Attributes
    ----------
    SATELLITE_FIX : str
        Point captured from a satellite fix, height converted with the geoid grid
    INERTIAL : str
        Point captured from inertial dead reckoning relative to a reference point

    Notes
    -----
    The enum values are the string tags used by exporters and importers.
    """
    SATELLITE_FIX = MODE_TAG_GPS
    INERTIAL = MODE_TAG_IMU


@dataclass(frozen=True)
class LocalVector:
    """3-axis vector in the local tangent-plane frame.

    Attributes
    ----------
    north : float
        Northward component
    east : float
        Eastward component
    up : float
        Upward component

    Notes
    -----
    Used for position (m), velocity (m/s), acceleration (m/s^2) and drift
    correction (m/s). Array form is always ordered [north, east, up].
    """
    north: float = 0.0
    east: float = 0.0
    up: float = 0.0

    @classmethod
    def zero(cls) -> "LocalVector":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, arr) -> "LocalVector":
        """Build from a length-3 array-like ordered [north, east, up]"""
        arr = np.asarray(arr, dtype=float)
        if arr.shape != (3,):
            raise ValueError(f"LocalVector needs 3 components, got shape {arr.shape}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array([self.north, self.east, self.up])

    def norm(self) -> float:
        return float(np.linalg.norm(self.as_array()))

    def __add__(self, other: "LocalVector") -> "LocalVector":
        return LocalVector(self.north + other.north,
                           self.east + other.east,
                           self.up + other.up)

    def __sub__(self, other: "LocalVector") -> "LocalVector":
        return LocalVector(self.north - other.north,
                           self.east - other.east,
                           self.up - other.up)

    def __mul__(self, scale: float) -> "LocalVector":
        return LocalVector(self.north * scale, self.east * scale, self.up * scale)

    __rmul__ = __mul__


@dataclass(frozen=True)
class Attitude:
    """Device attitude as roll, pitch, yaw (radians).

    Stored directly from the motion provider; the tracker never integrates it.
    """
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    @classmethod
    def from_array(cls, arr) -> "Attitude":
        arr = np.asarray(arr, dtype=float)
        if arr.shape != (3,):
            raise ValueError(f"Attitude needs [roll, pitch, yaw], got shape {arr.shape}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array([self.roll, self.pitch, self.yaw])

    def rotation_matrix(self) -> np.ndarray:
        """Sensor-to-world rotation matrix, R = Rz(yaw) @ Ry(pitch) @ Rx(roll)"""
        return sensor2world(self.as_array())


@dataclass(frozen=True)
class SatelliteFix:
    """Satellite position fix as delivered by the location provider.

    Attributes
    ----------
    latitude : float
        Latitude in degrees
    longitude : float
        Longitude in degrees
    ellipsoidal_height : float
        Height above the reference ellipsoid (m), not yet geoid corrected
    accuracy : Optional[float]
        Horizontal accuracy estimate (m), None when unknown
    timestamp : float
        Unix timestamp of the fix
    """
    latitude: float
    longitude: float
    ellipsoidal_height: float
    accuracy: Optional[float] = None
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class MeasurementPoint:
    """A captured field measurement.

    This is the only record handed to exporters, importers and renderers.
    Height is always orthometric (above the geoid); satellite heights are
    converted before a point is built.

    Attributes
    ----------
    latitude : float
        Latitude in degrees
    longitude : float
        Longitude in degrees
    height : float
        Orthometric height (m)
    mode : CaptureMode
        Source that produced the point
    accuracy : Optional[float]
        Accuracy estimate (m), None when unknown
    timestamp : float
        Unix timestamp of capture
    id : str
        Unique identifier (uuid4 string by default)

    Examples
    --------
    >>> p = MeasurementPoint(47.0, 19.0, 100.0, CaptureMode.SATELLITE_FIX, accuracy=3.0)
    >>> p.to_dict()['mode']
    'gps'
    """
    latitude: float
    longitude: float
    height: float
    mode: CaptureMode
    accuracy: Optional[float] = None
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict[str, Any]:
        """Exporter view of the point with the mode as its string tag"""
        return {
            'id': self.id,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'height': self.height,
            'timestamp': self.timestamp,
            'accuracy': self.accuracy,
            'mode': self.mode.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MeasurementPoint":
        """
        Rebuild a point from its exporter dictionary.

        Raises
        ------
        ValueError
            If a required field is missing or the mode tag is unknown
        """
        missing = [k for k in ('latitude', 'longitude', 'height', 'mode') if k not in data]
        if missing:
            raise ValueError(f"Missing measurement fields: {missing}")
        try:
            mode = CaptureMode(data['mode'])
        except ValueError:
            raise ValueError(f"Unknown measurement mode: {data['mode']!r}") from None

        accuracy = data.get('accuracy')
        kwargs = {}
        if data.get('id') is not None:
            kwargs['id'] = str(data['id'])
        if data.get('timestamp') is not None:
            kwargs['timestamp'] = float(data['timestamp'])

        return cls(
            latitude=float(data['latitude']),
            longitude=float(data['longitude']),
            height=float(data['height']),
            mode=mode,
            accuracy=None if accuracy is None else float(accuracy),
            **kwargs
        )
