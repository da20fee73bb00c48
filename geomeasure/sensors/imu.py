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

"""Inertial sample data structures and tracker configuration"""

from dataclasses import dataclass, field

import numpy as np

from ..core.constants import (
    ACCURACY_GROWTH_RATE,
    CALIBRATED_ACCURACY,
    CUTOFF_FREQUENCY,
    EARTH_RADIUS,
    GRAVITY_VECTOR,
    INITIAL_ACCURACY,
    SAMPLE_RATE,
)
from ..core.data_structures import Attitude


@dataclass
class InertialSample:
    """
    One already-sampled motion reading.

    Attributes:
        timestamp (float): Sample time (s)
        acceleration (np.ndarray): 3D acceleration in the sensor frame (m/s²)
        rotation_rate (np.ndarray): 3D angular rate in the sensor frame (rad/s)
        attitude (Attitude): Device attitude reported with the sample
        gravity_removed (bool): True when the provider already removed gravity
            (device-motion "user acceleration"); False for raw specific force

    Examples:
        >>> sample = InertialSample(
        ...     timestamp=0.0,
        ...     acceleration=np.array([0.1, 0.0, 0.0]),
        ...     rotation_rate=np.zeros(3),
        ...     attitude=Attitude(0.0, 0.0, 0.0)
        ... )
        >>> sample.data
        array([0.1, 0. , 0. , 0. , 0. , 0. ])
    """
    timestamp: float
    acceleration: np.ndarray
    rotation_rate: np.ndarray
    attitude: Attitude = field(default_factory=Attitude)
    gravity_removed: bool = True

    def __post_init__(self):
        """
        Validate vector shapes.

        Raises:
            ValueError: If acceleration or rotation rate is not 3D
        """
        self.acceleration = np.asarray(self.acceleration, dtype=float)
        self.rotation_rate = np.asarray(self.rotation_rate, dtype=float)
        if self.acceleration.shape != (3,):
            raise ValueError("Inertial acceleration must be 3D [ax, ay, az]")
        if self.rotation_rate.shape != (3,):
            raise ValueError("Inertial rotation rate must be 3D [wx, wy, wz]")
        if not isinstance(self.attitude, Attitude):
            self.attitude = Attitude.from_array(self.attitude)

    @property
    def data(self) -> np.ndarray:
        """6D [ax, ay, az, wx, wy, wz] view of the sample"""
        return np.concatenate([self.acceleration, self.rotation_rate])

    def is_valid(self) -> bool:
        """True if every component (attitude included) is finite"""
        return bool(np.all(np.isfinite(self.data)) and
                    np.all(np.isfinite(self.attitude.as_array())) and
                    np.isfinite(self.timestamp))


@dataclass
class TrackerConfig:
    """
    Configuration parameters for inertial dead reckoning.

    Attributes:
        sample_rate (float): Nominal motion sample rate (Hz)
        accel_cutoff (float): Acceleration low-pass cutoff (Hz)
        gyro_cutoff (float): Angular-rate low-pass cutoff (Hz)
        initial_accuracy (float): Accuracy estimate after start (m)
        calibrated_accuracy (float): Accuracy estimate after calibrate (m)
        accuracy_growth_rate (float): Accuracy estimate growth per second (m/s)
        earth_radius (float): Sphere radius for the local projection (m)
        gravity (np.ndarray): Gravity vector in the (north, east, up) frame

    Examples:
        >>> config = TrackerConfig(sample_rate=100.0)
        >>> config.nominal_dt
        0.01
    """
    sample_rate: float = SAMPLE_RATE
    accel_cutoff: float = CUTOFF_FREQUENCY
    gyro_cutoff: float = CUTOFF_FREQUENCY
    initial_accuracy: float = INITIAL_ACCURACY
    calibrated_accuracy: float = CALIBRATED_ACCURACY
    accuracy_growth_rate: float = ACCURACY_GROWTH_RATE
    earth_radius: float = EARTH_RADIUS
    gravity: np.ndarray = field(default_factory=lambda: GRAVITY_VECTOR.copy())

    def __post_init__(self):
        """
        Validate rates and fill the gravity vector.

        Raises:
            ValueError: If a rate, cutoff or radius is not positive, or an
                accuracy constant is negative
        """
        for name in ('sample_rate', 'accel_cutoff', 'gyro_cutoff', 'earth_radius'):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ('initial_accuracy', 'calibrated_accuracy', 'accuracy_growth_rate'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        self.gravity = np.asarray(self.gravity, dtype=float)
        if self.gravity.shape != (3,):
            raise ValueError("Gravity vector must be 3D [north, east, up]")

    @property
    def nominal_dt(self) -> float:
        return 1.0 / self.sample_rate
