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

"""
Sensor components for geomeasure.

This module provides sensor interfaces, sample containers and signal
conditioning for inertial dead reckoning:

- Low-pass filtering of 3-axis channels
- Inertial sample container and tracker configuration
- Injected capability interfaces for motion and satellite-fix providers

Classes:
    SignalFilter: Single-pole low-pass smoother for one 3-axis stream
    InertialSample: One acceleration / angular-rate / attitude reading
    TrackerConfig: Dead-reckoning configuration parameters
    MotionSource: Abstract provider of inertial samples
    FixSource: Abstract provider of satellite fixes
    ReplayMotionSource: Replays a recorded sample sequence

Examples:
    Filtering an acceleration channel:

    >>> from geomeasure.sensors import SignalFilter
    >>> accel_filter = SignalFilter(cutoff_frequency=0.1)
    >>> smoothed = accel_filter.filter(np.array([0.0, 0.2, 0.0]), 1 / 60)
"""

from .filter import SignalFilter, low_pass
from .imu import InertialSample, TrackerConfig
from .sensor_base import (
    FixSource,
    MotionSource,
    ReplayMotionSource,
    StaticFixSource,
    samples_from_dataframe,
)

__all__ = [
    'SignalFilter', 'low_pass',
    'InertialSample', 'TrackerConfig',
    'FixSource', 'MotionSource', 'ReplayMotionSource', 'StaticFixSource',
    'samples_from_dataframe',
]
