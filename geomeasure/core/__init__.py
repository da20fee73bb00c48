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

"""Core Field Measurement Module.

This module provides the fundamental pieces shared by every other part of
geomeasure:

- **Constants and Parameters**: earth radius, gravity, geoid grid metadata,
  dead-reckoning accuracy model and mode-switching thresholds
- **Data Structures**: ``MeasurementPoint`` (the record handed to exporters),
  ``SatelliteFix``, ``LocalVector`` with named (north, east, up) axes,
  ``Attitude`` and the ``CaptureMode`` tag
- **Measurement Log**: ordered, thread-safe store of captured points

Example Usage:
    >>> from geomeasure.core import *
    >>>
    >>> point = MeasurementPoint(47.0, 19.0, 100.0, CaptureMode.SATELLITE_FIX)
    >>> log = MeasurementLog()
    >>> log.append(point)
    >>> log.to_dataframe()
"""

from .constants import *
from .data_structures import *
from .measurement_log import *
