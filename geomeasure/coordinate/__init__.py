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

"""Coordinate and height utilities

This module provides:
- Local tangent-plane (north, east, up) projection around a reference point
- Raster geoid model for ellipsoidal/orthometric height conversion
"""

# Height conversion utilities
from .height_model import GridMetadata, HeightGrid, HeightSystem, RasterHeightModel, convert_height

# Local frame projection
from .local_frame import lla2local, local2lla, local_distance, point2local

__all__ = [
    'GridMetadata', 'HeightGrid', 'HeightSystem', 'RasterHeightModel', 'convert_height',
    'lla2local', 'local2lla', 'local_distance', 'point2local',
]
