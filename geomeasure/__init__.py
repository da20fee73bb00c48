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
geomeasure - Field coordinate capture with satellite and inertial positioning

Converts satellite-fix ellipsoidal heights to orthometric heights with a
raster geoid model, and keeps producing coordinates by inertial dead
reckoning when the satellite fix degrades.
"""

__version__ = "1.0.0"
__author__ = "geomeasure Development Team"
__title__ = "geomeasure"
__description__ = "Field coordinate capture with geoid heights and inertial fallback"

# Registers the TRACE level before any module logger is used
from . import logger
from .core import *
from .attitude import *
from .coordinate import *
from .sensors import *
from .fusion import *
from .io import *
