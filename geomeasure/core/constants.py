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

"""Field Measurement Constants and System Parameters"""

import numpy as np

# Earth Parameters
EARTH_RADIUS = 6371000.0       # mean spherical earth radius (m)
G_GRAVITY = 9.81               # gravity magnitude used for compensation (m/s^2)
GRAVITY_VECTOR = np.array([0.0, 0.0, -G_GRAVITY])  # gravity in local (north, east, up) frame

# Unit conversions
R2D = 180.0 / np.pi            # radians to degrees
D2R = np.pi / 180.0            # degrees to radians

# ============================================================================
# GEOID UNDULATION GRID
# ============================================================================
FALLBACK_UNDULATION = 48.3     # undulation returned outside grid / on no-data (m)
NODATA_VALUE = -88.8888        # no-data sentinel of the undulation raster

# Default grid metadata (EHT2014 geoid over Hungary, EPSG:4326)
GRID_MIN_LAT = 45.551
GRID_MAX_LAT = 48.899
GRID_MIN_LON = 16.087
GRID_MAX_LON = 23.055
GRID_WIDTH = 268
GRID_HEIGHT = 186

DEFAULT_GRID_BOUNDS = (GRID_MIN_LAT, GRID_MAX_LAT, GRID_MIN_LON, GRID_MAX_LON)

# ============================================================================
# INERTIAL DEAD RECKONING
# ============================================================================
SAMPLE_RATE = 60.0             # nominal motion sample rate (Hz)
CUTOFF_FREQUENCY = 0.1         # low-pass cutoff for accel/gyro channels (Hz)
INITIAL_ACCURACY = 0.1         # accuracy estimate after start (m)
CALIBRATED_ACCURACY = 0.05     # accuracy estimate after calibration (m)
ACCURACY_GROWTH_RATE = 0.01    # dead-reckoning error growth (m/s)

# ============================================================================
# MODE SWITCHING
# ============================================================================
DEGRADATION_THRESHOLD = 5.0    # satellite accuracy above which inertial is advised (m)

# Measurement mode tags
MODE_TAG_GPS = "gps"
MODE_TAG_IMU = "imu"
