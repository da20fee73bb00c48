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

"""Local tangent-plane projection around a reference point

Equirectangular (flat-earth) approximation on a spherical earth. It is only
meant for the short baselines covered by inertial dead reckoning; for longer
distances use a proper ellipsoidal transform.
"""

import numpy as np

from ..core.constants import D2R, EARTH_RADIUS, R2D
from ..core.data_structures import LocalVector


def lla2local(lat: float, lon: float, height: float,
              ref_lat: float, ref_lon: float, ref_height: float,
              radius: float = EARTH_RADIUS) -> LocalVector:
    """
    Convert geodetic coordinates to a local (north, east, up) offset

    Parameters:
    -----------
    lat, lon : float
        Point latitude and longitude (deg)
    height : float
        Point height (m)
    ref_lat, ref_lon : float
        Reference latitude and longitude (deg)
    ref_height : float
        Reference height (m)
    radius : float
        Earth radius (m)

    Returns:
    --------
    LocalVector
        Offset from the reference (m)

    Notes:
    ------
    north = dlat * R, east = dlon * R * cos(ref_lat), up = dh
    """
    d_north = (lat - ref_lat) * D2R * radius
    d_east = (lon - ref_lon) * D2R * radius * np.cos(ref_lat * D2R)
    return LocalVector(float(d_north), float(d_east), float(height - ref_height))


def local2lla(offset: LocalVector,
              ref_lat: float, ref_lon: float, ref_height: float,
              radius: float = EARTH_RADIUS) -> tuple[float, float, float]:
    """
    Convert a local (north, east, up) offset back to geodetic coordinates

    Parameters:
    -----------
    offset : LocalVector
        Offset from the reference (m)
    ref_lat, ref_lon : float
        Reference latitude and longitude (deg)
    ref_height : float
        Reference height (m)
    radius : float
        Earth radius (m)

    Returns:
    --------
    tuple[float, float, float]
        (lat deg, lon deg, height m)
    """
    d_lat = offset.north / radius * R2D
    d_lon = offset.east / (radius * np.cos(ref_lat * D2R)) * R2D
    return (float(ref_lat + d_lat),
            float(ref_lon + d_lon),
            float(ref_height + offset.up))


def point2local(point, reference, radius: float = EARTH_RADIUS) -> LocalVector:
    """Offset of ``point`` from ``reference`` (both with latitude/longitude/height)"""
    return lla2local(point.latitude, point.longitude, point.height,
                     reference.latitude, reference.longitude, reference.height,
                     radius)


def local_distance(point, reference, radius: float = EARTH_RADIUS) -> float:
    """Horizontal flat-earth distance between two points (m)"""
    offset = point2local(point, reference, radius)
    return float(np.hypot(offset.north, offset.east))
