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
Raster geoid model for converting between ellipsoidal and orthometric heights.

Ellipsoidal height (h): Height above the reference ellipsoid (satellite height)
Orthometric height (H): Height above the geoid (mean sea level)
Geoid undulation (N): Height of the geoid above the ellipsoid

Relationship: H = h - N

The undulation N is bilinearly interpolated from a regular lat/lon grid. Any
lookup that cannot be interpolated (outside the grid, touching a no-data node,
or no grid loaded at all) returns a fixed fallback undulation instead of
failing, so a caller always gets a height.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from ..core.constants import (
    DEFAULT_GRID_BOUNDS,
    FALLBACK_UNDULATION,
    GRID_HEIGHT,
    GRID_MAX_LAT,
    GRID_MAX_LON,
    GRID_MIN_LAT,
    GRID_MIN_LON,
    GRID_WIDTH,
    NODATA_VALUE,
)

logger = logging.getLogger(__name__)

# Slack (fraction of the grid extent) for coordinates that land on the outer nodes
# with floating-point noise.
_EDGE_EPS = 1e-9


class HeightSystem(Enum):
    """Enumeration of supported height systems

    Attributes
    ----------
    ELLIPSOIDAL : str
        Height above the reference ellipsoid, as reported by satellite positioning
    ORTHOMETRIC : str
        Height above the geoid (mean sea level)
    """
    ELLIPSOIDAL = "ellipsoidal"
    ORTHOMETRIC = "orthometric"


@dataclass
class GridMetadata:
    """Layout of a raw undulation grid

    Unset fields default to the bundled EHT2014 grid over Hungary.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    min_lat: Optional[float] = None
    max_lat: Optional[float] = None
    min_lon: Optional[float] = None
    max_lon: Optional[float] = None
    no_data_value: float = NODATA_VALUE

    def __post_init__(self):
        if self.width is None:
            self.width = GRID_WIDTH
        if self.height is None:
            self.height = GRID_HEIGHT
        if self.min_lat is None:
            self.min_lat = GRID_MIN_LAT
        if self.max_lat is None:
            self.max_lat = GRID_MAX_LAT
        if self.min_lon is None:
            self.min_lon = GRID_MIN_LON
        if self.max_lon is None:
            self.max_lon = GRID_MAX_LON
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Grid dimensions must be positive: {self.width}x{self.height}")

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self.min_lat, self.max_lat, self.min_lon, self.max_lon)

    @property
    def byte_size(self) -> int:
        """Size of the matching raw float32 buffer"""
        return self.width * self.height * 4


@dataclass(frozen=True)
class HeightGrid:
    """Geoid undulation grid with its geographic bounds.

    Attributes
    ----------
    values : np.ndarray
        2D float32 array of undulations (m), shape (height, width), row-major.
        Row 0 lies on ``min_lat`` and column 0 on ``min_lon``.
    min_lat, max_lat : float
        Latitude bounds (deg, EPSG:4326)
    min_lon, max_lon : float
        Longitude bounds (deg, EPSG:4326)
    no_data_value : float
        Sentinel marking nodes without data

    Notes
    -----
    The values array is copied and made read-only on construction, so a grid
    can be shared by any number of concurrent readers.

    Raises
    ------
    ValueError
        If the array is not a non-empty 2D grid or the bounds are not finite
        with max > min
    """
    values: np.ndarray
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float
    no_data_value: float = NODATA_VALUE

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float32)
        if values.ndim != 2 or values.shape[0] < 1 or values.shape[1] < 1:
            raise ValueError(f"Height grid must be a non-empty 2D array, got shape {values.shape}")
        bounds = (self.min_lat, self.max_lat, self.min_lon, self.max_lon)
        if not all(np.isfinite(b) for b in bounds):
            raise ValueError(f"Height grid bounds must be finite: {bounds}")
        if self.max_lat <= self.min_lat or self.max_lon <= self.min_lon:
            raise ValueError(f"Height grid bounds must satisfy max > min: {bounds}")
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)

    @classmethod
    def from_array(cls, values, bounds: tuple[float, float, float, float],
                   no_data_value: float = NODATA_VALUE,
                   width: Optional[int] = None,
                   height: Optional[int] = None) -> "HeightGrid":
        """
        Build a grid from a 2D array-like or a flat row-major sequence.

        Parameters
        ----------
        values : array_like
            2D grid, or flat sequence of ``width * height`` values
        bounds : tuple
            (min_lat, max_lat, min_lon, max_lon) in degrees
        no_data_value : float
            No-data sentinel
        width, height : int, optional
            Grid dimensions, required for flat input
        """
        arr = np.asarray(values, dtype=np.float32)
        if arr.ndim == 1:
            if width is None or height is None:
                raise ValueError("Flat grid values need explicit width and height")
            if arr.size != width * height:
                raise ValueError(f"Expected {width * height} grid values, got {arr.size}")
            arr = arr.reshape(height, width)
        min_lat, max_lat, min_lon, max_lon = bounds
        return cls(arr, float(min_lat), float(max_lat), float(min_lon), float(max_lon),
                   float(no_data_value))

    @classmethod
    def from_buffer(cls, buffer: bytes, width: int, height: int,
                    bounds: tuple[float, float, float, float],
                    no_data_value: float = NODATA_VALUE,
                    byteorder: str = '<') -> "HeightGrid":
        """
        Build a grid from a raw buffer of 32-bit floats.

        Parameters
        ----------
        buffer : bytes
            ``width * height`` float32 values, row-major
        width, height : int
            Grid dimensions
        bounds : tuple
            (min_lat, max_lat, min_lon, max_lon) in degrees
        no_data_value : float
            No-data sentinel
        byteorder : str
            '<' little-endian (default) or '>' big-endian

        Raises
        ------
        ValueError
            If the buffer size does not match the dimensions
        """
        expected = width * height * 4
        if width < 1 or height < 1 or len(buffer) != expected:
            raise ValueError(f"Grid buffer holds {len(buffer)} bytes, "
                             f"expected {expected} for {width}x{height} float32")
        arr = np.frombuffer(buffer, dtype=np.dtype(f'{byteorder}f4'))
        return cls.from_array(arr.astype(np.float32), bounds, no_data_value, width, height)

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def height(self) -> int:
        return self.values.shape[0]

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self.min_lat, self.max_lat, self.min_lon, self.max_lon)

    def is_no_data(self, value: float) -> bool:
        return bool(np.isnan(value) or value == np.float32(self.no_data_value))


class RasterHeightModel:
    """Geoid undulation model backed by a HeightGrid

    An unloaded model (no grid, or a grid that failed to parse) is a valid,
    degraded model: every lookup returns the fallback undulation.

    Parameters
    ----------
    grid : HeightGrid, optional
        Preloaded grid
    fallback : float
        Undulation returned whenever interpolation is not possible (m)

    Examples
    --------
    >>> model = RasterHeightModel()
    >>> model.load([[10, 12], [14, 16]], bounds=(0.0, 1.0, 0.0, 1.0))
    True
    >>> model.lookup(0.5, 0.5)
    13.0
    >>> model.orthometric_height(200.0, 0.5, 0.5)
    187.0
    """

    def __init__(self, grid: Optional[HeightGrid] = None,
                 fallback: float = FALLBACK_UNDULATION):
        self._grid = grid
        self.fallback = float(fallback)

    def load(self, grid_values,
             bounds: tuple[float, float, float, float] = DEFAULT_GRID_BOUNDS,
             no_data_value: float = NODATA_VALUE,
             width: Optional[int] = None,
             height: Optional[int] = None) -> bool:
        """
        Load undulation values into the model.

        Parameters
        ----------
        grid_values : array_like or bytes
            2D grid, flat row-major sequence, or raw float32 buffer
        bounds : tuple
            (min_lat, max_lat, min_lon, max_lon) in degrees
        no_data_value : float
            No-data sentinel
        width, height : int, optional
            Grid dimensions, required for flat sequences and raw buffers

        Returns
        -------
        bool
            True if the grid was loaded; False if the data could not be
            parsed, in which case the model is left unloaded
        """
        try:
            if isinstance(grid_values, (bytes, bytearray, memoryview)):
                if width is None or height is None:
                    raise ValueError("Raw grid buffer needs explicit width and height")
                grid = HeightGrid.from_buffer(bytes(grid_values), width, height,
                                              bounds, no_data_value)
            else:
                grid = HeightGrid.from_array(grid_values, bounds, no_data_value,
                                             width, height)
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to load geoid grid, using fallback {self.fallback} m: {e}")
            self._grid = None
            return False

        self._grid = grid
        logger.info(f"Loaded geoid grid {grid.width}x{grid.height} "
                    f"lat [{grid.min_lat}, {grid.max_lat}] lon [{grid.min_lon}, {grid.max_lon}]")
        return True

    @property
    def is_loaded(self) -> bool:
        return self._grid is not None

    @property
    def grid(self) -> Optional[HeightGrid]:
        return self._grid

    def _grid_coordinates(self, grid: HeightGrid, lat: float, lon: float) -> Optional[tuple[float, float]]:
        """Fractional (x, y) grid position, None when outside the grid"""
        rx = (lon - grid.min_lon) / (grid.max_lon - grid.min_lon)
        ry = (lat - grid.min_lat) / (grid.max_lat - grid.min_lat)
        if not (np.isfinite(rx) and np.isfinite(ry)):
            return None
        # Ratios rather than x/y so a single-node axis still rejects
        # coordinates outside the bounds.
        if rx < -_EDGE_EPS or ry < -_EDGE_EPS or rx > 1.0 + _EDGE_EPS or ry > 1.0 + _EDGE_EPS:
            return None

        x_max = grid.width - 1
        y_max = grid.height - 1
        x = min(max(rx, 0.0), 1.0) * x_max
        y = min(max(ry, 0.0), 1.0) * y_max
        return x, y

    def contains(self, lat: float, lon: float) -> bool:
        """True if (lat, lon) falls inside the loaded grid"""
        grid = self._grid
        return grid is not None and self._grid_coordinates(grid, lat, lon) is not None

    def lookup(self, lat: float, lon: float) -> float:
        """
        Geoid undulation N at a location.

        Parameters
        ----------
        lat : float
            Latitude in degrees
        lon : float
            Longitude in degrees

        Returns
        -------
        float
            Bilinearly interpolated undulation (m), or the fallback value if
            the model is unloaded, the location is outside the grid, or any
            of the four surrounding nodes is no-data
        """
        grid = self._grid
        if grid is None:
            logger.debug("Geoid grid not loaded, using fallback undulation")
            return self.fallback

        xy = self._grid_coordinates(grid, lat, lon)
        if xy is None:
            logger.debug(f"Coordinates out of geoid grid: ({lat}, {lon})")
            return self.fallback
        x, y = xy

        x0 = int(np.floor(x))
        y0 = int(np.floor(y))
        x1 = min(x0 + 1, grid.width - 1)
        y1 = min(y0 + 1, grid.height - 1)

        q00 = grid.values[y0, x0]
        q01 = grid.values[y0, x1]
        q10 = grid.values[y1, x0]
        q11 = grid.values[y1, x1]

        if any(grid.is_no_data(q) for q in (q00, q01, q10, q11)):
            logger.debug(f"No-data geoid node near ({lat}, {lon})")
            return self.fallback

        tx = x - x0
        ty = y - y0

        interpolated = (float(q00) * (1 - tx) * (1 - ty) +
                        float(q01) * tx * (1 - ty) +
                        float(q10) * (1 - tx) * ty +
                        float(q11) * tx * ty)
        return float(interpolated)

    def lookup_many(self, lats, lons) -> np.ndarray:
        """Vectorised convenience wrapper around lookup()"""
        lats = np.atleast_1d(np.asarray(lats, dtype=float))
        lons = np.atleast_1d(np.asarray(lons, dtype=float))
        if lats.shape != lons.shape:
            raise ValueError(f"Latitude and longitude shapes differ: {lats.shape} vs {lons.shape}")
        values = [self.lookup(la, lo) for la, lo in zip(lats.ravel(), lons.ravel())]
        return np.array(values, dtype=float).reshape(lats.shape)

    def orthometric_height(self, ellipsoidal_height: float, lat: float, lon: float) -> float:
        """Orthometric height H = h - N (m)"""
        return float(ellipsoidal_height - self.lookup(lat, lon))

    def ellipsoidal_height(self, orthometric_height: float, lat: float, lon: float) -> float:
        """Ellipsoidal height h = H + N (m)"""
        return float(orthometric_height + self.lookup(lat, lon))


def convert_height(
    height: Union[float, np.ndarray],
    lat: Union[float, np.ndarray],
    lon: Union[float, np.ndarray],
    from_system: HeightSystem,
    to_system: HeightSystem,
    model: RasterHeightModel
) -> Union[float, np.ndarray]:
    """Convert height between height systems using a raster geoid model

    Parameters
    ----------
    height : float or np.ndarray
        Height value(s) to convert in meters
    lat : float or np.ndarray
        Latitude(s) in degrees
    lon : float or np.ndarray
        Longitude(s) in degrees
    from_system : HeightSystem
        Source height system
    to_system : HeightSystem
        Target height system
    model : RasterHeightModel
        Geoid model providing the undulation

    Returns
    -------
    float or np.ndarray
        Converted height value(s) in meters

    Notes
    -----
    If from_system equals to_system, the input height is returned unchanged.
    """
    if from_system == to_system:
        return height

    if isinstance(lat, np.ndarray):
        N = model.lookup_many(lat, lon)
    else:
        N = model.lookup(lat, lon)

    if from_system == HeightSystem.ELLIPSOIDAL and to_system == HeightSystem.ORTHOMETRIC:
        return height - N
    elif from_system == HeightSystem.ORTHOMETRIC and to_system == HeightSystem.ELLIPSOIDAL:
        return height + N
    else:
        raise ValueError(f"Unsupported conversion: {from_system} to {to_system}")
