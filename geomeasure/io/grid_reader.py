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

"""Geoid undulation grid reading utilities"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import rasterio
from rasterio.errors import RasterioError

from ..coordinate.height_model import GridMetadata, HeightGrid, RasterHeightModel
from ..core.constants import FALLBACK_UNDULATION, NODATA_VALUE

logger = logging.getLogger(__name__)

TIFF_SUFFIXES = ('.tif', '.tiff')


class GridReader:
    """Reader for geoid undulation grids (raw float32 or GeoTIFF)"""

    def __init__(self, file_path: str,
                 bounds: Optional[tuple[float, float, float, float]] = None,
                 width: Optional[int] = None,
                 height: Optional[int] = None,
                 no_data_value: Optional[float] = None,
                 format: Optional[str] = None):
        """
        Initialize grid reader

        Parameters:
        -----------
        file_path : str
            Path to the grid file
        bounds : tuple, optional
            (min_lat, max_lat, min_lon, max_lon) of the grid nodes in degrees.
            Raw files default to the EHT2014 layout; GeoTIFF reads them from the file.
        width, height : int, optional
            Grid dimensions of raw files (EHT2014 268x186 by default)
        no_data_value : float, optional
            No-data sentinel; GeoTIFF nodata tag or -88.8888 by default
        format : str, optional
            'raw' or 'tiff'; guessed from the suffix when omitted

        Raises:
        -------
        FileNotFoundError
            If the grid file does not exist
        """
        self.file_path = Path(file_path)
        self.bounds = bounds
        self.width = width
        self.height = height
        self.no_data_value = no_data_value
        self.format = (format or self._guess_format()).lower()

        if not self.file_path.exists():
            raise FileNotFoundError(f"Geoid grid not found: {file_path}")

    def _guess_format(self) -> str:
        suffix = self.file_path.suffix.lower()
        if suffix in TIFF_SUFFIXES:
            return 'tiff'
        return 'raw'

    def read(self) -> HeightGrid:
        """
        Read the grid

        Returns:
        --------
        HeightGrid
            Grid with row 0 on the southern edge

        Raises:
        -------
        ValueError
            If the file cannot be parsed into a grid
        """
        if self.format == 'raw':
            return self._read_raw()
        elif self.format == 'tiff':
            return self._read_tiff()
        else:
            raise ValueError(f"Unsupported grid format: {self.format}")

    def _read_raw(self) -> HeightGrid:
        """Raw little-endian float32, row-major, row 0 = min_lat

        Layout fields left unset fall back to the bundled EHT2014 metadata.
        """
        bounds = self.bounds
        if bounds is None:
            meta = GridMetadata(width=self.width, height=self.height)
        else:
            min_lat, max_lat, min_lon, max_lon = bounds
            meta = GridMetadata(self.width, self.height, min_lat, max_lat, min_lon, max_lon)
        if self.no_data_value is not None:
            meta.no_data_value = self.no_data_value
        logger.info(f"Reading raw geoid grid: {self.file_path} ({meta.width}x{meta.height})")
        buffer = self.file_path.read_bytes()
        return HeightGrid.from_buffer(buffer, meta.width, meta.height, meta.bounds,
                                      meta.no_data_value)

    def _read_tiff(self) -> HeightGrid:
        """
        Single-band GeoTIFF in EPSG:4326.

        Notes:
        ------
        GeoTIFF rows run north to south; they are flipped so row 0 is the
        southern edge. Without explicit bounds the node bounds are the pixel
        centres derived from the file's transform.
        """
        logger.info(f"Reading GeoTIFF geoid grid: {self.file_path}")
        try:
            with rasterio.open(self.file_path) as src:
                values = src.read(1).astype(np.float32)
                file_bounds = src.bounds
                res_x, res_y = src.res
                file_nodata = src.nodata
        except RasterioError as e:
            raise ValueError(f"Failed to read GeoTIFF grid: {e}") from e

        values = np.flipud(values)

        if self.bounds is not None:
            bounds = self.bounds
        else:
            bounds = (file_bounds.bottom + res_y / 2, file_bounds.top - res_y / 2,
                      file_bounds.left + res_x / 2, file_bounds.right - res_x / 2)

        if self.no_data_value is not None:
            no_data = self.no_data_value
        elif file_nodata is not None:
            no_data = float(file_nodata)
        else:
            no_data = NODATA_VALUE

        return HeightGrid.from_array(values, bounds, no_data)


def load_height_model(file_path: str,
                      bounds: Optional[tuple[float, float, float, float]] = None,
                      width: Optional[int] = None,
                      height: Optional[int] = None,
                      no_data_value: Optional[float] = None,
                      format: Optional[str] = None,
                      fallback: float = FALLBACK_UNDULATION) -> RasterHeightModel:
    """
    Load a geoid model from file, degrading to fallback-only mode on failure.

    Never raises for missing or malformed files: the error is logged and an
    unloaded model is returned, whose lookups always give the fallback.

    Returns:
    --------
    RasterHeightModel
        Loaded model, or an unloaded one if the grid could not be read
    """
    try:
        grid = GridReader(file_path, bounds, width, height, no_data_value, format).read()
    except (OSError, ValueError) as e:
        logger.error(f"Geoid grid unavailable, using fallback {fallback} m: {e}")
        return RasterHeightModel(fallback=fallback)

    logger.info(f"Loaded geoid grid {grid.width}x{grid.height} from {file_path}")
    return RasterHeightModel(grid, fallback=fallback)


def read_grid_buffer(buffer: bytes, width: int, height: int,
                     bounds: tuple[float, float, float, float],
                     no_data_value: float = NODATA_VALUE,
                     fallback: float = FALLBACK_UNDULATION) -> RasterHeightModel:
    """Build a geoid model from a raw float32 buffer (unloaded if malformed)"""
    model = RasterHeightModel(fallback=fallback)
    model.load(buffer, bounds, no_data_value, width=width, height=height)
    return model
