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

"""Ordered, thread-safe log of captured measurement points"""

import logging
import threading
from collections.abc import Iterable, Iterator
from typing import Optional

import pandas as pd

from .data_structures import MeasurementPoint

__all__ = ['MeasurementLog', 'LOG_COLUMNS']

logger = logging.getLogger(__name__)

LOG_COLUMNS = ['id', 'latitude', 'longitude', 'height', 'timestamp', 'accuracy', 'mode']


class MeasurementLog:
    """Append-ordered sequence of MeasurementPoint records.

    Appends and deletions take an internal lock so the satellite and inertial
    capture paths, the UI and exporters can share one log. Readers get
    copies, never the internal list.
    """

    def __init__(self, points: Optional[Iterable[MeasurementPoint]] = None):
        self._lock = threading.Lock()
        self._points: list[MeasurementPoint] = list(points) if points else []

    def append(self, point: MeasurementPoint) -> None:
        with self._lock:
            self._points.append(point)
        logger.debug(f"Logged {point.mode.value} point {point.id} "
                     f"({point.latitude:.7f}, {point.longitude:.7f}, {point.height:.3f} m)")

    def delete(self, indices: Iterable[int]) -> list[MeasurementPoint]:
        """
        Remove points by position.

        Parameters:
        -----------
        indices : Iterable[int]
            Positions to delete; negative indices count from the end

        Returns:
        --------
        list[MeasurementPoint]
            Removed points in log order

        Raises:
        -------
        IndexError
            If any index is out of range (nothing is removed)
        """
        with self._lock:
            n = len(self._points)
            resolved = set()
            for i in indices:
                j = i + n if i < 0 else i
                if not 0 <= j < n:
                    raise IndexError(f"Measurement index out of range: {i}")
                resolved.add(j)
            removed = [p for k, p in enumerate(self._points) if k in resolved]
            self._points = [p for k, p in enumerate(self._points) if k not in resolved]
        return removed

    def delete_by_id(self, point_id: str) -> bool:
        """Remove the point with the given id, returns False if absent"""
        with self._lock:
            for k, p in enumerate(self._points):
                if p.id == point_id:
                    del self._points[k]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._points = []

    @property
    def last(self) -> Optional[MeasurementPoint]:
        with self._lock:
            return self._points[-1] if self._points else None

    @property
    def points(self) -> list[MeasurementPoint]:
        with self._lock:
            return list(self._points)

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)

    def __iter__(self) -> Iterator[MeasurementPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> MeasurementPoint:
        with self._lock:
            return self._points[index]

    def to_records(self) -> list[dict]:
        return [p.to_dict() for p in self.points]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabular view of the log for export collaborators.

        Returns:
        --------
        pd.DataFrame
            One row per point with columns: id, latitude, longitude, height,
            timestamp, accuracy, mode
        """
        return pd.DataFrame(self.to_records(), columns=LOG_COLUMNS)
