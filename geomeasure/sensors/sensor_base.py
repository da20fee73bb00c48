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

"""Sensor capability interfaces

The core never constructs or owns a platform sensor manager. Location and
motion providers are injected behind these interfaces, which also lets tests
drive the core with synthetic sample sequences.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional

import numpy as np
import pandas as pd

from ..core.data_structures import Attitude, SatelliteFix
from .imu import InertialSample

logger = logging.getLogger(__name__)


class MotionSource(ABC):
    """Abstract provider of already-sampled inertial readings"""

    def __init__(self):
        self._is_started = False

    @abstractmethod
    def start(self) -> bool:
        """Start delivering samples.

        Returns
        -------
        bool
            True if the source started, False otherwise
        """
        pass

    @abstractmethod
    def stop(self):
        """Stop delivering samples"""
        pass

    @abstractmethod
    def read(self) -> Optional[InertialSample]:
        """Read the next sample.

        Returns
        -------
        Optional[InertialSample]
            Latest motion reading, or None if no new data is available
        """
        pass

    @property
    def is_started(self) -> bool:
        return self._is_started


class FixSource(ABC):
    """Abstract provider of satellite position fixes"""

    def __init__(self):
        self._is_updating = False

    @abstractmethod
    def start_updates(self):
        """Resume satellite fix updates"""
        pass

    @abstractmethod
    def stop_updates(self):
        """Suspend satellite fix updates"""
        pass

    @abstractmethod
    def current_fix(self) -> Optional[SatelliteFix]:
        """Most recent fix, or None if none is available"""
        pass

    @property
    def is_updating(self) -> bool:
        return self._is_updating


class ReplayMotionSource(MotionSource):
    """
    Motion source that replays a fixed sequence of samples in order.

    Parameters
    ----------
    samples : Iterable[InertialSample]
        Samples to serve; ``read`` returns None once they are exhausted

    Examples
    --------
    >>> source = ReplayMotionSource(InertialLogReader('walk.csv').samples())
    >>> source.start()
    True
    >>> sample = source.read()
    """

    def __init__(self, samples: Iterable[InertialSample]):
        super().__init__()
        self._samples = list(samples)
        self._index = 0

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "ReplayMotionSource":
        """Build from a DataFrame with time, accel_*, gyro_* and optional roll/pitch/yaw columns"""
        return cls(samples_from_dataframe(df))

    def start(self) -> bool:
        self._is_started = True
        return True

    def stop(self):
        self._is_started = False

    def read(self) -> Optional[InertialSample]:
        if not self._is_started or self._index >= len(self._samples):
            return None
        sample = self._samples[self._index]
        self._index += 1
        return sample

    def rewind(self):
        self._index = 0

    @property
    def remaining(self) -> int:
        return len(self._samples) - self._index


class StaticFixSource(FixSource):
    """Fix source holding whatever fix was last pushed into it"""

    def __init__(self, fix: Optional[SatelliteFix] = None):
        super().__init__()
        self._fix = fix
        self._is_updating = True

    def push(self, fix: SatelliteFix):
        if self._is_updating:
            self._fix = fix

    def start_updates(self):
        self._is_updating = True

    def stop_updates(self):
        self._is_updating = False

    def current_fix(self) -> Optional[SatelliteFix]:
        return self._fix


_TRUE_FLAGS = {"true", "t", "yes", "y", "1", "1.0"}
_FALSE_FLAGS = {"false", "f", "no", "n", "0", "0.0"}


def _parse_flag(value, default: bool = True) -> bool:
    """Read a boolean log column that may hold bools, numbers or strings"""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if pd.isna(value):
        return default
    text = str(value).strip().lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean flag")


def samples_from_dataframe(df: pd.DataFrame) -> list[InertialSample]:
    """
    Convert an inertial log table into samples.

    Parameters
    ----------
    df : pd.DataFrame
        Columns: time, accel_x, accel_y, accel_z, gyro_x, gyro_y, gyro_z and
        optionally roll, pitch, yaw (rad) and gravity_removed (bool, 0/1 or
        "true"/"false" text; empty cells count as True)

    Returns
    -------
    list[InertialSample]
        One sample per row, rows with non-finite values skipped
    """
    has_attitude = all(c in df.columns for c in ('roll', 'pitch', 'yaw'))
    has_gravity_flag = 'gravity_removed' in df.columns

    samples = []
    skipped = 0
    for row in df.itertuples(index=False):
        sample = InertialSample(
            timestamp=float(row.time),
            acceleration=[row.accel_x, row.accel_y, row.accel_z],
            rotation_rate=[row.gyro_x, row.gyro_y, row.gyro_z],
            attitude=Attitude(row.roll, row.pitch, row.yaw) if has_attitude else Attitude(),
            gravity_removed=_parse_flag(row.gravity_removed) if has_gravity_flag else True,
        )
        if not sample.is_valid():
            skipped += 1
            continue
        samples.append(sample)

    if skipped:
        logger.warning(f"Skipped {skipped} inertial samples with non-finite values")
    return samples
