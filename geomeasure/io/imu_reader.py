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

"""Inertial sample log reading utilities"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..sensors.imu import InertialSample
from ..sensors.sensor_base import ReplayMotionSource, samples_from_dataframe

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['time', 'accel_x', 'accel_y', 'accel_z', 'gyro_x', 'gyro_y', 'gyro_z']
TXT_COLUMNS = REQUIRED_COLUMNS + ['roll', 'pitch', 'yaw']

COLUMN_ALIASES = {
    'timestamp': 'time',
    'ax': 'accel_x', 'ay': 'accel_y', 'az': 'accel_z',
    'acc_x': 'accel_x', 'acc_y': 'accel_y', 'acc_z': 'accel_z',
    'gx': 'gyro_x', 'gy': 'gyro_y', 'gz': 'gyro_z',
    'wx': 'gyro_x', 'wy': 'gyro_y', 'wz': 'gyro_z',
}


class InertialLogReader:
    """Reader for recorded inertial sample logs"""

    def __init__(self, file_path: str, format: str = 'csv'):
        """
        Initialize inertial log reader

        Parameters:
        -----------
        file_path : str
            Path to the log file
        format : str
            File format ('csv' or 'txt')

        Raises:
        -------
        FileNotFoundError
            If the file does not exist
        """
        self.file_path = Path(file_path)
        self.format = format.lower()
        self.logger = logging.getLogger(__name__)

        if not self.file_path.exists():
            raise FileNotFoundError(f"Inertial log not found: {file_path}")

    def read(self, start_time: Optional[float] = None,
             duration: Optional[float] = None) -> pd.DataFrame:
        """
        Read the log into a DataFrame

        Parameters:
        -----------
        start_time : float, optional
            Drop samples before this time
        duration : float, optional
            Keep at most this many seconds after start_time

        Returns:
        --------
        pd.DataFrame
            Columns: time, accel_x, accel_y, accel_z, gyro_x, gyro_y, gyro_z
            and, when recorded, roll, pitch, yaw, gravity_removed
        """
        if self.format == 'csv':
            df = self._read_csv()
        elif self.format == 'txt':
            df = self._read_txt()
        else:
            raise ValueError(f"Unsupported format: {self.format}")
        return self._apply_filters(df, start_time, duration)

    def _read_csv(self) -> pd.DataFrame:
        """
        Read a CSV log, mapping common alternative column names.

        Supported alternatives:
        - timestamp -> time
        - ax, ay, az / acc_x, acc_y, acc_z -> accel_x, accel_y, accel_z
        - gx, gy, gz / wx, wy, wz -> gyro_x, gyro_y, gyro_z

        Raises
        ------
        ValueError
            If required columns are still missing after mapping
        """
        self.logger.info(f"Reading inertial log from CSV: {self.file_path}")
        df = pd.read_csv(self.file_path)

        renames = {k: v for k, v in COLUMN_ALIASES.items()
                   if k in df.columns and v not in df.columns}
        if renames:
            df = df.rename(columns=renames)

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"Missing required inertial columns: {missing}")
        return df

    def _read_txt(self) -> pd.DataFrame:
        """
        Read a whitespace-separated log.

        Expected line format (roll/pitch/yaw optional):
        time accel_x accel_y accel_z gyro_x gyro_y gyro_z [roll pitch yaw]

        Lines starting with '#' are skipped.
        """
        self.logger.info(f"Reading inertial log from TXT: {self.file_path}")
        try:
            df = pd.read_csv(self.file_path, sep=r'\s+', comment='#', header=None)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ValueError(f"Failed to read inertial text log: {e}") from e

        if df.shape[1] not in (len(REQUIRED_COLUMNS), len(TXT_COLUMNS)):
            raise ValueError(f"Inertial text log needs 7 or 10 columns, got {df.shape[1]}")
        df.columns = TXT_COLUMNS[:df.shape[1]]
        return df

    def _apply_filters(self, df: pd.DataFrame, start_time: Optional[float],
                       duration: Optional[float]) -> pd.DataFrame:
        """Apply the time window and sort chronologically"""
        if start_time is not None:
            df = df[df['time'] >= start_time]
            if duration is not None:
                df = df[df['time'] <= start_time + duration]

        df = df.sort_values('time').reset_index(drop=True)

        self.logger.info(f"Loaded {len(df)} inertial samples")
        if len(df) > 1:
            dt = df['time'].diff().median()
            freq = 1.0 / dt if dt > 0 else 0
            self.logger.info(f"  Time range: {df['time'].iloc[0]:.3f} - {df['time'].iloc[-1]:.3f}")
            self.logger.info(f"  Sampling rate: ~{freq:.1f} Hz")
        return df

    def samples(self, start_time: Optional[float] = None,
                duration: Optional[float] = None) -> list[InertialSample]:
        """Read the log as a list of InertialSample objects"""
        return samples_from_dataframe(self.read(start_time, duration))

    def replay_source(self, start_time: Optional[float] = None,
                      duration: Optional[float] = None) -> ReplayMotionSource:
        """Motion source replaying this log"""
        return ReplayMotionSource(self.samples(start_time, duration))


def load_inertial_log(file_path: str, format: str = 'csv') -> list[InertialSample]:
    """Convenience function to read an inertial log as samples"""
    return InertialLogReader(file_path, format).samples()
