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

"""Satellite-fix / inertial capture mode controller"""

import logging
import threading
from collections.abc import Iterable
from typing import Optional

from ..coordinate.height_model import RasterHeightModel
from ..core.constants import DEGRADATION_THRESHOLD
from ..core.data_structures import CaptureMode, MeasurementPoint, SatelliteFix
from ..core.measurement_log import MeasurementLog
from ..sensors.sensor_base import FixSource
from .inertial_tracker import InertialTracker

logger = logging.getLogger(__name__)


class PositionModeController:
    """
    Two-state machine choosing the source of captured points.

    In SATELLITE_FIX mode points come from the latest satellite fix with the
    height converted to orthometric through the geoid model. In INERTIAL mode
    they come from the dead-reckoning tracker. The two modes never run
    together, so only one path ever appends to the log at a time.

    Parameters:
    -----------
    height_model : RasterHeightModel
        Geoid model for the satellite path
    tracker : InertialTracker
        Dead-reckoning tracker for the inertial path
    fix_source : Optional[FixSource]
        Location provider; started/stopped on mode changes and polled for a
        fix when none was pushed through on_satellite_fix
    log : Optional[MeasurementLog]
        Log receiving captured points (a new one by default)
    degradation_threshold : float
        Satellite accuracy (m) above which inertial mode is advised
    """

    def __init__(self, height_model: RasterHeightModel, tracker: InertialTracker,
                 fix_source: Optional[FixSource] = None,
                 log: Optional[MeasurementLog] = None,
                 degradation_threshold: float = DEGRADATION_THRESHOLD):
        self.height_model = height_model
        self.tracker = tracker
        self.fix_source = fix_source
        self.log = log if log is not None else MeasurementLog()
        self.degradation_threshold = degradation_threshold

        self._lock = threading.RLock()
        self._mode = CaptureMode.SATELLITE_FIX
        self._satellite_active = True
        self._last_fix: Optional[SatelliteFix] = None
        self._current_height: Optional[float] = None

    @property
    def mode(self) -> CaptureMode:
        with self._lock:
            return self._mode

    @property
    def satellite_updates_active(self) -> bool:
        with self._lock:
            return self._satellite_active

    @property
    def current_height(self) -> Optional[float]:
        """Orthometric height of the latest satellite fix (m)"""
        with self._lock:
            return self._current_height

    @property
    def current_coordinate(self) -> Optional[tuple[float, float]]:
        with self._lock:
            if self._last_fix is None:
                return None
            return (self._last_fix.latitude, self._last_fix.longitude)

    @property
    def points(self) -> list[MeasurementPoint]:
        return self.log.points

    # ------------------------------------------------------------------
    # Satellite path
    # ------------------------------------------------------------------
    def start_satellite_updates(self):
        with self._lock:
            self._satellite_active = True
        if self.fix_source is not None:
            self.fix_source.start_updates()

    def stop_satellite_updates(self):
        with self._lock:
            self._satellite_active = False
        if self.fix_source is not None:
            self.fix_source.stop_updates()

    def on_satellite_fix(self, fix: SatelliteFix) -> Optional[float]:
        """
        Accept a new satellite fix.

        Returns:
        --------
        Optional[float]
            Orthometric height of the fix, or None if satellite updates are
            stopped (inertial mode) and the fix was ignored
        """
        with self._lock:
            if not self._satellite_active:
                return None
            height = self.height_model.orthometric_height(
                fix.ellipsoidal_height, fix.latitude, fix.longitude)
            self._last_fix = fix
            self._current_height = height
        return height

    def _latest_fix(self) -> Optional[SatelliteFix]:
        with self._lock:
            fix = self._last_fix
        if fix is None and self.fix_source is not None:
            fix = self.fix_source.current_fix()
        return fix

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------
    def toggle(self) -> CaptureMode:
        """
        Switch between satellite and inertial capture.

        From SATELLITE_FIX: satellite updates stop and the tracker starts at
        the last captured point. Without any captured point the mode still
        becomes INERTIAL but the tracker is reset to an unarmed state with no
        reference (any earlier inertial session is dropped), so nothing can be
        captured until start_inertial_with_reference() is called.

        From INERTIAL: the tracker stops and satellite updates resume.

        Returns:
        --------
        CaptureMode
            The new mode
        """
        with self._lock:
            if self._mode == CaptureMode.SATELLITE_FIX:
                self.stop_satellite_updates()
                last_point = self.log.last
                if last_point is not None:
                    self.tracker.start(last_point)
                else:
                    self.tracker.reset()
                    logger.warning("Switched to inertial mode without a reference point")
                self._mode = CaptureMode.INERTIAL
            else:
                self.tracker.stop()
                self.start_satellite_updates()
                self._mode = CaptureMode.SATELLITE_FIX
            mode = self._mode

        logger.info(f"Capture mode is now {mode.value}")
        return mode

    def start_inertial_with_reference(self, point: MeasurementPoint) -> CaptureMode:
        """Arm the tracker at a manually chosen reference and enter inertial mode"""
        with self._lock:
            self.stop_satellite_updates()
            self.tracker.start(point)
            self._mode = CaptureMode.INERTIAL
        logger.info(f"Inertial mode started from reference {point.id}")
        return CaptureMode.INERTIAL

    def calibrate_inertial(self, known_point: MeasurementPoint):
        """Recalibrate tracker drift against a known point"""
        return self.tracker.calibrate(known_point)

    def should_switch_to_inertial(self, current_satellite_accuracy: Optional[float]) -> bool:
        """
        Advisory check on satellite accuracy.

        Returns True when the accuracy (m) exceeds the degradation threshold.
        Switching itself is left to the caller via toggle().
        """
        if current_satellite_accuracy is None:
            return False
        return current_satellite_accuracy > self.degradation_threshold

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------
    def capture_point(self, fix: Optional[SatelliteFix] = None) -> Optional[MeasurementPoint]:
        """
        Capture a point from the active source and append it to the log.

        Parameters:
        -----------
        fix : Optional[SatelliteFix]
            Fix to use in satellite mode; defaults to the latest fix received

        Returns:
        --------
        Optional[MeasurementPoint]
            The captured point, or None if nothing could be captured (no fix
            in satellite mode, no reference in inertial mode)
        """
        with self._lock:
            mode = self._mode
            if mode == CaptureMode.SATELLITE_FIX:
                point = self._capture_satellite(fix)
            else:
                point = self.tracker.current_measurement()
                if point is None:
                    logger.info("No inertial reference point, nothing captured")

            if point is not None:
                self.log.append(point)
        return point

    def _capture_satellite(self, fix: Optional[SatelliteFix]) -> Optional[MeasurementPoint]:
        if fix is None:
            fix = self._latest_fix()
        if fix is None:
            logger.info("No satellite fix available, nothing captured")
            return None

        height = self.height_model.orthometric_height(
            fix.ellipsoidal_height, fix.latitude, fix.longitude)
        return MeasurementPoint(
            latitude=fix.latitude,
            longitude=fix.longitude,
            height=height,
            mode=CaptureMode.SATELLITE_FIX,
            accuracy=fix.accuracy,
        )

    def delete_points(self, indices: Iterable[int]) -> list[MeasurementPoint]:
        """Remove points from the log by position"""
        return self.log.delete(indices)
