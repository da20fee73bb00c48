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

"""Inertial dead reckoning relative to a reference point

The tracker integrates low-pass filtered acceleration, rotated into the local
(north, east, up) frame with the attitude reported by the motion provider,
into a velocity and position offset from a reference point. Positions are
turned back into geodetic coordinates with a flat-earth projection, so the
result is only meaningful over short baselines. Error grows without bound;
the accuracy estimate models that growth linearly in time and is reset by
calibrating against a known point.
"""

import logging
import threading
from collections.abc import Callable
from typing import Optional

import numpy as np

from ..attitude.euler import rotate_vector
from ..core.data_structures import Attitude, CaptureMode, LocalVector, MeasurementPoint
from ..coordinate.local_frame import local2lla, point2local
from ..sensors.filter import SignalFilter
from ..sensors.imu import InertialSample, TrackerConfig
from .state import InertialState

logger = logging.getLogger(__name__)

StateListener = Callable[[InertialState], None]


class InertialTracker:
    """
    Dead-reckoning tracker fed with already-sampled motion readings.

    All state mutations and readouts hold one re-entrant lock, so a sampling
    thread and user-initiated ``start``/``calibrate`` calls are serialized.
    Listeners are notified outside the lock.

    Parameters:
    -----------
    config : TrackerConfig, optional
        Filter cutoffs, accuracy model and projection radius

    Examples:
        >>> tracker = InertialTracker()
        >>> tracker.start(reference)
        >>> for _ in range(60):
        ...     tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), 1 / 60)
        >>> tracker.current_measurement().height == reference.height
        True
    """

    def __init__(self, config: Optional[TrackerConfig] = None):
        self.config = config or TrackerConfig()
        self._lock = threading.RLock()
        self._listeners: list[StateListener] = []

        self.accel_filter = SignalFilter(self.config.accel_cutoff)
        self.gyro_filter = SignalFilter(self.config.gyro_cutoff)

        self._position = np.zeros(3)
        self._velocity = np.zeros(3)
        self._drift_correction = np.zeros(3)
        self._attitude = Attitude()
        self._rotation_rate = np.zeros(3)
        self._accuracy_estimate = 0.0
        self._reference_point: Optional[MeasurementPoint] = None
        self._calibrated = False
        self._running = False
        self._last_timestamp: Optional[float] = None
        self._sample_count = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, reference_point: Optional[MeasurementPoint] = None) -> InertialState:
        """
        Start (or restart) dead reckoning.

        Parameters:
        -----------
        reference_point : Optional[MeasurementPoint]
            Anchor of the local frame. Without one the tracker integrates but
            cannot produce measurements until a reference is set.

        Returns:
        --------
        InertialState
            State right after the reset
        """
        with self._lock:
            self._clear(reference_point)
            self._running = True
            state = self._snapshot()

        if reference_point is None:
            logger.info("Inertial tracking started without reference point")
        else:
            logger.info(f"Inertial tracking started at ({reference_point.latitude:.7f}, "
                        f"{reference_point.longitude:.7f}, {reference_point.height:.3f} m)")
        return state

    def reset(self) -> InertialState:
        """
        Stop and drop the reference point and all integrated state.

        Leaves the tracker unarmed: no samples are integrated and
        current_measurement() returns None until the next start().
        """
        with self._lock:
            self._clear(None)
            self._running = False
            state = self._snapshot()
        logger.info("Inertial tracker reset")
        return state

    def _clear(self, reference_point: Optional[MeasurementPoint]):
        self._position = np.zeros(3)
        self._velocity = np.zeros(3)
        self._drift_correction = np.zeros(3)
        self._attitude = Attitude()
        self._rotation_rate = np.zeros(3)
        self._accuracy_estimate = self.config.initial_accuracy
        self._reference_point = reference_point
        self._calibrated = reference_point is not None
        self._last_timestamp = None
        self._sample_count = 0
        self.accel_filter.reset()
        self.gyro_filter.reset()

    def stop(self):
        """Freeze integration; samples are ignored until the next start()"""
        with self._lock:
            self._running = False
        logger.info("Inertial tracking stopped")

    def set_reference_point(self, point: MeasurementPoint) -> InertialState:
        """
        Rebind the local frame to a new anchor without stopping sampling.

        Position and drift correction are zeroed; velocity and the accuracy
        estimate carry over.
        """
        with self._lock:
            self._reference_point = point
            self._position = np.zeros(3)
            self._drift_correction = np.zeros(3)
            self._calibrated = True
            state = self._snapshot()
        logger.debug(f"Inertial reference point set to {point.id}")
        return state

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    def on_sample(self, raw_accel, raw_gyro, attitude, dt: float,
                  timestamp: Optional[float] = None,
                  gravity_removed: bool = True) -> Optional[InertialState]:
        """
        Integrate one motion sample.

        Parameters:
        -----------
        raw_accel : array_like
            3D acceleration in the sensor frame (m/s²)
        raw_gyro : array_like
            3D angular rate in the sensor frame (rad/s)
        attitude : Attitude or array_like
            Device attitude [roll, pitch, yaw] (rad), stored as-is
        dt : float
            Time since the previous sample (s)
        timestamp : Optional[float]
            Sample time, kept as the last-sample timestamp
        gravity_removed : bool
            False when raw_accel is raw specific force; gravity is then
            added back in the world frame before integration

        Returns:
        --------
        Optional[InertialState]
            New state, or None if the sample was ignored (tracker stopped or
            non-positive dt)

        Notes:
        ------
        v += a dt
        p += v dt + 0.5 a dt²
        p += drift dt
        accuracy += growth_rate dt
        """
        if not isinstance(attitude, Attitude):
            attitude = Attitude.from_array(attitude)

        with self._lock:
            if not self._running:
                return None
            if not dt > 0:
                logger.warning(f"Ignoring inertial sample with non-positive dt={dt}")
                return None

            accel = self.accel_filter.filter(raw_accel, dt)
            self._rotation_rate = self.gyro_filter.filter(raw_gyro, dt)

            world_accel = rotate_vector(attitude.as_array(), accel)
            if gravity_removed:
                net_accel = world_accel
            else:
                net_accel = world_accel + self.config.gravity

            self._velocity = self._velocity + net_accel * dt
            self._position = self._position + self._velocity * dt + 0.5 * net_accel * dt**2
            self._position = self._position + self._drift_correction * dt

            self._accuracy_estimate += self.config.accuracy_growth_rate * dt
            self._attitude = attitude
            if timestamp is not None:
                self._last_timestamp = timestamp
            self._sample_count += 1
            state = self._snapshot()

        logger.trace(f"Inertial sample {state.sample_count}: pos={state.position}, "
                     f"acc={state.accuracy_estimate:.3f} m")
        self._notify(state)
        return state

    def process(self, sample: InertialSample) -> Optional[InertialState]:
        """
        Integrate an InertialSample, deriving dt from its timestamp.

        The first sample after start() uses the nominal sample period.
        """
        with self._lock:
            if self._last_timestamp is None:
                dt = self.config.nominal_dt
            else:
                dt = sample.timestamp - self._last_timestamp
        return self.on_sample(sample.acceleration, sample.rotation_rate, sample.attitude,
                              dt, timestamp=sample.timestamp,
                              gravity_removed=sample.gravity_removed)

    # ------------------------------------------------------------------
    # Calibration and readout
    # ------------------------------------------------------------------
    def calibrate(self, known_point: MeasurementPoint) -> InertialState:
        """
        Recalibrate drift against a point whose true position is known.

        The drift correction becomes the offset between where the known point
        lies in the local frame and the current integrated position. The
        point is not validated. Velocity is left untouched.

        Parameters:
        -----------
        known_point : MeasurementPoint
            Ground-truth point (orthometric height)

        Returns:
        --------
        InertialState
            State after calibration
        """
        with self._lock:
            if self._reference_point is None:
                logger.warning("Calibrating inertial tracker without reference point")
                expected = np.zeros(3)
            else:
                expected = point2local(known_point, self._reference_point,
                                       self.config.earth_radius).as_array()

            self._drift_correction = expected - self._position
            self._accuracy_estimate = self.config.calibrated_accuracy
            self._calibrated = True
            state = self._snapshot()

        logger.info(f"Inertial tracker calibrated, drift correction "
                    f"n={state.drift_correction.north:.3f} e={state.drift_correction.east:.3f} "
                    f"u={state.drift_correction.up:.3f} m")
        self._notify(state)
        return state

    def current_measurement(self) -> Optional[MeasurementPoint]:
        """
        Geodetic measurement at the current dead-reckoned position.

        Returns:
        --------
        Optional[MeasurementPoint]
            Inertial-mode point whose height is the reference height plus the
            corrected up offset, or None if no reference point is set
        """
        with self._lock:
            reference = self._reference_point
            if reference is None:
                return None
            corrected = LocalVector.from_array(self._position + self._drift_correction)
            accuracy = self._accuracy_estimate

        lat, lon, height = local2lla(corrected, reference.latitude, reference.longitude,
                                     reference.height, self.config.earth_radius)
        return MeasurementPoint(
            latitude=lat,
            longitude=lon,
            height=height,
            mode=CaptureMode.INERTIAL,
            accuracy=accuracy,
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    def _snapshot(self) -> InertialState:
        return InertialState(
            position=LocalVector.from_array(self._position),
            velocity=LocalVector.from_array(self._velocity),
            attitude=self._attitude,
            drift_correction=LocalVector.from_array(self._drift_correction),
            accuracy_estimate=self._accuracy_estimate,
            reference_point=self._reference_point,
            calibrated=self._calibrated,
            running=self._running,
            last_timestamp=self._last_timestamp,
            sample_count=self._sample_count,
        )

    @property
    def state(self) -> InertialState:
        with self._lock:
            return self._snapshot()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def reference_point(self) -> Optional[MeasurementPoint]:
        with self._lock:
            return self._reference_point

    @property
    def rotation_rate(self) -> np.ndarray:
        """Last filtered angular rate (rad/s)"""
        with self._lock:
            return self._rotation_rate.copy()

    def add_listener(self, listener: StateListener):
        """Register a callback receiving the state after each sample and calibration"""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: StateListener):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, state: InertialState):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state)
