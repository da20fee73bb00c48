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

"""Periodic sampling loop feeding a motion source into the tracker"""

import logging
import threading
import time
from typing import Optional

from ..core.constants import SAMPLE_RATE
from ..sensors.sensor_base import MotionSource
from .inertial_tracker import InertialTracker
from .state import InertialState

logger = logging.getLogger(__name__)


class SamplingLoop:
    """Polls a MotionSource at a fixed rate on a background thread.

    The loop is the single periodic writer of the tracker. Each step is a
    bounded synchronous call, so stop() only has to wait for the current
    step to finish. A step that raises is logged and counted in
    step_errors; polling carries on with the next tick.

    Parameters
    ----------
    source : MotionSource
        Provider of inertial samples
    tracker : InertialTracker
        Tracker receiving the samples
    rate : float
        Polling rate (Hz)
    """

    def __init__(self, source: MotionSource, tracker: InertialTracker,
                 rate: float = SAMPLE_RATE):
        if not rate > 0:
            raise ValueError(f"Sampling rate must be positive, got {rate}")
        self.source = source
        self.tracker = tracker
        self.period = 1.0 / rate
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.samples_processed = 0
        self.step_errors = 0

    def run_once(self) -> Optional[InertialState]:
        """Read one sample from the source and feed it to the tracker"""
        sample = self.source.read()
        if sample is None:
            return None
        state = self.tracker.process(sample)
        if state is not None:
            self.samples_processed += 1
        return state

    def _run(self):
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                self.step_errors += 1
                logger.exception("Sampling step failed; continuing")
            next_tick += self.period
            delay = next_tick - time.monotonic()
            if delay < 0:
                # Fell behind; resynchronise instead of bursting
                next_tick = time.monotonic()
                delay = 0.0
            self._stop_event.wait(delay)

    def start(self) -> bool:
        """Start the source and the polling thread"""
        if self.is_running:
            return True
        if not self.source.start():
            logger.error("Motion source failed to start")
            return False
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="geomeasure-sampling", daemon=True)
        self._thread.start()
        logger.info(f"Sampling loop started at {1.0 / self.period:.1f} Hz")
        return True

    def stop(self, timeout: Optional[float] = 1.0):
        """Stop polling and the source"""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self.source.stop()
        logger.info(f"Sampling loop stopped after {self.samples_processed} samples")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
