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

"""Single-pole low-pass filtering of 3-axis sensor channels"""

from typing import Optional

import numpy as np


def low_pass(previous: Optional[np.ndarray], sample: np.ndarray,
             dt: float, cutoff_frequency: float) -> np.ndarray:
    """
    One step of a first-order RC low-pass filter.

    Parameters:
    -----------
    previous : Optional[np.ndarray]
        Previous filter output, None before the first sample
    sample : np.ndarray
        New raw sample
    dt : float
        Time since the previous sample (s), must be >= 0
    cutoff_frequency : float
        Cutoff frequency (Hz)

    Returns:
    --------
    np.ndarray
        Filtered sample. The raw sample itself when there is no history.

    Notes:
    ------
    alpha = dt / (RC + dt) with RC = 1 / (2 pi fc);
    out = previous + alpha * (sample - previous)
    """
    sample = np.array(sample, dtype=float)
    if previous is None:
        return sample
    if dt < 0:
        raise ValueError(f"Filter time step must be non-negative, got {dt}")
    rc = 1.0 / (2.0 * np.pi * cutoff_frequency)
    alpha = dt / (rc + dt)
    return previous + alpha * (sample - previous)


class SignalFilter:
    """
    Stateful low-pass smoother for one 3-axis signal stream.

    Each channel (acceleration, angular rate) owns its own instance; the only
    state is the previous output.

    Parameters:
    -----------
    cutoff_frequency : float
        Cutoff frequency (Hz), must be positive

    Examples:
        >>> f = SignalFilter(0.1)
        >>> f.filter(np.array([1.0, 0.0, 0.0]), 1 / 60)
        array([1., 0., 0.])
    """

    def __init__(self, cutoff_frequency: float):
        if not cutoff_frequency > 0:
            raise ValueError(f"Cutoff frequency must be positive, got {cutoff_frequency}")
        self.cutoff_frequency = float(cutoff_frequency)
        self._previous: Optional[np.ndarray] = None

    @property
    def previous(self) -> Optional[np.ndarray]:
        return None if self._previous is None else self._previous.copy()

    def filter(self, sample, dt: float) -> np.ndarray:
        """Filter one sample; the first call returns the sample unchanged"""
        self._previous = low_pass(self._previous, sample, dt, self.cutoff_frequency)
        return self._previous.copy()

    def reset(self):
        """Forget the history so the next sample passes through unchanged"""
        self._previous = None
