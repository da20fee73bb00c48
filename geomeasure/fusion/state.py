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

"""State representation for inertial dead reckoning"""

from dataclasses import dataclass, field
from typing import Optional

from ..core.data_structures import Attitude, LocalVector, MeasurementPoint


@dataclass(frozen=True)
class InertialState:
    """Snapshot of the dead-reckoning tracker state

    Vectors are in the local tangent-plane frame anchored at the reference
    point. Snapshots are immutable; the tracker hands out a new one after
    every mutation.
    """

    # Position, velocity, attitude
    position: LocalVector = field(default_factory=LocalVector.zero)          # (m)
    velocity: LocalVector = field(default_factory=LocalVector.zero)          # (m/s)
    attitude: Attitude = field(default_factory=Attitude)                     # (rad)

    # Drift correction, applied per second of integration and at readout
    drift_correction: LocalVector = field(default_factory=LocalVector.zero)

    # Error model
    accuracy_estimate: float = 0.0                                           # (m)

    # Anchor
    reference_point: Optional[MeasurementPoint] = None
    calibrated: bool = False

    # Bookkeeping
    running: bool = False
    last_timestamp: Optional[float] = None
    sample_count: int = 0

    @property
    def corrected_position(self) -> LocalVector:
        """Position with the drift correction applied"""
        return self.position + self.drift_correction

    @property
    def has_reference(self) -> bool:
        return self.reference_point is not None
