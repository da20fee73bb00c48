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
Attitude module for sensor-to-world rotations.

All rotations assume right-hand coordinate frames with euler angles in the
order 'roll-pitch-yaw' and DCMs with the order of 'ZYX'.
"""

from .euler import euler2dcm, rotate_vector, sensor2world

__all__ = [
    'euler2dcm', 'sensor2world', 'rotate_vector',
]
