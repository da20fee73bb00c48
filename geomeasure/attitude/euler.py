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
Attitude conversion from euler angles.

Rotations assume right-hand frames with euler angles in the order
'roll-pitch-yaw' and DCMs with the order of 'ZYX'. ``euler2dcm`` gives the
world-to-sensor DCM, ``sensor2world`` its transpose, which is what the dead
reckoning tracker uses to bring a sensor-frame acceleration into the local
(north, east, up) frame.

References:
    Principles of GNSS, Inertial, and Multisensor Integrated Navigation Systems
    - (2013) Paul D. Groves
"""

import numpy as np
from numba import njit


@njit(cache=True)
def euler2dcm(e):
    """
    Convert euler angles (roll-pitch-yaw) to corresponding 'ZYX' DCM.

    Parameters
    ----------
    e : array_like, shape (3,)
        RPY euler angles [roll, pitch, yaw] in radians

    Returns
    -------
    C : ndarray, shape (3, 3)
        World-to-sensor direction cosine matrix
    """
    sinP, sinT, sinS = np.sin(e)
    cosP, cosT, cosS = np.cos(e)
    C = np.array([[cosT*cosS, cosT*sinS, -sinT],
                  [sinP*sinT*cosS - cosP*sinS, sinP*sinT*sinS + cosP*cosS, cosT*sinP],
                  [sinT*cosP*cosS + sinS*sinP, sinT*cosP*sinS - cosS*sinP, cosT*cosP]],
                 dtype=np.double)
    return C


@njit(cache=True)
def sensor2world(e):
    """
    Rotation matrix taking sensor-frame vectors into the world frame.

    Parameters
    ----------
    e : array_like, shape (3,)
        RPY euler angles [roll, pitch, yaw] in radians

    Returns
    -------
    R : ndarray, shape (3, 3)
        R = Rz(yaw) @ Ry(pitch) @ Rx(roll)
    """
    return euler2dcm(e).T.copy()


@njit(cache=True)
def rotate_vector(e, v):
    """
    Rotate a sensor-frame 3-vector into the world frame.

    Parameters
    ----------
    e : array_like, shape (3,)
        RPY euler angles [roll, pitch, yaw] in radians
    v : array_like, shape (3,)
        Vector in sensor frame

    Returns
    -------
    ndarray, shape (3,)
        Vector in world frame
    """
    R = sensor2world(e)
    out = np.zeros(3)
    for i in range(3):
        out[i] = R[i, 0]*v[0] + R[i, 1]*v[1] + R[i, 2]*v[2]
    return out
