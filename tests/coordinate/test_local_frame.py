#!/usr/bin/env python3
"""Test suite for local tangent-plane projection"""

import unittest
import numpy as np
from geomeasure.core.constants import D2R, EARTH_RADIUS
from geomeasure.core.data_structures import CaptureMode, LocalVector, MeasurementPoint
from geomeasure.coordinate.local_frame import (
    lla2local, local2lla, local_distance, point2local
)


class TestLocalFrame(unittest.TestCase):

    def setUp(self):
        self.ref = MeasurementPoint(47.0, 19.0, 100.0, CaptureMode.SATELLITE_FIX)

    def test_reference_is_origin(self):
        offset = lla2local(47.0, 19.0, 100.0, 47.0, 19.0, 100.0)
        self.assertEqual(offset, LocalVector.zero())

    def test_north_offset(self):
        offset = lla2local(47.0009, 19.0, 100.0, 47.0, 19.0, 100.0)
        self.assertAlmostEqual(offset.north, 0.0009 * D2R * EARTH_RADIUS, places=6)
        self.assertAlmostEqual(offset.north, 100.07, places=1)
        self.assertAlmostEqual(offset.east, 0.0)

    def test_east_offset_shrinks_with_latitude(self):
        offset = lla2local(47.0, 19.001, 100.0, 47.0, 19.0, 100.0)
        expected = 0.001 * D2R * EARTH_RADIUS * np.cos(47.0 * D2R)
        self.assertAlmostEqual(offset.east, expected, places=6)

    def test_up_is_height_difference(self):
        offset = lla2local(47.0, 19.0, 112.5, 47.0, 19.0, 100.0)
        self.assertAlmostEqual(offset.up, 12.5)

    def test_inverse(self):
        offset = LocalVector(35.0, -20.0, 1.5)
        lat, lon, h = local2lla(offset, 47.0, 19.0, 100.0)
        back = lla2local(lat, lon, h, 47.0, 19.0, 100.0)
        np.testing.assert_array_almost_equal(back.as_array(), offset.as_array(), decimal=6)

    def test_point2local_and_distance(self):
        p = MeasurementPoint(47.0009, 19.0, 101.0, CaptureMode.SATELLITE_FIX)
        offset = point2local(p, self.ref)
        self.assertAlmostEqual(offset.up, 1.0)
        self.assertAlmostEqual(local_distance(p, self.ref), offset.north, places=6)


if __name__ == '__main__':
    unittest.main()
