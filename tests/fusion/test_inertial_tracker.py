#!/usr/bin/env python3
"""Test suite for inertial dead reckoning"""

import threading
import time
import unittest
import numpy as np
from geomeasure.core.data_structures import Attitude, CaptureMode, MeasurementPoint
from geomeasure.coordinate.local_frame import local_distance, point2local
from geomeasure.fusion.inertial_tracker import InertialTracker
from geomeasure.sensors.imu import InertialSample, TrackerConfig

DT = 1 / 60


def feed_zero(tracker, n=60, dt=DT):
    for _ in range(n):
        tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), dt)


class TestInertialTracker(unittest.TestCase):

    def setUp(self):
        self.tracker = InertialTracker()
        self.reference = MeasurementPoint(47.0, 19.0, 100.0, CaptureMode.SATELLITE_FIX)

    def test_start_state(self):
        state = self.tracker.start(self.reference)
        self.assertTrue(state.running)
        self.assertTrue(state.calibrated)
        self.assertAlmostEqual(state.accuracy_estimate, 0.1)
        self.assertEqual(state.position.norm(), 0.0)
        self.assertIs(state.reference_point, self.reference)

    def test_start_without_reference(self):
        state = self.tracker.start()
        self.assertTrue(state.running)
        self.assertFalse(state.calibrated)
        self.assertIsNone(self.tracker.current_measurement())

    def test_zero_input_stays_at_reference(self):
        self.tracker.start(self.reference)
        feed_zero(self.tracker)
        point = self.tracker.current_measurement()
        self.assertEqual(point.mode, CaptureMode.INERTIAL)
        self.assertAlmostEqual(point.latitude, 47.0, places=9)
        self.assertAlmostEqual(point.longitude, 19.0, places=9)
        self.assertAlmostEqual(point.height, 100.0, places=9)

    def test_zero_input_any_step_and_count(self):
        for dt in (1e-4, DT, 0.5, 3.0):
            for n in (1, 500):
                self.tracker.start(self.reference)
                feed_zero(self.tracker, n=n, dt=dt)
                state = self.tracker.state
                self.assertEqual(state.sample_count, n)
                self.assertEqual(state.position.norm(), 0.0)
                self.assertEqual(state.velocity.norm(), 0.0)
                point = self.tracker.current_measurement()
                self.assertEqual((point.latitude, point.longitude, point.height),
                                 (47.0, 19.0, 100.0))

    def test_calibration_to_known_point(self):
        self.tracker.start(self.reference)
        feed_zero(self.tracker)
        known = MeasurementPoint(47.0009, 19.0, 100.0, CaptureMode.SATELLITE_FIX)
        state = self.tracker.calibrate(known)
        self.assertAlmostEqual(state.drift_correction.north, 100.07, places=1)

        point = self.tracker.current_measurement()
        self.assertLess(local_distance(point, known), 0.5)
        self.assertAlmostEqual(point.latitude, 47.0009, places=7)
        self.assertAlmostEqual(point.height, 100.0, places=6)
        self.assertAlmostEqual(point.accuracy, 0.05)

    def test_calibration_includes_height(self):
        self.tracker.start(self.reference)
        known = MeasurementPoint(47.0, 19.0, 103.0, CaptureMode.SATELLITE_FIX)
        self.tracker.calibrate(known)
        self.assertAlmostEqual(self.tracker.current_measurement().height, 103.0)

    def test_calibrate_without_reference(self):
        self.tracker.start()
        state = self.tracker.calibrate(self.reference)
        self.assertTrue(state.calibrated)
        self.assertEqual(state.drift_correction.norm(), 0.0)
        self.assertIsNone(self.tracker.current_measurement())

    def test_accuracy_grows_then_resets(self):
        self.tracker.start(self.reference)
        accuracies = []
        for _ in range(120):
            state = self.tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), DT)
            accuracies.append(state.accuracy_estimate)
        self.assertTrue(all(b > a for a, b in zip(accuracies, accuracies[1:])))
        self.assertAlmostEqual(accuracies[-1], 0.1 + 0.01 * 2.0)

        self.tracker.calibrate(self.reference)
        self.assertAlmostEqual(self.tracker.state.accuracy_estimate, 0.05)

    def test_constant_acceleration(self):
        self.tracker.start(self.reference)
        state = self.tracker.on_sample([1.0, 0.0, 0.0], np.zeros(3), Attitude(), 1.0)
        self.assertAlmostEqual(state.velocity.north, 1.0)
        self.assertAlmostEqual(state.position.north, 1.5)
        state = self.tracker.on_sample([1.0, 0.0, 0.0], np.zeros(3), Attitude(), 1.0)
        self.assertAlmostEqual(state.velocity.north, 2.0)
        self.assertAlmostEqual(state.position.north, 1.5 + 2.0 + 0.5)

    def test_attitude_rotates_acceleration(self):
        self.tracker.start(self.reference)
        state = self.tracker.on_sample([1.0, 0.0, 0.0], np.zeros(3),
                                       Attitude(0.0, 0.0, np.pi / 2), 1.0)
        self.assertAlmostEqual(state.velocity.north, 0.0)
        self.assertAlmostEqual(state.velocity.east, 1.0)
        self.assertEqual(state.attitude, Attitude(0.0, 0.0, np.pi / 2))

    def test_raw_specific_force_is_gravity_compensated(self):
        self.tracker.start(self.reference)
        for _ in range(60):
            state = self.tracker.on_sample([0.0, 0.0, 9.81], np.zeros(3), Attitude(), DT,
                                           gravity_removed=False)
        self.assertAlmostEqual(state.velocity.up, 0.0)
        self.assertAlmostEqual(state.position.up, 0.0)

    def test_gravity_removed_sample_not_compensated(self):
        self.tracker.start(self.reference)
        state = self.tracker.on_sample([0.0, 0.0, 9.81], np.zeros(3), Attitude(), 1.0)
        self.assertAlmostEqual(state.velocity.up, 9.81)

    def test_drift_applied_per_sample(self):
        self.tracker.start(self.reference)
        self.tracker.calibrate(MeasurementPoint(47.0, 19.0, 101.0, CaptureMode.SATELLITE_FIX))
        state = self.tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), 0.5)
        self.assertAlmostEqual(state.position.up, 0.5)
        self.assertAlmostEqual(state.corrected_position.up, 1.5)

    def test_set_reference_point(self):
        self.tracker.start(self.reference)
        self.tracker.on_sample([1.0, 0.0, 0.0], np.zeros(3), Attitude(), 1.0)
        new_ref = MeasurementPoint(47.001, 19.0, 90.0, CaptureMode.SATELLITE_FIX)
        state = self.tracker.set_reference_point(new_ref)
        self.assertEqual(state.position.norm(), 0.0)
        self.assertAlmostEqual(state.velocity.north, 1.0)
        self.assertTrue(state.running)
        point = self.tracker.current_measurement()
        self.assertAlmostEqual(point.latitude, 47.001)
        self.assertAlmostEqual(point.height, 90.0)

    def test_stop_ignores_samples(self):
        self.tracker.start(self.reference)
        self.tracker.stop()
        self.assertFalse(self.tracker.is_running)
        self.assertIsNone(self.tracker.on_sample([1.0, 0.0, 0.0], np.zeros(3), Attitude(), DT))
        self.assertEqual(self.tracker.state.sample_count, 0)
        # Readout keeps working while stopped
        self.assertIsNotNone(self.tracker.current_measurement())

    def test_non_positive_dt_ignored(self):
        self.tracker.start(self.reference)
        self.assertIsNone(self.tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), 0.0))
        self.assertIsNone(self.tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), -DT))
        self.assertEqual(self.tracker.state.sample_count, 0)

    def test_restart_resets_state(self):
        self.tracker.start(self.reference)
        self.tracker.on_sample([1.0, 0.0, 0.0], [0.1, 0.0, 0.0], Attitude(), 1.0)
        state = self.tracker.start(self.reference)
        self.assertEqual(state.velocity.norm(), 0.0)
        self.assertEqual(state.sample_count, 0)
        self.assertIsNone(self.tracker.accel_filter.previous)
        self.assertIsNone(self.tracker.gyro_filter.previous)

    def test_reset_unarms_tracker(self):
        self.tracker.start(self.reference)
        self.tracker.on_sample([1.0, 0.0, 0.0], np.zeros(3), Attitude(), 1.0)
        self.tracker.calibrate(self.reference)
        state = self.tracker.reset()
        self.assertFalse(state.running)
        self.assertFalse(state.calibrated)
        self.assertIsNone(state.reference_point)
        self.assertEqual(state.velocity.norm(), 0.0)
        self.assertEqual(state.drift_correction.norm(), 0.0)
        self.assertIsNone(self.tracker.current_measurement())
        self.assertIsNone(self.tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), DT))

    def test_rotation_rate_filtered(self):
        self.tracker.start(self.reference)
        self.tracker.on_sample(np.zeros(3), [0.0, 0.0, 1.0], Attitude(), DT)
        np.testing.assert_array_equal(self.tracker.rotation_rate, np.array([0.0, 0.0, 1.0]))
        self.tracker.on_sample(np.zeros(3), [0.0, 0.0, 0.0], Attitude(), DT)
        self.assertTrue(0.0 < self.tracker.rotation_rate[2] < 1.0)

    def test_listeners(self):
        received = []
        self.tracker.add_listener(received.append)
        self.tracker.start(self.reference)
        feed_zero(self.tracker, n=3)
        self.tracker.calibrate(self.reference)
        self.assertEqual(len(received), 4)
        self.assertEqual(received[2].sample_count, 3)

        self.tracker.remove_listener(received.append)
        feed_zero(self.tracker, n=1)
        self.assertEqual(len(received), 4)

    def test_process_derives_dt(self):
        self.tracker.start(self.reference)
        first = InertialSample(10.0, [1.0, 0.0, 0.0], np.zeros(3))
        state = self.tracker.process(first)
        # First sample uses the nominal period
        self.assertAlmostEqual(state.velocity.north, DT)
        self.assertEqual(state.last_timestamp, 10.0)

        second = InertialSample(10.5, [1.0, 0.0, 0.0], np.zeros(3))
        state = self.tracker.process(second)
        self.assertAlmostEqual(state.velocity.north, DT + 0.5)

        # Out-of-order timestamp gives a negative dt and is ignored
        self.assertIsNone(self.tracker.process(InertialSample(10.2, np.zeros(3), np.zeros(3))))

    def test_process_raw_sample(self):
        self.tracker.start(self.reference)
        sample = InertialSample(0.0, [0.0, 0.0, 9.81], np.zeros(3), gravity_removed=False)
        state = self.tracker.process(sample)
        self.assertAlmostEqual(state.velocity.up, 0.0)

    def test_start_and_calibrate_while_sampling(self):
        known = MeasurementPoint(47.0009, 19.0005, 102.0, CaptureMode.SATELLITE_FIX)
        expected = point2local(known, self.reference).as_array()
        errors = []
        counts = []
        stop_event = threading.Event()

        def sampler():
            t = 0.0
            try:
                while not stop_event.is_set():
                    t += DT
                    state = self.tracker.process(
                        InertialSample(t, [0.01, 0.0, 0.0], [0.0, 0.0, 0.01]))
                    if state is not None:
                        counts.append(state.sample_count)
            except Exception as e:
                errors.append(e)

        self.tracker.start(self.reference)
        thread = threading.Thread(target=sampler)
        thread.start()
        try:
            for _ in range(200):
                self.tracker.start(self.reference)
                state = self.tracker.calibrate(known)
                np.testing.assert_array_almost_equal(state.corrected_position.as_array(),
                                                     expected, decimal=6)
                self.assertAlmostEqual(state.accuracy_estimate, 0.05)
            deadline = time.time() + 5.0
            while not counts and time.time() < deadline:
                time.sleep(0.01)
        finally:
            stop_event.set()
            thread.join(5.0)

        self.assertFalse(thread.is_alive())
        self.assertEqual(errors, [])
        self.assertGreater(len(counts), 0)
        # One sampling thread: counts grow by one, or restart at 1 after start()
        for prev, cur in zip(counts, counts[1:]):
            self.assertTrue(cur == prev + 1 or cur == 1, f"{prev} -> {cur}")

        self.tracker.calibrate(known)
        point = self.tracker.current_measurement()
        self.assertLess(local_distance(point, known), 0.5)
        self.assertAlmostEqual(point.latitude, known.latitude, places=7)
        self.assertAlmostEqual(point.height, known.height, places=6)

    def test_custom_config(self):
        tracker = InertialTracker(TrackerConfig(initial_accuracy=1.0, accuracy_growth_rate=0.5))
        tracker.start(self.reference)
        state = tracker.on_sample(np.zeros(3), np.zeros(3), Attitude(), 2.0)
        self.assertAlmostEqual(state.accuracy_estimate, 2.0)

    def test_attitude_array_accepted(self):
        self.tracker.start(self.reference)
        state = self.tracker.on_sample(np.zeros(3), np.zeros(3), [0.1, 0.2, 0.3], DT)
        self.assertEqual(state.attitude, Attitude(0.1, 0.2, 0.3))


if __name__ == '__main__':
    unittest.main()
