import unittest
import numpy as np
import pandas as pd
from geomeasure.core.data_structures import Attitude, SatelliteFix
from geomeasure.sensors.imu import InertialSample, TrackerConfig
from geomeasure.sensors.sensor_base import (
    ReplayMotionSource, StaticFixSource, samples_from_dataframe
)


class TestInertialSample(unittest.TestCase):

    def test_init_valid(self):
        sample = InertialSample(
            timestamp=1000.0,
            acceleration=[0.1, 0.2, 0.3],
            rotation_rate=np.array([0.01, 0.02, 0.03])
        )
        self.assertEqual(sample.timestamp, 1000.0)
        self.assertEqual(sample.attitude, Attitude())
        self.assertTrue(sample.gravity_removed)
        np.testing.assert_array_equal(sample.data,
                                      np.array([0.1, 0.2, 0.3, 0.01, 0.02, 0.03]))

    def test_invalid_acceleration(self):
        with self.assertRaises(ValueError) as context:
            InertialSample(timestamp=0.0, acceleration=[0.1, 0.2],
                           rotation_rate=np.zeros(3))
        self.assertIn("acceleration must be 3D", str(context.exception))

    def test_invalid_rotation_rate(self):
        with self.assertRaises(ValueError) as context:
            InertialSample(timestamp=0.0, acceleration=np.zeros(3),
                           rotation_rate=np.zeros(6))
        self.assertIn("rotation rate must be 3D", str(context.exception))

    def test_attitude_from_array(self):
        sample = InertialSample(0.0, np.zeros(3), np.zeros(3), attitude=[0.1, 0.2, 0.3])
        self.assertEqual(sample.attitude, Attitude(0.1, 0.2, 0.3))

    def test_is_valid(self):
        self.assertTrue(InertialSample(0.0, np.zeros(3), np.zeros(3)).is_valid())
        self.assertFalse(InertialSample(0.0, [np.nan, 0, 0], np.zeros(3)).is_valid())
        self.assertFalse(InertialSample(0.0, np.zeros(3), np.zeros(3),
                                        attitude=Attitude(np.inf, 0, 0)).is_valid())


class TestTrackerConfig(unittest.TestCase):

    def test_defaults(self):
        config = TrackerConfig()
        self.assertEqual(config.sample_rate, 60.0)
        self.assertEqual(config.accel_cutoff, 0.1)
        self.assertEqual(config.initial_accuracy, 0.1)
        self.assertEqual(config.calibrated_accuracy, 0.05)
        self.assertEqual(config.earth_radius, 6371000.0)
        np.testing.assert_array_equal(config.gravity, np.array([0.0, 0.0, -9.81]))
        self.assertAlmostEqual(config.nominal_dt, 1 / 60)

    def test_gravity_not_shared(self):
        a = TrackerConfig()
        a.gravity[2] = 0.0
        self.assertEqual(TrackerConfig().gravity[2], -9.81)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            TrackerConfig(sample_rate=0.0)
        with self.assertRaises(ValueError):
            TrackerConfig(gyro_cutoff=-0.1)
        with self.assertRaises(ValueError):
            TrackerConfig(accuracy_growth_rate=-1.0)
        with self.assertRaises(ValueError):
            TrackerConfig(gravity=[0.0, -9.81])


class TestReplayMotionSource(unittest.TestCase):

    def setUp(self):
        self.samples = [InertialSample(i / 60, np.zeros(3), np.zeros(3)) for i in range(3)]

    def test_read_requires_start(self):
        source = ReplayMotionSource(self.samples)
        self.assertIsNone(source.read())
        self.assertTrue(source.start())
        self.assertTrue(source.is_started)
        self.assertIs(source.read(), self.samples[0])

    def test_exhaustion_and_rewind(self):
        source = ReplayMotionSource(self.samples)
        source.start()
        read = [source.read() for _ in range(3)]
        self.assertEqual(read, self.samples)
        self.assertEqual(source.remaining, 0)
        self.assertIsNone(source.read())
        source.rewind()
        self.assertEqual(source.remaining, 3)

    def test_stop(self):
        source = ReplayMotionSource(self.samples)
        source.start()
        source.stop()
        self.assertFalse(source.is_started)
        self.assertIsNone(source.read())


class TestStaticFixSource(unittest.TestCase):

    def test_push_while_updating(self):
        source = StaticFixSource()
        self.assertIsNone(source.current_fix())
        fix = SatelliteFix(47.0, 19.0, 150.0, accuracy=2.0)
        source.push(fix)
        self.assertIs(source.current_fix(), fix)

    def test_push_ignored_when_stopped(self):
        first = SatelliteFix(47.0, 19.0, 150.0)
        source = StaticFixSource(first)
        source.stop_updates()
        self.assertFalse(source.is_updating)
        source.push(SatelliteFix(48.0, 19.0, 150.0))
        self.assertIs(source.current_fix(), first)
        source.start_updates()
        self.assertTrue(source.is_updating)


class TestSamplesFromDataFrame(unittest.TestCase):

    def test_conversion(self):
        df = pd.DataFrame({
            'time': [0.0, 0.1, 0.2],
            'accel_x': [0.1, np.nan, 0.3],
            'accel_y': [0.0, 0.0, 0.0],
            'accel_z': [9.81, 9.81, 9.81],
            'gyro_x': [0.0, 0.0, 0.0],
            'gyro_y': [0.0, 0.0, 0.0],
            'gyro_z': [0.01, 0.01, 0.01],
            'roll': [0.0, 0.0, 0.1],
            'pitch': [0.0, 0.0, 0.0],
            'yaw': [0.0, 0.0, 0.2],
            'gravity_removed': [False, False, False],
        })
        with self.assertLogs('geomeasure.sensors.sensor_base', level='WARNING'):
            samples = samples_from_dataframe(df)
        self.assertEqual(len(samples), 2)
        self.assertEqual(samples[1].timestamp, 0.2)
        self.assertEqual(samples[1].attitude, Attitude(0.1, 0.0, 0.2))
        self.assertFalse(samples[0].gravity_removed)

    def test_gravity_flag_from_text(self):
        flags = ["False", "True", "0", "1", " false ", None]
        n = len(flags)
        df = pd.DataFrame({
            'time': np.arange(n) * 0.1,
            'accel_x': np.zeros(n), 'accel_y': np.zeros(n), 'accel_z': np.zeros(n),
            'gyro_x': np.zeros(n), 'gyro_y': np.zeros(n), 'gyro_z': np.zeros(n),
            'gravity_removed': flags,
        })
        samples = samples_from_dataframe(df)
        self.assertEqual([s.gravity_removed for s in samples],
                         [False, True, False, True, False, True])

    def test_gravity_flag_unreadable(self):
        df = pd.DataFrame({
            'time': [0.0],
            'accel_x': [0.0], 'accel_y': [0.0], 'accel_z': [0.0],
            'gyro_x': [0.0], 'gyro_y': [0.0], 'gyro_z': [0.0],
            'gravity_removed': ["maybe"],
        })
        with self.assertRaises(ValueError):
            samples_from_dataframe(df)

    def test_replay_from_dataframe(self):
        df = pd.DataFrame({
            'time': [0.0, 0.1],
            'accel_x': [0.1, 0.2], 'accel_y': [0.0, 0.0], 'accel_z': [0.0, 0.0],
            'gyro_x': [0.0, 0.0], 'gyro_y': [0.0, 0.0], 'gyro_z': [0.0, 0.0],
        })
        source = ReplayMotionSource.from_dataframe(df)
        self.assertEqual(source.remaining, 2)
        source.start()
        sample = source.read()
        self.assertTrue(sample.gravity_removed)
        self.assertEqual(sample.attitude, Attitude())


if __name__ == '__main__':
    unittest.main()
