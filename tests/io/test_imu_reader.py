import unittest
import numpy as np
import pandas as pd
import tempfile
import os
import shutil
from pathlib import Path

from geomeasure.io.imu_reader import InertialLogReader, load_inertial_log
from geomeasure.core.data_structures import Attitude


class TestInertialLogReader(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.csv_file = os.path.join(self.test_dir, "walk.csv")
        self.txt_file = os.path.join(self.test_dir, "walk.txt")

        self.test_data = pd.DataFrame({
            'time': [10.0, 10.02, 10.01, 10.03, 10.04],
            'accel_x': [0.1, 0.2, 0.3, 0.4, 0.5],
            'accel_y': [0.0, 0.0, 0.0, 0.0, 0.0],
            'accel_z': [0.01, 0.02, 0.03, 0.04, 0.05],
            'gyro_x': [0.001, 0.002, 0.003, 0.004, 0.005],
            'gyro_y': [0.0, 0.0, 0.0, 0.0, 0.0],
            'gyro_z': [0.01, 0.01, 0.01, 0.01, 0.01]
        })
        self.test_data.to_csv(self.csv_file, index=False)

        with open(self.txt_file, 'w') as f:
            f.write("# time ax ay az gx gy gz roll pitch yaw\n")
            for _, row in self.test_data.iterrows():
                f.write(f"{row['time']} {row['accel_x']} {row['accel_y']} {row['accel_z']} ")
                f.write(f"{row['gyro_x']} {row['gyro_y']} {row['gyro_z']} 0.0 0.0 0.5\n")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_init_valid_file(self):
        reader = InertialLogReader(self.csv_file)
        self.assertEqual(reader.file_path, Path(self.csv_file))
        self.assertEqual(reader.format, 'csv')

    def test_init_invalid_file(self):
        with self.assertRaises(FileNotFoundError):
            InertialLogReader("nonexistent_file.csv")

    def test_read_csv_sorted(self):
        df = InertialLogReader(self.csv_file).read()
        self.assertEqual(len(df), 5)
        self.assertTrue(df['time'].is_monotonic_increasing)
        self.assertAlmostEqual(df['accel_x'].iloc[1], 0.3)

    def test_read_csv_aliases(self):
        alt_file = os.path.join(self.test_dir, "alt.csv")
        self.test_data.rename(columns={
            'time': 'timestamp', 'accel_x': 'ax', 'accel_y': 'ay', 'accel_z': 'az',
            'gyro_x': 'wx', 'gyro_y': 'wy', 'gyro_z': 'wz',
        }).to_csv(alt_file, index=False)
        df = InertialLogReader(alt_file).read()
        for col in ['time', 'accel_x', 'accel_y', 'accel_z', 'gyro_x', 'gyro_y', 'gyro_z']:
            self.assertIn(col, df.columns)

    def test_read_csv_missing_columns(self):
        bad_file = os.path.join(self.test_dir, "bad.csv")
        self.test_data.drop(columns=['gyro_z']).to_csv(bad_file, index=False)
        with self.assertRaises(ValueError) as context:
            InertialLogReader(bad_file).read()
        self.assertIn("Missing required inertial columns", str(context.exception))

    def test_read_time_window(self):
        df = InertialLogReader(self.csv_file).read(start_time=10.01, duration=0.025)
        np.testing.assert_array_almost_equal(df['time'].values, [10.01, 10.02, 10.03])

    def test_read_txt_with_attitude(self):
        df = InertialLogReader(self.txt_file, format='txt').read()
        self.assertEqual(len(df), 5)
        self.assertIn('yaw', df.columns)
        samples = InertialLogReader(self.txt_file, format='txt').samples()
        self.assertEqual(samples[0].attitude, Attitude(0.0, 0.0, 0.5))

    def test_read_txt_wrong_columns(self):
        bad_file = os.path.join(self.test_dir, "bad.txt")
        with open(bad_file, 'w') as f:
            f.write("1.0 2.0 3.0\n")
        with self.assertRaises(ValueError):
            InertialLogReader(bad_file, format='txt').read()

    def test_unsupported_format(self):
        with self.assertRaises(ValueError):
            InertialLogReader(self.csv_file, format='bag').read()

    def test_samples(self):
        samples = load_inertial_log(self.csv_file)
        self.assertEqual(len(samples), 5)
        self.assertEqual(samples[0].timestamp, 10.0)
        np.testing.assert_array_almost_equal(samples[0].acceleration, [0.1, 0.0, 0.01])
        np.testing.assert_array_almost_equal(samples[0].rotation_rate, [0.001, 0.0, 0.01])
        self.assertTrue(all(s.gravity_removed for s in samples))

    def test_replay_source(self):
        source = InertialLogReader(self.csv_file).replay_source()
        self.assertEqual(source.remaining, 5)
        source.start()
        times = []
        while True:
            sample = source.read()
            if sample is None:
                break
            times.append(sample.timestamp)
        self.assertEqual(times, sorted(times))


if __name__ == '__main__':
    unittest.main()
