import datetime as dt
import unittest
from zoneinfo import ZoneInfo

import matplotlib.pyplot as plt

from app.chart import ForecastChart
from app.domain import HourlyRecord
from app.summary import derive_summary

DAY_START = int(dt.datetime(2024, 6, 10, tzinfo=dt.timezone.utc).timestamp())


def _hours():
    return [
        HourlyRecord(timestamp_epoch_seconds=DAY_START + 3600 * h, temperature_celsius=18.0 + h,
                     humidity_percent=60.0, wind_speed=None if h == 1 else 5.0)
        for h in range(8, 12)
    ]


class TestForecastChart(unittest.TestCase):
    def test_render_png(self):
        hours = _hours()
        chart = ForecastChart(hours, derive_summary(hours), title="NYC", tz=ZoneInfo("UTC"))
        try:
            png = chart.render_png()
        finally:
            chart.destroy()
        self.assertTrue(png.startswith(b"\x89PNG"))

    def test_three_independent_axes(self):
        hours = _hours()
        chart = ForecastChart(hours, derive_summary(hours))
        try:
            self.assertEqual(len(chart.figure.axes), 3)
        finally:
            chart.destroy()

    def test_figure_stays_out_of_pyplot_registry(self):
        before = plt.get_fignums()
        chart = ForecastChart(_hours(), derive_summary(_hours()))
        try:
            self.assertEqual(plt.get_fignums(), before)
        finally:
            chart.destroy()

    def test_destroy_releases_figure(self):
        chart = ForecastChart(_hours(), derive_summary(_hours()))
        chart.destroy()
        self.assertTrue(chart.closed)
        self.assertIsNone(chart.figure)
        chart.destroy()  # idempotent
        with self.assertRaises(RuntimeError):
            chart.render_png()

    def test_unrepresentable_timestamp_is_skipped(self):
        hours = [HourlyRecord(timestamp_epoch_seconds=10**20, temperature_celsius=20.0), *_hours()]
        chart = ForecastChart(hours, derive_summary(hours), tz=ZoneInfo("UTC"))
        try:
            self.assertEqual(len(chart.points), 4)
            self.assertTrue(chart.render_png().startswith(b"\x89PNG"))
        finally:
            chart.destroy()

    def test_empty_hours_still_render(self):
        chart = ForecastChart([], derive_summary([]))
        try:
            self.assertTrue(chart.render_png().startswith(b"\x89PNG"))
        finally:
            chart.destroy()


if __name__ == "__main__":
    unittest.main()
