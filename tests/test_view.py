import datetime as dt
import unittest

import requests

from app.domain import HourlyRecord
from app.view import FETCH_FAILED, ForecastView, GatewayClient, GatewayError

MONDAY = dt.date(2024, 6, 10)
DAY_START = int(dt.datetime(2024, 6, 10, tzinfo=dt.timezone.utc).timestamp())


def _payload(date="2024-06-10"):
    return {
        "resolvedAddress": "New York, NY, United States",
        "queryLocation": "New York,NY",
        "date": date,
        "segment": "morning",
        "summary": "Sunny",
        "hours": [
            {"datetime": f"{h:02d}:00:00", "datetimeEpoch": DAY_START + 3600 * h,
             "temp": 20.0, "humidity": 80, "windspeed": 10, "conditions": "Clear"}
            for h in range(8, 12)
        ],
    }


class FakeClient:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def fetch_forecast(self, location, date, segment, timezone=None):
        self.calls.append({"location": location, "date": date, "segment": segment, "timezone": timezone})
        if self.error:
            raise GatewayError(self.error)
        return _payload(date)


class FakeChart:
    created = []

    def __init__(self, hours, summary, title="", tz=None):
        # every earlier chart must already be gone
        assert all(c.destroyed for c in FakeChart.created)
        self.hours = hours
        self.summary = summary
        self.title = title
        self.destroyed = False
        FakeChart.created.append(self)

    def destroy(self):
        self.destroyed = True


def _view(client=None, **kwargs):
    FakeChart.created = []
    return ForecastView(client or FakeClient(), chart_factory=FakeChart, today=lambda: MONDAY, timezone="UTC", **kwargs)


class TestForecastView(unittest.TestCase):
    def test_refresh_fetches_resolved_date_and_draws(self):
        client = FakeClient()
        view = _view(client, segment="morning")
        view.refresh()

        self.assertEqual(client.calls[0], {"location": "New York,NY", "date": "2024-06-10", "segment": "morning", "timezone": "UTC"})
        self.assertEqual(len(view.hours), 4)
        self.assertEqual(view.summary.labels, ["Nice day", "Humid", "Windy"])
        self.assertIs(view.chart, FakeChart.created[-1])
        self.assertIn("2024-06-10", view.chart.title)
        self.assertFalse(view.loading)

    def test_only_one_chart_alive(self):
        view = _view()
        view.refresh()
        view.set_segment("evening")
        view.set_day_of_week("Friday")
        self.assertEqual(len(FakeChart.created), 3)
        self.assertEqual([c.destroyed for c in FakeChart.created], [True, True, False])

    def test_setters_refresh_only_on_change(self):
        client = FakeClient()
        view = _view(client)
        view.set_location("New York,NY")
        self.assertEqual(client.calls, [])
        view.set_location("Boston,MA")
        self.assertEqual(client.calls[-1]["location"], "Boston,MA")

    def test_swipe_right_goes_back_a_week(self):
        client = FakeClient()
        view = _view(client)
        view.touch_start(100)
        view.touch_end(145)
        self.assertEqual(view.week_offset, -1)
        self.assertEqual(client.calls[-1]["date"], "2024-06-03")

    def test_swipe_left_goes_forward_a_week(self):
        client = FakeClient()
        view = _view(client)
        view.touch_start(145)
        view.touch_end(100)
        self.assertEqual(view.week_offset, 1)
        self.assertEqual(client.calls[-1]["date"], "2024-06-17")

    def test_short_swipe_is_ignored(self):
        client = FakeClient()
        view = _view(client)
        view.touch_start(100)
        view.touch_end(120)
        self.assertEqual(view.week_offset, 0)
        self.assertEqual(client.calls, [])

    def test_threshold_is_exclusive(self):
        view = _view()
        view.touch_start(0)
        view.touch_end(40)
        self.assertEqual(view.week_offset, 0)

    def test_touch_end_without_start_is_noop(self):
        view = _view()
        view.touch_end(500)
        self.assertEqual(view.week_offset, 0)

    def test_week_buttons(self):
        client = FakeClient()
        view = _view(client)
        view.next_week()
        view.next_week()
        view.previous_week()
        self.assertEqual(view.week_offset, 1)
        self.assertEqual(client.calls[-1]["date"], "2024-06-17")

    def test_error_clears_chart_and_shows_message(self):
        view = _view()
        view.refresh()
        view.client = FakeClient(error="rate limited")
        view.refresh()
        self.assertEqual(view.error, "rate limited")
        self.assertIsNone(view.chart)
        self.assertTrue(FakeChart.created[0].destroyed)
        self.assertEqual(view.status_text(), "rate limited")

    def test_status_text(self):
        view = _view()
        self.assertEqual(view.status_text(), "No data")
        view.refresh()
        self.assertEqual(view.status_text(), "New York, NY, United States - 2024-06-10 - all")

    def test_close_destroys_chart(self):
        with _view() as view:
            view.refresh()
            chart = view.chart
        self.assertTrue(chart.destroyed)
        self.assertIsNone(view.chart)

    def test_hour_cards(self):
        view = _view()
        view.refresh()
        cards = view.hour_cards()
        self.assertEqual(cards[0], {"time": "08:00", "temperature": "68°", "conditions": "Clear"})

    def test_hour_card_with_unrepresentable_time(self):
        view = _view()
        view.hours = [HourlyRecord(timestamp_epoch_seconds=10**20, icon_id="rain")]
        self.assertEqual(view.hour_cards(), [{"time": "--:--", "temperature": "--", "conditions": "rain"}])

    def test_auto_refresh_fetches_on_construction(self):
        client = FakeClient()
        FakeChart.created = []
        view = ForecastView(client, chart_factory=FakeChart, today=lambda: MONDAY, auto_refresh=True)
        self.assertEqual(len(client.calls), 1)
        self.assertIsNotNone(view.chart)

    def test_no_fetch_on_construction_by_default(self):
        client = FakeClient()
        _view(client)
        self.assertEqual(client.calls, [])


class DummyResp:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class StubSession:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        if self.exc:
            raise self.exc
        return self.resp


class TestGatewayClient(unittest.TestCase):
    def test_success_returns_payload(self):
        session = StubSession(DummyResp(_payload()))
        client = GatewayClient("http://gw.local/", timeout=2, session=session)
        data = client.fetch_forecast("New York,NY", "2024-06-10", "morning", "UTC")
        self.assertEqual(data["date"], "2024-06-10")
        url, params = session.calls[0]
        self.assertEqual(url, "http://gw.local/api/forecast")
        self.assertEqual(params, {"location": "New York,NY", "date": "2024-06-10", "segment": "morning", "timezone": "UTC"})

    def test_server_error_string_is_used(self):
        client = GatewayClient("http://gw.local", session=StubSession(DummyResp({"error": "rate limited"}, 429)))
        with self.assertRaises(GatewayError) as ctx:
            client.fetch_forecast("X", "2024-06-10", "all")
        self.assertEqual(ctx.exception.message, "rate limited")

    def test_non_json_error_is_generic(self):
        client = GatewayClient("http://gw.local", session=StubSession(DummyResp(ValueError("bad"), 500)))
        with self.assertRaises(GatewayError) as ctx:
            client.fetch_forecast("X", "2024-06-10", "all")
        self.assertEqual(ctx.exception.message, FETCH_FAILED)

    def test_network_failure_is_generic(self):
        client = GatewayClient("http://gw.local", session=StubSession(exc=requests.ConnectionError("down")))
        with self.assertRaises(GatewayError) as ctx:
            client.fetch_forecast("X", "2024-06-10", "all")
        self.assertEqual(ctx.exception.message, FETCH_FAILED)


if __name__ == "__main__":
    unittest.main()
