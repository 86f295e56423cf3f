#
# PRETTYVAL - Relative Time Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from datetime import datetime, timedelta, timezone

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.sentinels import UNSET
from prettyval.timefmt import TimeFormatter, delta, humanize, is_zero_time

NOW = datetime(2023, 6, 15, 12, 0, 0)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestFormat:
    @pytest.mark.parametrize(
        "offset, expected",
        [
            pytest.param(timedelta(seconds=-45), "45 seconds ago", id="seconds"),
            pytest.param(timedelta(seconds=-10), "10 seconds ago", id="ten-seconds"),
            pytest.param(timedelta(seconds=-5), "just now", id="just-now-past"),
            pytest.param(timedelta(seconds=5), "just now", id="just-now-future"),
            pytest.param(timedelta(0), "just now", id="same-instant"),
            pytest.param(timedelta(minutes=-1), "1 minute ago", id="one-minute"),
            pytest.param(timedelta(seconds=-90), "1 minute ago", id="floor-minutes"),
            pytest.param(timedelta(minutes=-59), "59 minutes ago", id="minutes"),
            pytest.param(timedelta(hours=-1), "1 hour ago", id="one-hour"),
            pytest.param(timedelta(hours=-5), "5 hours ago", id="hours"),
            pytest.param(timedelta(days=-1), "yesterday", id="yesterday"),
            pytest.param(timedelta(days=1), "tomorrow", id="tomorrow"),
            pytest.param(timedelta(days=-3), "3 days ago", id="days"),
            pytest.param(timedelta(days=2), "in 2 days", id="future-days"),
            pytest.param(timedelta(days=-7), "last week", id="last-week"),
            pytest.param(timedelta(days=7), "next week", id="next-week"),
            pytest.param(timedelta(days=-14), "2 weeks ago", id="weeks"),
            pytest.param(timedelta(days=-30), "last month", id="last-month"),
            pytest.param(timedelta(days=30), "next month", id="next-month"),
            pytest.param(timedelta(days=-60), "2 months ago", id="months"),
            pytest.param(timedelta(days=-365), "last year", id="last-year"),
            pytest.param(timedelta(days=365), "next year", id="next-year"),
            pytest.param(timedelta(days=-800), "2 years ago", id="years"),
            pytest.param(timedelta(seconds=45), "in 45 seconds", id="future-seconds"),
            pytest.param(timedelta(hours=3), "in 3 hours", id="future-hours"),
        ],
    )
    def test_friendly(self, offset, expected):
        """Format with default thresholds and friendly phrases."""
        assert TimeFormatter(now=NOW).format(NOW + offset) == expected

    @pytest.mark.parametrize(
        "offset, expected",
        [
            pytest.param(timedelta(seconds=-5), "5 seconds ago", id="seconds"),
            pytest.param(timedelta(days=-1), "1 day ago", id="one-day"),
            pytest.param(timedelta(days=1), "in 1 day", id="one-day-future"),
            pytest.param(timedelta(days=-7), "1 week ago", id="one-week"),
            pytest.param(timedelta(days=-30), "1 month ago", id="one-month"),
            pytest.param(timedelta(days=-365), "1 year ago", id="one-year"),
            pytest.param(timedelta(0), "in 0 seconds", id="same-instant"),
        ],
    )
    def test_unfriendly(self, offset, expected):
        """Without friendly phrases every value uses the counted form."""
        assert TimeFormatter(now=NOW, friendly_phrases=False).format(NOW + offset) == expected

    @pytest.mark.parametrize(
        "offset, expected",
        [
            pytest.param(timedelta(seconds=-5), "5 seconds ago", id="below-threshold"),
            pytest.param(timedelta(seconds=-15), "0 minutes ago", id="above-threshold"),
        ],
    )
    def test_custom_threshold(self, offset, expected):
        """Thresholds pick the bucket, the unit still divides the magnitude."""
        tf = TimeFormatter(now=NOW).with_second_threshold(timedelta(seconds=10)).with_friendly_phrases(False)
        assert tf.format(NOW + offset) == expected

    def test_custom_thresholds_chain(self):
        tf = (TimeFormatter(now=NOW)
              .with_minute_threshold(timedelta(minutes=90))
              .with_hour_threshold(timedelta(hours=48))
              .with_day_threshold(timedelta(days=10))
              .with_week_threshold(timedelta(days=60))
              .with_month_threshold(timedelta(days=400)))
        assert tf.format(NOW - timedelta(minutes=80)) == "80 minutes ago"
        assert tf.format(NOW - timedelta(hours=30)) == "30 hours ago"
        assert tf.format(NOW - timedelta(days=9)) == "9 days ago"
        assert tf.format(NOW - timedelta(days=45)) == "6 weeks ago"
        assert tf.format(NOW - timedelta(days=380)) == "12 months ago"

    def test_future_format(self):
        tf = TimeFormatter(now=NOW).with_future_format("{} from now")
        assert tf.format(NOW + timedelta(seconds=30)) == "30 seconds from now"

    @pytest.mark.parametrize(
        "instant",
        [
            pytest.param(None, id="none"),
            pytest.param(datetime.min, id="naive-min"),
            pytest.param(datetime.min.replace(tzinfo=timezone.utc), id="aware-min"),
        ],
    )
    def test_zero(self, instant):
        assert TimeFormatter(now=NOW).format(instant) == "<zero>"
        assert TimeFormatter(now=NOW).with_zero_string("never").format(instant) == "never"

    def test_aware_instants(self):
        now = NOW.replace(tzinfo=timezone.utc)
        instant = datetime(2023, 6, 15, 14, 0, 0, tzinfo=timezone(timedelta(hours=4)))
        assert TimeFormatter(now=now).format(instant) == "2 hours ago"

    def test_default_reference_is_current_time(self):
        assert TimeFormatter().format(datetime.now() - timedelta(minutes=5)) == "5 minutes ago"


class TestConfig:
    def test_withers_copy_on_write(self):
        original = TimeFormatter()
        derived = original.with_now(NOW)
        assert derived.now == NOW
        assert original.now is None

    def test_merge(self):
        tf = TimeFormatter(now=NOW)
        assert tf.merge(now=UNSET, zero_string="-") == TimeFormatter(now=NOW, zero_string="-")

    def test_merge_unknown_option(self):
        with pytest.raises(TypeError, match="unknown TimeFormatter options"):
            TimeFormatter().merge(hours=1)

    @pytest.mark.parametrize(
        "kwargs, exc",
        [
            pytest.param({"now": "today"}, TypeError, id="bad-now"),
            pytest.param({"second_threshold": 60}, TypeError, id="bad-threshold"),
            pytest.param({"future_format": 5}, TypeError, id="bad-future-format-type"),
            pytest.param({"future_format": "soon"}, ValueError, id="future-format-without-slot"),
        ],
    )
    def test_validation(self, kwargs, exc):
        with pytest.raises(exc):
            TimeFormatter(**kwargs)


class TestHelpers:
    def test_humanize(self):
        assert humanize(NOW - timedelta(seconds=45), now=NOW) == "45 seconds ago"

    @pytest.mark.parametrize(
        "instant, expected",
        [
            pytest.param(None, True, id="none"),
            pytest.param(datetime.min, True, id="min"),
            pytest.param(NOW, False, id="regular"),
        ],
    )
    def test_is_zero_time(self, instant, expected):
        assert is_zero_time(instant) is expected

    def test_delta_mixed_awareness(self):
        """A naive operand is taken as local time."""
        aware = NOW.astimezone()
        assert delta(aware, NOW - timedelta(minutes=1)) == timedelta(minutes=1)
        assert delta(NOW, aware - timedelta(minutes=1)) == timedelta(minutes=1)
