from datetime import datetime, timedelta, timezone

from core.utils.time import utc_now_iso


class TestUtcNowIso:
    def test_parses_as_aware_utc(self) -> None:
        parsed = datetime.fromisoformat(utc_now_iso())

        assert parsed.utcoffset() == timedelta(0)

    def test_millisecond_precision(self) -> None:
        fraction = utc_now_iso().split(".")[1]

        assert fraction.endswith("+00:00")
        assert len(fraction) == len("123+00:00")

    def test_is_close_to_current_time(self) -> None:
        before = datetime.now(timezone.utc) - timedelta(milliseconds=1)
        parsed = datetime.fromisoformat(utc_now_iso())
        after = datetime.now(timezone.utc)

        assert before <= parsed <= after
