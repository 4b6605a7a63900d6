import logging

import pytest
from pydantic import ValidationError

from underbar import LoggingConfig, TimerStatus, setup_logging
from underbar.models import SchedulerStats, WaitSpec
from underbar.utils import serialize_arguments


class TestModels:
    """Test configuration and stats models"""

    def test_wait_spec_accepts_non_negative_numbers(self):
        assert WaitSpec(wait=0).wait == 0
        assert WaitSpec(wait=12.5).wait == 12.5

    @pytest.mark.parametrize("wait", [-0.1, float("inf"), float("nan")])
    def test_wait_spec_rejects_bad_values(self, wait):
        with pytest.raises(ValidationError):
            WaitSpec(wait=wait)

    def test_scheduler_stats_defaults(self):
        stats = SchedulerStats()
        assert stats.total_scheduled == 0
        assert stats.now is None

    def test_timer_status_values(self):
        assert TimerStatus.FIRED.value == "fired"
        assert TimerStatus("cancelled") is TimerStatus.CANCELLED

    def test_logging_config_normalizes_level(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")


class TestLogging:
    """Test setup_logging"""

    def test_installs_single_handler(self):
        package_logger = setup_logging(LoggingConfig(level="DEBUG"))
        setup_logging(LoggingConfig(level="WARNING"))

        ours = [h for h in package_logger.handlers if getattr(h, "_underbar_handler", False)]
        assert len(ours) == 1, "Repeated setup should replace, not stack, handlers"
        assert package_logger.level == logging.WARNING
        assert package_logger.name == "underbar"

        package_logger.removeHandler(ours[0])
        package_logger.setLevel(logging.NOTSET)

    def test_scheduler_failures_are_logged(self, scheduler, caplog):
        scheduler.call_later(1, lambda: 1 / 0)
        with caplog.at_level(logging.ERROR, logger="underbar.scheduler"):
            with pytest.raises(ZeroDivisionError):
                scheduler.advance(1)
        assert any("failed" in record.message for record in caplog.records)


class TestSerializeArguments:
    """Test memoize key construction"""

    def test_order_sensitive(self):
        assert serialize_arguments((1, 2), {}) != serialize_arguments((2, 1), {})

    def test_keyword_order_insensitive(self):
        assert serialize_arguments((), {"a": 1, "b": 2}) == serialize_arguments((), {"b": 2, "a": 1})

    def test_non_json_values_fall_back_to_repr(self):
        marker = object()
        assert repr(marker) in serialize_arguments((marker,), {})

    def test_non_string_mapping_keys(self):
        key = serialize_arguments(({(1, 2): "x"},), {})
        assert "(1, 2)" in key

    def test_self_referencing_argument_falls_back_to_repr(self):
        looped = []
        looped.append(looped)
        key = serialize_arguments((looped,), {})
        assert "[...]" in key, f"Unexpected key: {key}"
