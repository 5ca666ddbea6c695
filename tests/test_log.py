"""Tests for structured logging of calculation steps."""

import pytest
import structlog
from structlog.testing import capture_logs

from homewise_core import calculate_max_affordability, compute
from homewise_core.config import HomewiseConfig
from homewise_core.log import configure_logging, configure_logging_from
from homewise_core.models import FinancialInputs, SliderState, ToggleState


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults around every test."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


class TestStepLogging:
    """Test suite for per-step debug events."""

    def test_affordability_steps_logged_in_order(self, household: FinancialInputs):
        """Each pipeline stage emits one affordability_step event."""
        with capture_logs() as logs:
            calculate_max_affordability(household)

        steps = [e["step"] for e in logs if e["event"] == "affordability_step"]
        assert steps == ["income", "payment_ceiling", "ideal_price", "down_payment", "final_structure"]

    def test_zero_income_logs_sentinel(self):
        """The DTI sentinel is noted at info level."""
        with capture_logs() as logs:
            calculate_max_affordability(FinancialInputs())

        sentinel = [e for e in logs if e["event"] == "affordability_dti_sentinel"]
        assert sentinel and sentinel[0]["log_level"] == "info"

    def test_rehearsal_logged(self):
        """Rehearsal scoring emits its band and pattern."""
        with capture_logs() as logs:
            compute("offer", SliderState(), ToggleState())

        event = next(e for e in logs if e["event"] == "rehearsal_computed")
        assert event["mode"] == "offer"
        assert event["pattern"] == "Steady enough to proceed"


class TestConfigureLogging:
    """Test suite for logging configuration."""

    def test_level_filtering(self, household: FinancialInputs):
        """At INFO level the debug step events are dropped."""
        configure_logging("INFO")
        with capture_logs() as logs:
            calculate_max_affordability(household)

        assert not [e for e in logs if e["event"] == "affordability_step"]

    def test_unknown_level_defaults_to_info(self):
        """An unrecognized level name does not raise."""
        configure_logging("CHATTY", json_logs=True)

    def test_configure_from_config(self):
        """Settings drive the logging configuration."""
        configure_logging_from(HomewiseConfig(log_level="DEBUG", _env_file=None))
        with capture_logs() as logs:
            compute("clarify", SliderState(), ToggleState())
        assert any(e["event"] == "rehearsal_computed" for e in logs)
