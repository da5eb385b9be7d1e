import logging
from unittest import mock

import pytest

from sfpermset.core.action import BaseAction, utc_timestamp
from sfpermset.core.exceptions import ActionOptionsError, SfPermsetException


class _Action(BaseAction):
    action_options = {
        "name": {"description": "Who", "required": True},
        "greeting": {"description": "What"},
    }

    def _run_action(self):
        greeting = self.options.get("greeting") or "Hello"
        self.return_values = {"message": f"{greeting}, {self.options['name']}"}


class TestBaseAction:
    def test_call(self):
        action = _Action({"name": "Astro", "ignored": True}, {})
        assert action.options == {"name": "Astro"}
        assert action() == {"message": "Hello, Astro"}

    def test_invoke_is_call(self):
        assert _Action({"name": "Astro", "greeting": "Hi"}).invoke() == {
            "message": "Hi, Astro"
        }

    def test_required_option(self):
        with pytest.raises(ActionOptionsError, match="name is required"):
            _Action({})()

    def test_required_option__empty(self):
        with pytest.raises(ActionOptionsError, match="name is required"):
            _Action({"name": ""})()

    def test_not_implemented(self):
        with pytest.raises(NotImplementedError):
            BaseAction({})()

    def test_custom_logger(self):
        logger = mock.Mock()
        action = _Action({"name": "Astro"}, logger=logger)
        action()
        logger.info.assert_called_once_with("Beginning action: _Action")

    def test_default_logger_is_module_logger(self):
        assert _Action({}).logger is logging.getLogger(__name__)

    def test_context_parsed(self):
        action = _Action({}, {"secrets": {"X": "y"}})
        assert action.context.secrets == {"X": "y"}
        assert action.context.environment == {}

    def test_error__retryable(self):
        result = _Action({"error": Exception("503 Service Unavailable")}).error()
        assert result == {"status": "retry_requested"}

    def test_error__unknown(self):
        result = _Action({"error": Exception("Test error")}).error()
        assert result == {"status": "retry_requested"}

    def test_error__fatal_reraises(self):
        err = ActionOptionsError("name is required")
        with pytest.raises(ActionOptionsError) as e:
            _Action({"error": err}).error()
        assert e.value is err

    def test_error__fatal_from_mapping(self):
        with pytest.raises(SfPermsetException, match="401 Unauthorized"):
            _Action({"error": {"message": "401 Unauthorized"}}).error()

    def test_error__missing(self):
        with pytest.raises(ActionOptionsError, match="error is required"):
            _Action({}).error()

    def test_error__logs(self, caplog):
        caplog.set_level(logging.INFO)
        _Action({"error": Exception("Test error")}).error()
        assert "Error in _Action: Test error" in caplog.text

    def test_halt(self):
        result = _Action({"reason": "timeout"}).halt()
        assert result["status"] == "halted"
        assert result["reason"] == "timeout"
        assert result["halted_at"].endswith("Z")


def test_utc_timestamp():
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "T" in stamp
    # millisecond precision: 2024-01-01T00:00:00.000Z
    assert len(stamp) == 24
