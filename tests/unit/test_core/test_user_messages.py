"""Unit tests for user-facing messages and error responses."""

import pytest

from research_assistant.core.errors import (
    configuration_error,
    error_to_response,
    network_error,
    plugin_error,
    service_error,
    to_user_message,
    validation_error,
)
from research_assistant.core.errors.messages import GENERIC_MESSAGE, NETWORK_MESSAGE


class TestToUserMessage:
    """Tests for to_user_message dispatch."""

    @pytest.mark.parametrize(
        "technical",
        [
            "ECONNREFUSED 127.0.0.1:8005",
            "Traceback: httpx.ReadTimeout at /api/v1/chat",
            "upstream said: 502 Bad Gateway",
        ],
    )
    def test_network_never_echoes_technical_message(self, technical):
        message = to_user_message(network_error(technical, status=502, url="/api"))
        assert technical not in message
        assert message == NETWORK_MESSAGE

    def test_service_names_capability_without_technical_text(self):
        message = to_user_message(service_error("KeyError: 'choices' in llm payload", "model catalog"))
        assert "model catalog" in message
        assert "KeyError" not in message

    def test_validation_mentions_field_and_echoes_message(self):
        message = to_user_message(validation_error("must not be empty", "article_text", ""))
        assert "article text" in message
        assert "must not be empty" in message

    def test_configuration_names_setting(self):
        message = to_user_message(configuration_error("aiModel unset in settings blob", "ai_model"))
        assert "ai model" in message
        assert "settings blob" not in message

    def test_plugin_kind_uses_generic_text(self):
        assert to_user_message(plugin_error("internal detail")) == GENERIC_MESSAGE

    def test_foreign_exception_uses_generic_text(self):
        assert to_user_message(RuntimeError("boom")) == GENERIC_MESSAGE


class TestErrorToResponse:
    """Tests for error_to_response."""

    def test_plugin_error_response(self):
        error = network_error("raw", status=503)
        response = error_to_response(error)
        assert response == {
            "success": False,
            "error": NETWORK_MESSAGE,
            "error_code": "NETWORK_ERROR",
            "error_kind": "NetworkError",
            "recoverable": True,
            "requires_user_action": False,
            "details": {},
        }

    def test_foreign_exception_response(self):
        response = error_to_response(KeyError("x"))
        assert response["success"] is False
        assert response["error"] == GENERIC_MESSAGE
        assert response["error_code"] == "UNEXPECTED_ERROR"
        assert response["details"] == {"original_type": "KeyError"}
