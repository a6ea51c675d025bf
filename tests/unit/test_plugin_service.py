"""Tests for PluginService call sites of the error handler."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from research_assistant.config import StrategyConfig
from research_assistant.core.error_handling import ErrorHandler, ExecutionContext
from research_assistant.core.errors import ErrorKind, PluginError
from research_assistant.services import PluginService
from research_assistant.services.plugin_service import DATA_ENDPOINT, default_service_config

HANDLER_LOGGER = "research_assistant.core.error_handling.handler"


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def reporter():
    return MagicMock()


@pytest.fixture
def make_service(sleep, reporter):
    def _make(api):
        handler = ErrorHandler(
            default_service_config(),
            ExecutionContext(component="PluginService"),
            reporter=reporter,
            sleep_func=sleep,
        )
        return PluginService(api, handler=handler)

    return _make


def _api(**methods):
    api = MagicMock()
    for name in ("get", "post", "put", "delete"):
        setattr(api, name, AsyncMock(**methods.get(name, {})))
    return api


class TestFetchData:
    """Tests for fetch_data under the Retry strategy."""

    @pytest.mark.asyncio
    async def test_returns_valid_data(self, make_service):
        data = {"id": "1", "name": "Item", "value": 3}
        api = _api(get={"return_value": {"data": data, "status": 200}})

        assert await make_service(api).fetch_data() == data
        api.get.assert_awaited_once_with(DATA_ENDPOINT)

    @pytest.mark.asyncio
    async def test_missing_api_returns_none_without_retry(self, make_service, sleep):
        service = make_service(None)

        assert await service.fetch_data() is None
        assert sleep.calls == []
        assert dict(service.error_handler.get_statistics()) == {"ServiceError:SERVICE_UNAVAILABLE": 1}

    @pytest.mark.asyncio
    async def test_transport_failure_retried_then_none(self, make_service, sleep, caplog):
        api = _api(get={"side_effect": ConnectionError("connection refused")})
        service = make_service(api)

        with caplog.at_level(logging.WARNING, logger=HANDLER_LOGGER):
            assert await service.fetch_data() is None

        assert api.get.await_count == 4
        assert sleep.calls == [1.0, 2.0, 4.0]
        assert dict(service.error_handler.get_statistics()) == {"NetworkError:NETWORK_ERROR": 4}
        logged = [r.plugin_error for r in caplog.records if hasattr(r, "plugin_error")]
        assert len(logged) == 4
        assert logged[-1]["kind"] == "NetworkError"
        assert logged[-1]["url"] == DATA_ENDPOINT

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, make_service):
        data = {"name": "Item"}
        api = _api(get={"side_effect": [ConnectionError("reset"), {"data": data}]})

        assert await make_service(api).fetch_data() == data
        assert api.get.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_data_retried_then_none(self, make_service, sleep, caplog):
        api = _api(get={"return_value": {"status": 204}})
        service = make_service(api)

        with caplog.at_level(logging.WARNING, logger=HANDLER_LOGGER):
            assert await service.fetch_data() is None

        assert api.get.await_count == 4
        logged = [r.plugin_error for r in caplog.records if hasattr(r, "plugin_error")]
        assert logged[-1]["message"] == "No data received from API"
        assert logged[-1]["status"] == 204

    @pytest.mark.asyncio
    async def test_non_mapping_response_retried_then_none(self, make_service, caplog):
        api = _api(get={"return_value": "<html>"})

        with caplog.at_level(logging.WARNING, logger=HANDLER_LOGGER):
            assert await make_service(api).fetch_data() is None

        logged = [r.plugin_error for r in caplog.records if hasattr(r, "plugin_error")]
        assert logged[-1]["message"] == "Invalid response format from API"

    @pytest.mark.asyncio
    async def test_invalid_payload_not_retried(self, make_service, sleep):
        api = _api(get={"return_value": {"data": {"name": "", "value": 1}}})
        service = make_service(api)

        assert await service.fetch_data() is None
        assert api.get.await_count == 1
        assert sleep.calls == []
        assert dict(service.error_handler.get_statistics()) == {"ValidationError:VALIDATION_ERROR": 1}


class TestMutations:
    """Tests for save/update/delete under the Escalate strategy."""

    @pytest.mark.asyncio
    async def test_save_success(self, make_service):
        api = _api(post={"return_value": {"id": "9"}})
        assert await make_service(api).save_data({"name": "x"}) == {"id": "9"}
        api.post.assert_awaited_once_with(DATA_ENDPOINT, {"name": "x"})

    @pytest.mark.asyncio
    async def test_save_failure_reported_and_raised(self, make_service, reporter):
        api = _api(post={"side_effect": RuntimeError("500 from host")})

        with pytest.raises(PluginError) as exc_info:
            await make_service(api).save_data({"name": "x"})

        assert exc_info.value.code == "UNEXPECTED_ERROR"
        assert api.post.await_count == 1
        reporter.assert_called_once()
        record, context = reporter.call_args.args
        assert record.code == "UNEXPECTED_ERROR"
        assert context.component == "PluginService"

    @pytest.mark.asyncio
    async def test_update_uses_item_url(self, make_service):
        api = _api(put={"return_value": None})
        await make_service(api).update_data("abc", {"value": 2})
        api.put.assert_awaited_once_with(f"{DATA_ENDPOINT}/abc", {"value": 2})

    @pytest.mark.asyncio
    async def test_delete_without_api_escalates(self, make_service, reporter):
        with pytest.raises(PluginError) as exc_info:
            await make_service(None).delete_data("abc")

        assert exc_info.value.code == "SERVICE_UNAVAILABLE"
        reporter.assert_called_once()

    @pytest.mark.asyncio
    async def test_blank_id_rejected_before_call(self, make_service):
        api = _api()

        with pytest.raises(PluginError) as exc_info:
            await make_service(api).delete_data("  ")

        assert exc_info.value.kind is ErrorKind.VALIDATION
        api.delete.assert_not_awaited()


class TestValidateData:
    """Tests for validate_data."""

    def test_valid(self):
        service = PluginService()
        data = {"name": "x", "value": 1.5}
        assert service.validate_data(data) is data

    def test_value_optional(self):
        assert PluginService().validate_data({"name": "x"}) == {"name": "x"}

    @pytest.mark.parametrize(
        "data,field",
        [
            ({}, "name"),
            ({"name": 5}, "name"),
            ({"name": "x", "value": "high"}, "value"),
        ],
    )
    def test_invalid(self, data, field):
        with pytest.raises(PluginError) as exc_info:
            PluginService().validate_data(data)
        assert exc_info.value.record.field == field


def test_default_config_matches_service_defaults():
    config = default_service_config()
    assert isinstance(config, StrategyConfig)
    assert config.max_retries == 3
    assert config.retry_delay_ms == 1000
    assert config.enable_reporting is True
    assert config.fallback_values["emptyarray"] == []
