"""HTTP error payloads and the error handler."""

from __future__ import annotations

import logging

import pytest

from hephaestus.config import Config
from hephaestus.enriched import EnrichedError
from hephaestus.http import ErrorHandler, HttpError, HttpResponse, describe_error

pytestmark = pytest.mark.unit


def test_http_error_defaults() -> None:
    err = HttpError("boom")
    assert err.status_code == 500
    assert err.headers == {}
    assert err.code == 0
    assert isinstance(err, EnrichedError)


def test_payload_includes_history() -> None:
    cause = ValueError("bad value")
    err = HttpError("Not found", 404, code=12, cause=cause)

    assert err.to_payload() == {
        "message": "Not found",
        "code": 12,
        "status": 404,
        "exception_history": [
            {"class": "ValueError", "message": "bad value", "code": 0}
        ],
    }


def test_payload_states_only_when_requested(monkeypatch) -> None:
    monkeypatch.setattr("hephaestus.enriched.time.time", lambda: 10.0)
    err = HttpError("x").save_state({"id": 1}, "request")

    assert "states" not in err.to_payload()
    assert err.to_payload(include_states=True)["states"] == {
        "request": {"timestamp": 10.0, "state": {"id": 1}}
    }


def test_to_response_merges_headers() -> None:
    err = HttpError("Slow down", 429, headers={"Retry-After": "3"})
    response = err.to_response()

    assert response.status == 429
    assert response.headers == {
        "Content-Type": "application/json",
        "Retry-After": "3",
    }
    assert response.json()["message"] == "Slow down"


def test_preset_response_wins() -> None:
    preset = HttpResponse(status=418, body="teapot")
    err = HttpError("x").set_response(preset)
    assert err.to_response() is preset


def test_describe_error_reads_library_codes() -> None:
    nested = EnrichedError("inner", 5)
    assert describe_error(nested) == {
        "class": "hephaestus.EnrichedError",
        "message": "inner",
        "code": 5,
    }


def test_handler_passes_http_errors_through(caplog) -> None:
    err = HttpError("Forbidden", 403)
    handler = ErrorHandler()

    with caplog.at_level(logging.ERROR, logger="hephaestus"):
        response = handler.handle(err)

    assert response.status == 403
    record = caplog.records[-1]
    assert record.getMessage() == "Forbidden"
    assert record.hephaestus["status_code"] == 403
    assert record.hephaestus["exception_class"] == "hephaestus.HttpError"
    assert record.hephaestus["chain"] == ["hephaestus.HttpError"]


def test_handler_converts_plain_errors() -> None:
    original = KeyError("missing")
    handler = ErrorHandler(logging_enabled=False)

    converted = handler.convert(original)
    assert converted.status_code == 500
    assert converted.cause is original
    assert converted.get_history() == (original,)

    body = handler.handle(original).json()
    assert body["status"] == 500
    assert body["exception_history"][0]["class"] == "KeyError"


def test_handler_keeps_enriched_error_code() -> None:
    original = EnrichedError("sync failed", 42)
    converted = ErrorHandler().convert(original)
    assert converted.code == 42
    assert converted.message == "sync failed"


def test_handler_from_config(caplog) -> None:
    config = Config(log_channel="app.errors", debug=True)
    handler = ErrorHandler.from_config(config)
    err = HttpError("x").save_state("snapshot")

    with caplog.at_level(logging.ERROR, logger="app.errors"):
        body = handler.handle(err).json()

    assert handler.logger.name == "app.errors"
    assert body["states"]["default"]["state"] == "snapshot"
    assert [r.name for r in caplog.records] == ["app.errors"]


def test_handler_logging_can_be_disabled(caplog) -> None:
    handler = ErrorHandler.from_config(Config(logging_enabled=False))
    with caplog.at_level(logging.DEBUG):
        handler.handle(RuntimeError("quiet"))
    assert caplog.records == []


def test_handler_logs_causal_chain(caplog) -> None:
    try:
        try:
            raise ConnectionError("refused")
        except ConnectionError as exc:
            raise RuntimeError("fetch failed") from exc
    except RuntimeError as outer:
        error = outer

    with caplog.at_level(logging.ERROR, logger="hephaestus"):
        ErrorHandler().handle(error)

    chain = caplog.records[-1].hephaestus["chain"]
    assert chain[0] == "hephaestus.HttpError"
    assert set(chain[1:]) == {"RuntimeError", "ConnectionError"}
