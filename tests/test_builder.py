"""Tests for ReportBuilder defaults, overrides and single-use behaviour."""

import json
import threading

import pytest

from rollbar_reporter import capture
from rollbar_reporter.exceptions import (
    ConfigurationError,
    ReportAlreadyBuiltError,
    UnsupportedReportSourceError,
)
from rollbar_reporter.models import Frame, Level, MessageBody, TraceBody


def test_defaults_come_from_client(client):
    payload = client.build_report().build_payload("hai")

    assert payload.level is Level.ERROR
    assert payload.environment == "ENVIRONMENT"
    assert payload.access_token == "ACCESS_TOKEN"


def test_client_default_level_is_used(make_client, service):
    client = make_client(service, default_level="warning")
    assert client.build_report().build_payload("hai").level is Level.WARNING


def test_overrides(client):
    payload = client.build_report(level="info", environment="staging").build_payload("hai")

    assert payload.level is Level.INFO
    assert payload.environment == "staging"


def test_blank_environment_override_rejected(client):
    with pytest.raises(ConfigurationError):
        client.build_report(environment=" ")


@pytest.mark.parametrize("text", ["hai", "", "＿|￣|○", "ValueError: not really an error"])
def test_strings_always_produce_message_bodies(client, text):
    payload = client.build_report().build_payload(text)

    assert isinstance(payload.body, MessageBody)
    assert payload.body.body == text


def test_message_payload_wire_format(client):
    document = json.loads(client.build_report().build_payload("hai").to_json())

    assert document == {
        "access_token": "ACCESS_TOKEN",
        "data": {
            "environment": "ENVIRONMENT",
            "level": "error",
            "language": "python",
            "body": {"message": {"body": "hai"}},
        },
    }


@pytest.mark.parametrize(
    "error",
    [ValueError("invalid literal for int() with base 10: '笑'"), KeyError("k"), RuntimeError("ünïcode\nline")],
)
def test_error_message_round_trips_through_json(client, error):
    payload = client.build_report().build_payload(error)

    document = json.loads(payload.to_json())
    exception = document["data"]["body"]["trace"]["exception"]
    assert exception["message"] == str(error)
    assert exception["description"] == str(error)
    assert exception["class"] == type(error).__name__


def test_failure_info_source(client):
    failure = capture.from_error_message("oops", filename="main.py", lineno=9)

    payload = client.build_report().build_payload(failure)

    assert isinstance(payload.body, TraceBody)
    assert payload.body.frames == (Frame(filename="main.py", lineno=9),)


def test_custom_frames_replace_captured_frames(client):
    frames = [Frame(filename="a.py", lineno=1), Frame(filename="b.py", lineno=2)]
    failure = capture.from_error_message("oops", filename="main.py", lineno=9)

    payload = client.build_report(frames=frames).build_payload(failure)

    assert payload.body.frames == tuple(frames)


def test_custom_frames_ignored_for_messages(client):
    payload = client.build_report(frames=[Frame(filename="a.py", lineno=1)]).build_payload("hai")
    assert payload.body == MessageBody(body="hai")


def test_builder_is_single_use(client):
    builder = client.build_report()
    builder.build_payload("first")

    assert builder.consumed
    with pytest.raises(ReportAlreadyBuiltError):
        builder.build_payload("second")


def test_send_also_consumes_builder(client):
    builder = client.build_report()
    builder.send("first")

    with pytest.raises(ReportAlreadyBuiltError):
        builder.send("second")


def test_builder_single_use_across_threads(client):
    builder = client.build_report()
    outcomes = []

    def worker():
        try:
            builder.build_payload("hai")
            outcomes.append("built")
        except ReportAlreadyBuiltError:
            outcomes.append("rejected")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("built") == 1
    assert outcomes.count("rejected") == 7


def test_fresh_builders_do_not_share_overrides(client):
    client.build_report(level="critical", environment="staging").build_payload("first")

    payload = client.build_report().build_payload("second")

    assert payload.level is Level.ERROR
    assert payload.environment == "ENVIRONMENT"


@pytest.mark.parametrize("source", [None, b"bytes"])
def test_unsupported_sources(client, source):
    with pytest.raises(UnsupportedReportSourceError):
        client.build_report().build_payload(source)


@pytest.mark.parametrize("environment", [5, b"staging", ""])
def test_invalid_environment_override_rejected(client, environment):
    with pytest.raises(ConfigurationError):
        client.build_report(environment=environment)
