import logging

import pytest

from services.email_events import normalize_events, process_email_event, process_email_events


@pytest.mark.parametrize("event", ["delivered", "open", "click", "unsubscribe", "deferred"])
def test_info_events(event, caplog):
    with caplog.at_level(logging.INFO, logger="services.email_events"):
        process_email_event({"event": event, "email": "ana@exemplo.com"})

    assert caplog.records[-1].levelno == logging.INFO
    assert "ana@exemplo.com" in caplog.records[-1].getMessage()


@pytest.mark.parametrize("event", ["bounce", "dropped", "spam_report"])
def test_failure_events_are_warnings(event, caplog):
    with caplog.at_level(logging.INFO, logger="services.email_events"):
        process_email_event({"event": event, "email": "ana@exemplo.com", "reason": "mailbox full"})

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert "ana@exemplo.com" in record.getMessage()


def test_bounce_includes_reason(caplog):
    with caplog.at_level(logging.INFO, logger="services.email_events"):
        process_email_event({"event": "bounce", "email": "x@y.z", "reason": "mailbox full"})
    assert "mailbox full" in caplog.records[-1].getMessage()


def test_malformed_event_never_raises():
    process_email_event({})
    process_email_event({"event": None})


def test_batch_and_single_payloads():
    assert process_email_events([{"event": "open"}, {"event": "click"}, "junk"]) == 2
    assert process_email_events({"event": "delivered"}) == 1
    assert normalize_events([]) == []
