"""
Tests for log redaction.
"""
import logging
import pytest

from openversion.config import settings
from openversion.main import SensitiveDataFilter


def redact(msg):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, msg, None, None)
    assert SensitiveDataFilter().filter(record) is True
    return record.msg


def test_bearer_token_redacted():
    assert redact("Authorization: Bearer abc.def-123") == "Authorization: Bearer [REDACTED]"


@pytest.mark.parametrize("msg", [
    "headers: {'x-api-key': 'abc123'}",
    'headers: {"X-Api-Key": "abc123"}',
    "X-Api-Key: abc123",
])
def test_api_key_header_redacted(msg):
    result = redact(msg)
    assert "abc123" not in result
    assert "[REDACTED]" in result


def test_configured_token_redacted(monkeypatch):
    monkeypatch.setattr(settings, "api_token", "sk_configured")
    assert redact("token=sk_configured seen") == "token=[REDACTED] seen"


def test_plain_message_untouched():
    assert redact("Next version for 'main' (project 1): 1.1.0.0+minor") == \
        "Next version for 'main' (project 1): 1.1.0.0+minor"
