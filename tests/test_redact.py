from __future__ import annotations

from asynchook._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = [
        {
            "user": "alice",
            "password": "pw",
            "Api-Key": "k",
            "nested": {"token": "abc", "page": 2},
        }
    ]

    redacted = redact_for_log(payload)
    assert redacted[0]["user"] == "alice"
    assert redacted[0]["password"] == "<redacted>"
    assert redacted[0]["Api-Key"] == "<redacted>"
    assert redacted[0]["nested"] == {"token": "<redacted>", "page": 2}


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log(["x" * 600], max_string=10)
    assert redacted[0].startswith("x" * 10)
    assert "<truncated>" in redacted[0]


def test_redact_for_log_hides_object_internals() -> None:
    class Client:
        secret = "s"

    assert redact_for_log([Client()]) == ["<Client>"]
