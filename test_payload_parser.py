"""
Tests for webhook body decoding (JSON or URL-encoded form data).
"""

import pytest

from api.services.payload_parser import PayloadParseError, parse_webhook_payload


def test_json_object_body():
    payload = parse_webhook_payload(b'{"name": "Jane Doe", "utm": {"source": "ad"}}')
    assert payload == {"name": "Jane Doe", "utm": {"source": "ad"}}


def test_json_with_leading_whitespace():
    assert parse_webhook_payload(b'  \n{"email": "a@b.com"}') == {"email": "a@b.com"}


def test_form_encoded_body():
    payload = parse_webhook_payload(b"name=Jane+Doe&email=jane%40example.com&notes=")
    assert payload == {"name": "Jane Doe", "email": "jane@example.com", "notes": ""}


def test_repeated_form_keys_keep_last_value():
    assert parse_webhook_payload(b"tag=a&tag=b") == {"tag": "b"}


def test_utf8_form_values():
    payload = parse_webhook_payload("name=Jos%C3%A9&city=Zürich".encode("utf-8"))
    assert payload == {"name": "José", "city": "Zürich"}


def test_empty_body_is_empty_payload():
    assert parse_webhook_payload(b"") == {}
    assert parse_webhook_payload(None) == {}


def test_invalid_json_raises():
    with pytest.raises(PayloadParseError):
        parse_webhook_payload(b'{"name": ')


def test_invalid_utf8_raises():
    with pytest.raises(PayloadParseError):
        parse_webhook_payload(b"\xff\xfe\x00")
