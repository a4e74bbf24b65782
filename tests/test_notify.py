from __future__ import annotations

import json

import httpx
import pytest

from enterprise_errors import (
    EmailMessage,
    HttpEmailTransport,
    RequestSnapshot,
    build_error_email_body,
    create_email_notifier,
    normalize_error,
    validation_error,
)


def _error():
    return validation_error(
        "Email <b>is</b> required",
        target="email",
        module="users",
        details=[{"message": "missing", "target": "email"}],
        request=RequestSnapshot(data={"name": "x"}, user={"id": "dave"}, event="CREATE", method="POST", url="/users"),
    )


@pytest.mark.asyncio
async def test_notifier_is_noop_without_recipients() -> None:
    sent: list[EmailMessage] = []
    notify = create_email_notifier(send_email=sent.append)

    await notify("DEV", _error())

    assert sent == []


@pytest.mark.asyncio
async def test_notifier_is_noop_without_transport() -> None:
    notify = create_email_notifier(to=["ops@example.com"])

    await notify("DEV", _error())


@pytest.mark.asyncio
async def test_notifier_builds_and_sends_message() -> None:
    sent: list[EmailMessage] = []

    async def send(message: EmailMessage) -> None:
        sent.append(message)

    notify = create_email_notifier(send_email=send, to=["ops@example.com"], cc=["lead@example.com"])
    await notify("QA", _error())

    assert len(sent) == 1
    message = sent[0]
    assert message.subject == "Exception occurred in QA"
    assert message.to == ["ops@example.com"]
    assert message.cc == ["lead@example.com"]
    assert "VALIDATION_ERR" in message.body_html


@pytest.mark.asyncio
async def test_custom_body_builder_receives_internal() -> None:
    sent: list[EmailMessage] = []

    def builder(env, error, internal):
        return f"{env}:{error.code}:{internal['user']['id']}"

    notify = create_email_notifier(send_email=sent.append, body_builder=builder, to=["ops@example.com"])
    await notify("PROD", _error())

    assert sent[0].body_html == "PROD:VALIDATION_ERR:dave"


def test_email_body_contains_all_sections() -> None:
    body = build_error_email_body("PROD", _error())

    for heading in ("Error Summary", "Request Metadata", "Error Details", "Internal Metadata", "Stack Trace"):
        assert heading in body
    assert "<strong>PROD</strong>" in body
    assert "/users" in body
    assert "dave" in body
    assert "<link" not in body and "<style" not in body


def test_email_body_escapes_values() -> None:
    body = build_error_email_body("PROD", _error())

    assert "Email &lt;b&gt;is&lt;/b&gt; required" in body
    assert "<b>is</b>" not in body


def test_email_body_handles_missing_request_metadata() -> None:
    body = build_error_email_body("DEV", normalize_error({"foo": "bar"}))

    assert "UNKNOWN_ERR" in body
    assert "Unknown failure" in body


@pytest.mark.asyncio
async def test_http_transport_posts_message_as_json() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpEmailTransport("https://mail.example.com/send", headers={"X-Api-Key": "k"}, client=client)

    ok = await transport(EmailMessage(subject="s", body_html="<p>b</p>", to=["a@example.com"]))
    await client.aclose()

    assert ok is True
    assert captured[0].headers["X-Api-Key"] == "k"
    assert json.loads(captured[0].content) == {
        "subject": "s",
        "body_html": "<p>b</p>",
        "to": ["a@example.com"],
        "cc": [],
    }


@pytest.mark.asyncio
async def test_http_transport_logs_error_responses(caplog) -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500, text="relay down")))
    transport = HttpEmailTransport("https://mail.example.com/send", client=client)

    ok = await transport(EmailMessage(subject="s", body_html="b", to=["a@example.com"]))
    await client.aclose()

    assert ok is False
    assert "mail relay returned 500" in caplog.text
