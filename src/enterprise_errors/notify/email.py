import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import BaseModel, Field

from enterprise_errors.core.error import StructuredError
from enterprise_errors.notify.templates import build_error_email_body
from enterprise_errors.settings import EMAIL_SUBJECT_TEMPLATE


class EmailMessage(BaseModel):
    subject: str
    body_html: str
    to: list[str] = Field(default_factory=list)
    cc: list[str] = Field(default_factory=list)


SendEmail = Callable[[EmailMessage], Awaitable[Any] | Any]
BodyBuilder = Callable[[str, StructuredError, dict[str, Any]], str]
Notifier = Callable[[str, StructuredError], Awaitable[None]]


def create_email_notifier(
    send_email: SendEmail | None = None,
    body_builder: BodyBuilder | None = None,
    to: Sequence[str] = (),
    cc: Sequence[str] = (),
) -> Notifier:
    """Build an alert callable for ``handle_errors(notify=...)``.

    The transport is supplied by the caller (SMTP relay, HTTP mail API, ...);
    this layer only renders the message and hands it over once. Without a
    transport or TO recipients the notifier does nothing.
    """
    recipients = list(to)
    copies = list(cc)
    build = body_builder or build_error_email_body

    async def notify(env: str, error: StructuredError) -> None:
        if send_email is None or not recipients:
            return

        message = EmailMessage(
            subject=EMAIL_SUBJECT_TEMPLATE.format(env=env),
            body_html=build(env, error, error.internal),
            to=recipients,
            cc=copies,
        )
        result = send_email(message)
        if inspect.isawaitable(result):
            await result

    return notify
