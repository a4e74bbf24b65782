from enterprise_errors.notify.email import EmailMessage, Notifier, create_email_notifier
from enterprise_errors.notify.templates import build_error_email_body
from enterprise_errors.notify.transport import HttpEmailTransport

__all__ = [
    "EmailMessage",
    "Notifier",
    "create_email_notifier",
    "build_error_email_body",
    "HttpEmailTransport",
]
