from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Protocol, Sequence

import resend

from ..config import DEFAULT_EMAIL_CONFIG, EmailConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailPayload:
    to: str
    subject: str
    html: str
    text: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    from_email: str | None = None


class EmailError(Exception):
    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class NoEmailProviderError(EmailError):
    def __init__(self) -> None:
        super().__init__("No email provider configured", provider="none")


class EmailDeliveryError(EmailError):
    """Every configured provider failed.

    ``errors`` holds ``(provider_name, exception)`` pairs in the order the
    providers were tried; ``provider`` is the last one.
    """

    def __init__(self, errors: list[tuple[str, Exception]]) -> None:
        super().__init__(
            "Email delivery failed: "
            + "; ".join(f"{name}: {exc}" for name, exc in errors),
            provider=errors[-1][0] if errors else None,
        )
        self.errors = errors


class EmailProvider(Protocol):
    name: str

    def send(self, payload: EmailPayload) -> str | None: ...


class ResendProvider:
    name = "resend"

    def __init__(self, api_key: str, from_email: str) -> None:
        self.from_email = from_email
        resend.api_key = api_key

    def send(self, payload: EmailPayload) -> str | None:
        params: dict = {
            "from": payload.from_email or self.from_email,
            "to": [payload.to],
            "subject": payload.subject,
            "html": payload.html,
        }
        if payload.text:
            params["text"] = payload.text
        if payload.headers:
            params["headers"] = dict(payload.headers)

        response = resend.Emails.send(params)
        return response.get("id") if response else None


class SmtpProvider:
    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_email: str,
        secure: bool = False,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.secure = secure
        self.timeout = timeout

    def _message(self, payload: EmailPayload) -> EmailMessage:
        message = EmailMessage()
        message["From"] = payload.from_email or self.from_email
        message["To"] = payload.to
        message["Subject"] = payload.subject
        for name, value in payload.headers.items():
            message[name] = value
        message.set_content(payload.text or "")
        message.add_alternative(payload.html, subtype="html")
        return message

    def send(self, payload: EmailPayload) -> str | None:
        message = self._message(payload)
        if self.secure:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        with server:
            if not self.secure:
                server.starttls()
            server.login(self.user, self.password)
            server.send_message(message)
        return message.get("Message-ID")


def providers_from_config(config: EmailConfig = DEFAULT_EMAIL_CONFIG) -> list[EmailProvider]:
    """Configured providers in the order they are tried."""
    providers: list[EmailProvider] = []
    if config.resend_configured:
        providers.append(ResendProvider(config.resend_api_key, config.resend_from_email))
    if config.smtp_configured:
        providers.append(SmtpProvider(
            host=config.smtp_host,
            port=config.smtp_port,
            user=config.smtp_user,
            password=config.smtp_password,
            from_email=config.smtp_from_email,
            secure=config.smtp_secure,
        ))
    return providers


def send_email(
    payload: EmailPayload, providers: Sequence[EmailProvider] | None = None
) -> str:
    """Send *payload* with the first provider that succeeds.

    Returns the name of the provider that delivered the message.
    """
    if providers is None:
        providers = providers_from_config()
    if not providers:
        raise NoEmailProviderError()

    errors: list[tuple[str, Exception]] = []
    for provider in providers:
        try:
            message_id = provider.send(payload)
        except Exception as exc:
            logger.warning("%s email delivery failed", provider.name, exc_info=True)
            errors.append((provider.name, exc))
            continue
        logger.info("Email sent via %s: %s", provider.name, message_id or "unknown")
        return provider.name

    raise EmailDeliveryError(errors) from errors[-1][1]
