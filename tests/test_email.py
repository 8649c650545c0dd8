"""
Tests for the Email Service

Provider selection and the provider interface.
"""

import pytest

from bookstore.config import get_settings
from bookstore.services.email import (
    ConsoleEmailProvider,
    EmailProvider,
    SMTPEmailProvider,
    create_email_provider,
)


class TestEmailProviderInterface:
    def test_provider_without_send_email_cannot_be_created(self):
        class SilentProvider(EmailProvider):
            name = "silent"

        with pytest.raises(TypeError):
            SilentProvider(sender="no-reply@example.com")

    def test_base_interface_cannot_be_created(self):
        with pytest.raises(TypeError):
            EmailProvider(sender="no-reply@example.com")


class TestCreateEmailProvider:
    def test_console_backend(self):
        settings = get_settings().model_copy(update={"email_backend": "console"})

        provider = create_email_provider(settings)

        assert isinstance(provider, ConsoleEmailProvider)
        assert provider.sender == settings.email_sender

    def test_smtp_backend(self):
        settings = get_settings().model_copy(
            update={"email_backend": "smtp", "smtp_host": "mail.example.com", "smtp_port": 2525}
        )

        provider = create_email_provider(settings)

        assert isinstance(provider, SMTPEmailProvider)
        assert provider.describe()["smtp_host"] == "mail.example.com"
        assert provider.port == 2525

    def test_smtp_backend_requires_host(self):
        settings = get_settings().model_copy(update={"email_backend": "smtp", "smtp_host": None})

        with pytest.raises(ValueError):
            create_email_provider(settings)
