"""Tests for the email notifier."""

import smtplib
from unittest.mock import MagicMock

from capsules.notifier import EmailNotifier


class TestEmailNotifier:

    def test_send_delivers_text_and_html(self, mailoutbox, settings):
        settings.DEFAULT_FROM_EMAIL = "capsules@example.com"

        assert EmailNotifier().send("ana@x.com", "Hello", "Hi Ana,\n\nYour capsule opened.") is True

        message = mailoutbox[0]
        assert message.to == ["ana@x.com"]
        assert message.from_email == "capsules@example.com"
        assert message.body == "Hi Ana,\n\nYour capsule opened."
        html, _ = message.alternatives[0]
        assert "<p>Hi Ana,</p>" in html

    def test_smtp_failure_is_reported_not_raised(self):
        connection = MagicMock()
        connection.send_messages.side_effect = smtplib.SMTPException("relay denied")

        assert EmailNotifier(connection=connection).send("ana@x.com", "Hello", "body") is False

    def test_socket_failure_is_reported_not_raised(self):
        connection = MagicMock()
        connection.send_messages.side_effect = ConnectionRefusedError()

        assert EmailNotifier(connection=connection).send("ana@x.com", "Hello", "body") is False

    def test_nothing_sent_is_failure(self):
        connection = MagicMock()
        connection.send_messages.return_value = 0

        assert EmailNotifier(connection=connection).send("ana@x.com", "Hello", "body") is False
