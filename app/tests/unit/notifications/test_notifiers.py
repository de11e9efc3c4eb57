"""Unit tests for the non-routed notifiers and the Notify composite."""

import threading
from unittest.mock import MagicMock

import pytest

from notifications.exceptions import ConfigurationError, NotificationError
from notifications.models import Channel, NotificationResult
from notifications.notifiers import (
    EmailNotifier,
    FcmNotifier,
    Notifier,
    Notify,
    SendGridNotifier,
    SlackNotifier,
    TwilioNotifier,
)
from notifications.notifiers.twilio import build_sms_body
from tests.factories.notifications import (
    DEFAULT_SENDERS,
    ScriptedTransport,
    make_provider_config,
    permanent,
)

WEBHOOK_URL = "https://hooks.slack.com/services/T00000000/B00000000/XXXXXXXX"


@pytest.mark.unit
class TestSlackNotifier:
    def test_requires_webhook_or_token(self):
        with pytest.raises(ConfigurationError, match="webhook URL or bot token"):
            SlackNotifier()

    def test_bot_token_requires_channels(self):
        with pytest.raises(ConfigurationError, match="At least one channel"):
            SlackNotifier(bot_token="xoxb-token")

    def test_webhook_url_is_trimmed(self):
        notifier = SlackNotifier(webhook_url=f"  {WEBHOOK_URL}  ")

        assert notifier.webhook_url == WEBHOOK_URL

    def test_send_via_webhook(self):
        transport = ScriptedTransport()
        notifier = SlackNotifier(
            webhook_url=WEBHOOK_URL, icon_emoji=":robot_face:", transport=transport
        )

        result = notifier.send("Alert", "System is experiencing high load")

        assert result.success is True
        assert result.channel == Channel.CHAT
        assert result.provider_id.startswith("slack-")
        assert result.message == "Slack notification sent to webhook"
        request = transport.requests[0]
        assert request.endpoint == WEBHOOK_URL
        assert request.payload["text"] == "*Alert*\nSystem is experiencing high load"
        assert request.payload["icon_emoji"] == ":robot_face:"
        assert "channel" not in request.payload

    def test_send_to_each_channel_with_bot_token(self):
        transport = ScriptedTransport()
        notifier = SlackNotifier(
            bot_token="xoxb-token", channels=["#alerts", "@oncall"], transport=transport
        )

        result = notifier.send("Alert", "Disk full")

        assert result.message == "Slack notification sent to 2 channels"
        assert [r.payload["channel"] for r in transport.requests] == ["#alerts", "@oncall"]

    def test_plain_text_without_markdown(self):
        transport = ScriptedTransport()
        notifier = SlackNotifier(
            webhook_url=WEBHOOK_URL, markdown=False, transport=transport
        )

        notifier.send("Alert", "Body")

        assert transport.requests[0].payload["text"] == "Alert\nBody"

    def test_null_subject_or_message(self):
        notifier = SlackNotifier(webhook_url=WEBHOOK_URL, transport=ScriptedTransport())

        assert notifier.send(None, "Message body").success is True
        assert notifier.send("Subject", None).success is True

    def test_blank_webhook_fails_at_send(self):
        notifier = SlackNotifier(webhook_url="", transport=ScriptedTransport())

        with pytest.raises(NotificationError, match="No webhook URL or channels"):
            notifier.send("Alert", "Body")

    def test_delivery_failure_raises(self):
        notifier = SlackNotifier(
            webhook_url=WEBHOOK_URL, transport=ScriptedTransport([permanent("invalid_token")])
        )

        with pytest.raises(NotificationError, match="Failed to send Slack notification"):
            notifier.send("Alert", "Body")

    def test_transport_exception_is_wrapped(self):
        error = ConnectionError("refused")
        notifier = SlackNotifier(
            webhook_url=WEBHOOK_URL, transport=ScriptedTransport([error])
        )

        with pytest.raises(NotificationError) as exc_info:
            notifier.send("Alert", "Body")

        assert exc_info.value.__cause__ is error

    def test_provider_ids_are_unique(self):
        notifier = SlackNotifier(webhook_url=WEBHOOK_URL, transport=ScriptedTransport())

        ids = {notifier.send("Alert", str(i)).provider_id for i in range(3)}

        assert len(ids) == 3


@pytest.mark.unit
class TestFcmNotifier:
    @pytest.mark.parametrize("project_id", ["", "  ", None])
    def test_requires_project_id(self, project_id):
        with pytest.raises(ConfigurationError, match="Project ID is required"):
            FcmNotifier(project_id=project_id)

    def test_requires_a_target_at_send(self):
        notifier = FcmNotifier(project_id="demo", transport=ScriptedTransport())

        with pytest.raises(NotificationError, match="No device tokens, topic, or condition"):
            notifier.send("Title", "Body")

    def test_tokens_win_over_topic_and_condition(self):
        transport = ScriptedTransport()
        notifier = FcmNotifier(
            project_id="demo",
            device_tokens=["token-a", "token-b"],
            topic="news",
            condition="'news' in topics",
            transport=transport,
        )

        result = notifier.send("Title", "Body")

        payload = transport.requests[0].payload
        assert payload["tokens"] == ["token-a", "token-b"]
        assert "topic" not in payload
        assert result.message == "Push notification sent to 2 devices via FCM"

    def test_topic_wins_over_condition(self):
        transport = ScriptedTransport()
        notifier = FcmNotifier(
            project_id="demo",
            topic="news",
            condition="'news' in topics",
            transport=transport,
        )

        result = notifier.send("Title", "Body")

        assert transport.requests[0].payload["topic"] == "news"
        assert result.message == "Push notification sent to topic 'news' via FCM"

    def test_condition_target(self):
        transport = ScriptedTransport()
        notifier = FcmNotifier(
            project_id="demo", condition="'sports' in topics", transport=transport
        )

        notifier.send(None, None)

        payload = transport.requests[0].payload
        assert payload["condition"] == "'sports' in topics"
        assert payload["notification"] == {"title": "", "body": ""}

    def test_success_result(self):
        transport = ScriptedTransport()
        notifier = FcmNotifier(
            project_id="demo", topic="news", data={"k": "v"}, transport=transport
        )

        result = notifier.send("Title", "Body")

        assert result.provider_id.startswith("fcm-")
        assert result.channel == Channel.PUSH
        assert transport.requests[0].endpoint == "projects/demo/messages:send"
        assert transport.requests[0].payload["data"] == {"k": "v"}

    def test_delivery_failure_raises(self):
        notifier = FcmNotifier(
            project_id="demo", topic="news", transport=ScriptedTransport([permanent()])
        )

        with pytest.raises(NotificationError, match="via FCM"):
            notifier.send("Title", "Body")


@pytest.mark.unit
class TestBuildSmsBody:
    @pytest.mark.parametrize(
        "subject, message, expected",
        [
            ("Alert", "Disk full", "Alert\nDisk full"),
            (None, "Disk full", "Disk full"),
            ("  ", "Disk full", "Disk full"),
            ("Alert", None, "Alert"),
            ("Alert", " ", "Alert"),
            (None, None, ""),
        ],
    )
    def test_joins_subject_and_message(self, subject, message, expected):
        assert build_sms_body(subject, message) == expected


@pytest.mark.unit
class TestTwilioNotifier:
    @pytest.mark.parametrize(
        "overrides, error",
        [
            ({"account_sid": ""}, "Account SID is required"),
            ({"auth_token": None}, "Auth Token is required"),
            ({"from_phone_number": " "}, "From phone number is required"),
        ],
    )
    def test_constructor_validation(self, overrides, error):
        values = {
            "account_sid": "AC123",
            "auth_token": "secret",
            "from_phone_number": "+15550001111",
        }
        values.update(overrides)

        with pytest.raises(ConfigurationError, match=error):
            TwilioNotifier(**values)

    def test_requires_recipients_at_send(self):
        notifier = TwilioNotifier("AC123", "secret", "+15550001111")

        with pytest.raises(NotificationError, match="No recipients configured for Twilio"):
            notifier.send("Alert", "Body")

    def test_sends_one_message_per_recipient(self):
        transport = ScriptedTransport()
        notifier = TwilioNotifier(
            "AC123",
            "secret",
            "+15550001111",
            to_phone_numbers=[" +15550002222 ", "", "+15550003333"],
            transport=transport,
        )

        result = notifier.send("Alert", "Disk full")

        assert result.success is True
        assert result.channel == Channel.SMS
        assert result.provider_id.startswith("twilio-")
        assert result.message == "SMS sent to 2 recipients via Twilio"
        assert [r.payload["to"] for r in transport.requests] == [
            "+15550002222",
            "+15550003333",
        ]
        assert transport.requests[0].payload["body"] == "Alert\nDisk full"
        assert transport.requests[0].endpoint == "Accounts/AC123/Messages.json"

    def test_add_to_skips_blank_numbers(self):
        notifier = TwilioNotifier("AC123", "secret", "+15550001111")

        notifier.add_to("+15550002222", "  ", None)

        assert notifier.to_phone_numbers == ["+15550002222"]

    def test_delivery_failure_raises(self):
        notifier = TwilioNotifier(
            "AC123",
            "secret",
            "+15550001111",
            to_phone_numbers=["+15550002222"],
            transport=ScriptedTransport([permanent("invalid number")]),
        )

        with pytest.raises(NotificationError, match="Failed to send SMS via Twilio"):
            notifier.send("Alert", "Body")

    def test_from_config(self):
        config = make_provider_config(
            Channel.SMS,
            api_key="AC123",
            api_secret="secret",
            properties={"receivers": "+15550002222, +15550003333"},
        )

        notifier = TwilioNotifier.from_config(config)

        assert notifier.account_sid == "AC123"
        assert notifier.auth_token == "secret"
        assert notifier.from_phone_number == DEFAULT_SENDERS[Channel.SMS]
        assert notifier.to_phone_numbers == ["+15550002222", "+15550003333"]

    def test_from_config_requires_auth_token(self):
        config = make_provider_config(Channel.SMS)

        with pytest.raises(ConfigurationError, match="Auth Token is required"):
            TwilioNotifier.from_config(config)


@pytest.mark.unit
class TestSendGridNotifier:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="SendGrid API key is required"):
            SendGridNotifier(api_key="", from_address="noreply@example.com")

    def test_requires_from_address(self):
        with pytest.raises(ConfigurationError, match="From address is required"):
            SendGridNotifier(api_key="SG.key", from_address=None)

    def test_requires_recipients_at_send(self):
        notifier = SendGridNotifier(api_key="SG.key", from_address="noreply@example.com")

        with pytest.raises(NotificationError, match="No recipients configured for SendGrid"):
            notifier.send("Welcome", "Hello")

    def test_send(self):
        transport = ScriptedTransport()
        notifier = SendGridNotifier(
            api_key="SG.key",
            from_address="noreply@example.com",
            from_name="Example",
            to_addresses=["a@example.com", "b@example.com"],
            cc_addresses=["c@example.com"],
            categories=["onboarding"],
            transport=transport,
        )

        result = notifier.send("Welcome", "Hello")

        assert result.channel == Channel.EMAIL
        assert result.provider_id.startswith("sendgrid-")
        assert result.message == "Email sent to 2 recipients via SendGrid"
        payload = transport.requests[0].payload
        assert payload["from"] == {"email": "noreply@example.com", "name": "Example"}
        assert payload["to"] == ["a@example.com", "b@example.com"]
        assert payload["cc"] == ["c@example.com"]
        assert payload["content"] == "Hello"
        assert "bcc" not in payload

    def test_template_replaces_content(self):
        transport = ScriptedTransport()
        notifier = SendGridNotifier(
            api_key="SG.key",
            from_address="noreply@example.com",
            to_addresses=["a@example.com"],
            template_id="d-123",
            template_data={"name": "Ada"},
            transport=transport,
        )

        notifier.send("Welcome", "ignored")

        payload = transport.requests[0].payload
        assert payload["template_id"] == "d-123"
        assert payload["template_data"] == {"name": "Ada"}
        assert "content" not in payload

    def test_transport_exception_is_wrapped(self):
        error = TimeoutError("slow")
        notifier = SendGridNotifier(
            api_key="SG.key",
            from_address="noreply@example.com",
            to_addresses=["a@example.com"],
            transport=ScriptedTransport([error]),
        )

        with pytest.raises(NotificationError, match="via SendGrid") as exc_info:
            notifier.send("Welcome", "Hello")

        assert exc_info.value.__cause__ is error

    def test_from_config(self):
        config = make_provider_config(
            Channel.EMAIL, properties={"receivers": ["a@example.com", " "]}
        )

        notifier = SendGridNotifier.from_config(config)

        assert notifier.from_address == DEFAULT_SENDERS[Channel.EMAIL]
        assert notifier.to_addresses == ["a@example.com"]


@pytest.mark.unit
class TestEmailNotifier:
    def test_requires_from_address(self):
        with pytest.raises(ConfigurationError, match="From address is required"):
            EmailNotifier(from_address="")

    def test_requires_smtp_host(self):
        with pytest.raises(ConfigurationError, match="SMTP host is required"):
            EmailNotifier(from_address="noreply@example.com", smtp_host=" ")

    def test_requires_receivers_at_send(self):
        notifier = EmailNotifier(from_address="noreply@example.com")

        with pytest.raises(NotificationError, match="No receivers configured"):
            notifier.send("Report", "Body")

    def test_send(self):
        transport = ScriptedTransport()
        notifier = EmailNotifier(
            from_address="noreply@example.com",
            to_addresses=["ops@example.com"],
            smtp_host="mail.example.com",
            use_plain_text=True,
            transport=transport,
        )

        result = notifier.send("Report", "All green")

        assert result.provider_id.startswith("smtp-")
        assert result.message == "Email sent to 1 recipients via SMTP"
        request = transport.requests[0]
        assert request.endpoint == "smtps://mail.example.com:587"
        assert request.payload["content_type"] == "text/plain"
        assert request.payload["body"] == "All green"

    def test_from_config(self):
        config = make_provider_config(
            Channel.EMAIL,
            properties={
                "smtp_host": "mail.example.com",
                "smtp_port": "2525",
                "username": "relay",
                "receivers": "ops@example.com,dev@example.com",
            },
        )

        notifier = EmailNotifier.from_config(config)

        assert notifier.smtp_host == "mail.example.com"
        assert notifier.smtp_port == 2525
        assert notifier.username == "relay"
        assert notifier.to_addresses == ["ops@example.com", "dev@example.com"]

    def test_from_config_rejects_bad_port(self):
        config = make_provider_config(Channel.EMAIL, properties={"smtp_port": "smtp"})

        with pytest.raises(ConfigurationError, match="smtp_port must be an integer"):
            EmailNotifier.from_config(config)


def make_notifier(name="mock", result=None, error=None):
    notifier = MagicMock(spec=Notifier)
    notifier.notifier_name = name
    if error is not None:
        notifier.send.side_effect = error
    else:
        notifier.send.return_value = result or NotificationResult.succeeded(
            None, None, provider_id=f"{name}-1"
        )
    return notifier


@pytest.mark.unit
class TestNotify:
    def test_disabled_returns_disabled_result(self):
        notifier = make_notifier()
        notify = Notify(notifier).disable()

        result = notify.send("Subject", "Body")

        assert result.success is True
        assert result.message == "Notifications are disabled"
        notifier.send.assert_not_called()

    def test_enable_after_disable(self):
        notify = Notify(make_notifier(), disabled=True)

        assert notify.is_disabled is True
        notify.enable()

        assert notify.is_disabled is False
        assert notify.send("Subject", "Body").metadata["succeeded"] == 1

    def test_no_notifiers(self):
        result = Notify().send("Subject", "Body")

        assert result.success is True
        assert result.message == "No notifiers configured"

    def test_use_ignores_none(self):
        notify = Notify().use(make_notifier("a"), None, make_notifier("b"))

        assert notify.notifier_count == 2

    def test_all_succeed(self):
        first, second = make_notifier("slack"), make_notifier("fcm")

        result = Notify(first, second).send("Subject", "Body")

        assert result.success is True
        assert result.message == "Sent to 2/2 notifiers"
        assert sorted(result.metadata["provider_ids"]) == ["fcm-1", "slack-1"]
        first.send.assert_called_once_with("Subject", "Body")
        second.send.assert_called_once_with("Subject", "Body")

    def test_partial_failure(self):
        notify = Notify(
            make_notifier("slack"),
            make_notifier("fcm", error=NotificationError("fcm down")),
        )

        result = notify.send("Subject", "Body")

        assert result.success is False
        assert result.message == "Sent to 1/2 notifiers"
        assert result.metadata["failed"] == 1

    def test_all_fail_raises_first_notification_error(self):
        first_error = NotificationError("slack down")
        notify = Notify(
            make_notifier("slack", error=first_error),
            make_notifier("fcm", error=NotificationError("fcm down")),
        )

        with pytest.raises(NotificationError) as exc_info:
            notify.send("Subject", "Body")

        assert exc_info.value is first_error

    def test_all_fail_wraps_other_errors(self):
        error = RuntimeError("boom")
        notify = Notify(make_notifier("custom", error=error))

        with pytest.raises(NotificationError, match="All notifiers failed") as exc_info:
            notify.send("Subject", "Body")

        assert exc_info.value.__cause__ is error

    def test_sends_in_parallel(self):
        """Every notifier is running before any of them returns."""
        barrier = threading.Barrier(3, timeout=5)

        def _send(subject, message):
            barrier.wait()
            return NotificationResult.succeeded(None, None, provider_id="p")

        notifiers = []
        for name in ["a", "b", "c"]:
            notifier = make_notifier(name)
            notifier.send.side_effect = _send
            notifiers.append(notifier)

        result = Notify(*notifiers).send("Subject", "Body")

        assert result.metadata["succeeded"] == 3

    def test_fans_out_to_email_and_sms(self):
        sms_transport = ScriptedTransport()
        email_transport = ScriptedTransport()
        notify = Notify(
            TwilioNotifier(
                "AC123",
                "secret",
                "+15550001111",
                to_phone_numbers=["+15550002222"],
                transport=sms_transport,
            ),
            SendGridNotifier(
                api_key="SG.key",
                from_address="noreply@example.com",
                to_addresses=["ops@example.com"],
                transport=email_transport,
            ),
        )

        result = notify.send("Outage", "API latency is elevated")

        assert result.success is True
        assert result.metadata["succeeded"] == 2
        assert sms_transport.requests[0].payload["body"] == "Outage\nAPI latency is elevated"
        assert email_transport.requests[0].payload["subject"] == "Outage"
