from datetime import timedelta
from unittest import mock

from services.mailer import Mailer, format_duration


def make_mailer(**overrides):
    options = dict(host="smtp.example.com", port=587, username="", password="", sender="Greenlight <no-reply@example.com>")
    options.update(overrides)
    return Mailer(**options)


def test_render_welcome_template():
    rendered = make_mailer().render(
        "user_welcome.html",
        {"name": "Alice", "user_id": 42, "activation_token": "T" * 43, "activation_ttl": "3 days"},
    )

    assert rendered.subject == "Welcome to Greenlight!"
    assert "your user ID number is 42" in rendered.plain_body
    assert "T" * 43 in rendered.plain_body
    assert "<p>Hi Alice,</p>" in rendered.html_body


def test_html_body_is_escaped():
    rendered = make_mailer().render(
        "token_activation.html",
        {"name": "<script>", "activation_token": "t", "activation_ttl": "1 hour"},
    )

    assert "<script>" not in rendered.html_body
    assert "&lt;script&gt;" in rendered.html_body


def test_send_builds_multipart_message():
    mailer = make_mailer(username="user", password="secret")

    with mock.patch("services.mailer.smtplib.SMTP") as smtp_cls:
        mailer.send(
            "alice@example.com",
            "token_activation.html",
            {"name": "Alice", "activation_token": "t", "activation_ttl": "3 days"},
        )

    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=5.0)
    smtp = smtp_cls.return_value.__enter__.return_value
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("user", "secret")

    message = smtp.send_message.call_args.args[0]
    assert message["To"] == "alice@example.com"
    assert message["Subject"] == "Activate your Greenlight account"
    assert message.is_multipart()


def test_format_duration():
    assert format_duration(timedelta(days=3)) == "3 days"
    assert format_duration(timedelta(hours=24)) == "1 day"
    assert format_duration(timedelta(hours=5)) == "5 hours"
    assert format_duration(timedelta(minutes=1)) == "1 minute"
