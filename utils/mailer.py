"""
Модуль: `utils/mailer.py`.
Назначение: Отправка писем (сброс пароля, подтверждение записи, рассылка участникам) через SMTP.

Без настроек SMTP письмо не отправляется, а факт отправки фиксируется в журнале.
Ошибка доставки никогда не поднимается наружу: вызывающий код получает False.
"""

import smtplib
import ssl
from email.message import EmailMessage

from flask import current_app

from utils.contact_normalizer import mask_email


def is_mail_configured() -> bool:
    cfg = current_app.config
    return bool(cfg.get("SMTP_HOST", "").strip() and cfg.get("SMTP_FROM", "").strip())


def send_email(recipient: str, subject: str, body: str) -> bool:
    """Отправляет одно письмо; возвращает True только при успешной доставке на SMTP."""
    if not is_mail_configured():
        current_app.logger.info(
            "SMTP не настроен, письмо «%s» для %s не отправлено",
            subject,
            mask_email(recipient),
        )
        return False

    cfg = current_app.config
    host = cfg["SMTP_HOST"].strip()
    port = int(cfg.get("SMTP_PORT", 587))
    use_ssl = bool(cfg.get("SMTP_USE_SSL", False))
    use_tls = bool(cfg.get("SMTP_USE_TLS", True))
    username = cfg.get("SMTP_USER", "").strip()
    password = cfg.get("SMTP_PASSWORD", "")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = cfg["SMTP_FROM"].strip()
    msg["To"] = recipient
    msg.set_content(body)

    try:
        if use_ssl:
            with smtplib.SMTP_SSL(host, port, timeout=10, context=ssl.create_default_context()) as client:
                if username:
                    client.login(username, password)
                client.send_message(msg)
        else:
            with smtplib.SMTP(host, port, timeout=10) as client:
                if use_tls:
                    client.starttls(context=ssl.create_default_context())
                if username:
                    client.login(username, password)
                client.send_message(msg)
        return True
    except (smtplib.SMTPException, OSError):
        current_app.logger.exception("Не удалось отправить письмо на %s", mask_email(recipient))
        return False
