"""확인 메일 SMTP 발송 (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
"""

from email.mime.text import MIMEText

import aiosmtplib

from mentoring.config import settings


async def send_email(to: str, subject: str, text: str) -> None:
    """플레인텍스트 메일 한 통을 발송합니다.

    Raises:
        aiosmtplib.SMTPException: SMTP 연결 또는 발송 실패 (Connection or delivery failure)
    """
    message = MIMEText(text, "plain", "utf-8")
    message["Subject"] = subject
    message["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    message["To"] = to

    await aiosmtplib.send(
        message,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=True,
    )
