"""이메일 서비스 — 수강 신청 확인 메일 발송.

Email Service — Delivery of enrollment confirmation mails.
Mails queued on a session are sent only after that session commits and are
dropped on rollback. Delivery runs as a background task so the caller never
waits on SMTP; failures are logged and not retried.
"""

import asyncio
import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from mentoring.utils.email import send_email

logger = logging.getLogger(__name__)

# Session.info 키 — Mails waiting for the session to commit
PENDING_MAILS_KEY: str = "pending_confirmation_mails"


def _send_pending_mails(session: Session) -> None:
    for to, subject, text in session.info.pop(PENDING_MAILS_KEY, []):
        email_service.send_enrollment_confirmation(to, subject, text)


def _discard_pending_mails(session: Session) -> None:
    session.info.pop(PENDING_MAILS_KEY, None)


class EmailService:
    """수강 신청 확인 메일 발송 서비스.

    Notification sender with a send(to, subject, body) contract and no
    delivery guarantee.
    """

    def __init__(self) -> None:
        # 진행 중인 발송 태스크 — Keeps references to in-flight deliveries
        self._pending: set[asyncio.Task[None]] = set()

    async def _deliver(self, to: str, subject: str, text: str) -> None:
        try:
            await send_email(to, subject, text)
        except Exception:
            logger.exception("Enrollment confirmation mail failed", extra={"to": to})
            return
        logger.info("Enrollment confirmation mail sent", extra={"to": to})

    def send_enrollment_confirmation(self, to: str, subject: str, text: str) -> None:
        """수강 신청 확인 메일 발송을 예약합니다.

        Schedule delivery of a confirmation mail on the running loop and
        return immediately.

        Args:
            to: 수신자 이메일 (Recipient address)
            subject: 제목 (Subject line)
            text: 본문 (Plain-text body)
        """
        task: asyncio.Task[None] = asyncio.create_task(self._deliver(to, subject, text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def send_after_commit(self, db: AsyncSession, to: str, subject: str, text: str) -> None:
        """세션 커밋 후 발송할 메일을 등록합니다. 롤백되면 버립니다.

        Queue a confirmation mail on ``db``; it is scheduled when the
        session commits and discarded when it rolls back.
        """
        session: Session = db.sync_session
        session.info.setdefault(PENDING_MAILS_KEY, []).append((to, subject, text))
        if not event.contains(session, "after_commit", _send_pending_mails):
            event.listen(session, "after_commit", _send_pending_mails)
            event.listen(session, "after_rollback", _discard_pending_mails)

    async def drain(self) -> None:
        """진행 중인 발송이 끝날 때까지 대기합니다 — Wait for in-flight deliveries (shutdown)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


# 싱글턴 인스턴스 — Singleton instance
email_service: EmailService = EmailService()
