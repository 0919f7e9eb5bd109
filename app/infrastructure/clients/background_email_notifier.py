from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading

from app.application.ports.email_port import EmailPort
from app.domain.exceptions import EmailDeliveryError


logger = logging.getLogger(__name__)


class BackgroundEmailNotifier(EmailPort):
    """Hands email delivery to a worker pool so callers never wait on it.

    At most ``max_pending`` emails are queued or in flight; past that a send is
    refused with ``EmailDeliveryError`` instead of growing the queue. Failures
    of accepted emails surface only in the log, and the delegate is expected to
    bound each call with its own timeout.
    """

    def __init__(self, *, delegate: EmailPort, max_workers: int = 2, max_pending: int = 100):
        self._delegate = delegate
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="email")
        self._slots = threading.BoundedSemaphore(max_pending)

    def send_verification_email(self, *, email: str, nickname: str, verification_token: str) -> None:
        if not self._slots.acquire(blocking=False):
            logger.warning("background_email_notifier: queue_full to=%s", email)
            raise EmailDeliveryError("Email queue is full.")
        try:
            future = self._executor.submit(
                self._delegate.send_verification_email,
                email=email,
                nickname=nickname,
                verification_token=verification_token,
            )
        except RuntimeError:
            self._slots.release()
            raise
        future.add_done_callback(lambda done: self._on_done(done, email=email))

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _on_done(self, future: Future, *, email: str) -> None:
        self._slots.release()
        _log_delivery_result(future, email=email)


def _log_delivery_result(future: Future, *, email: str) -> None:
    exc = future.exception()
    if exc is None:
        return
    if isinstance(exc, EmailDeliveryError):
        logger.warning("background_email_notifier: delivery_failed to=%s error=%s", email, exc)
        return
    logger.error(
        "background_email_notifier: unexpected_failure to=%s",
        email,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
