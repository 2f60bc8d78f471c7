import logging

logger = logging.getLogger(__name__)


class LoggingNotificationSender:
    """Stands in for the SMS/email gateway by writing the code to the log."""

    async def send_code(self, target: str, code: str, purpose: str) -> None:
        logger.info("OTP generated target=%s purpose=%s code=%s", target, purpose, code)
