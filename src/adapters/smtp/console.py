"""
Console reset mailer adapter - Password-recovery notifications.

Logs password-reset tokens to stdout for demo purposes. Stands in for an
SMTP sender used by the demo account directory.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleResetMailer:
    """
    Delivers password-reset notifications via console logging.

    For demo/development purposes - prints reset tokens to stdout.
    """

    def send_password_reset(self, email: str, token: str) -> None:
        """
        Log a password-reset token (simulates email delivery).

        The token is logged at INFO level to be visible in server logs.

        Args:
            email: Recipient email address (normalized by the form)
            token: Single-use reset token
        """
        logger.info("[PASSWORD RESET] Email: %s Token: %s", email, token)
