"""Outbound mail seam for order confirmations and status notices."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Delivers one plain-text order email to a shopper.

    Adapters report delivery problems through the returned dict instead of
    raising, so a mail outage never blocks checkout.
    """

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Hand the message to the mail provider.

        ``to`` is the shopper's address, ``subject`` carries the order code and
        ``body`` is the rendered confirmation or status notice.

        Returns ``{"status": "sent", "message_id": ...}`` on success, or
        ``{"status": "failed", "message_id": None, "error": ...}``.
        """
