"""Outbound email port used by the order notifier."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Deliver one plain-text message.

        Returns ``{"message_id", "status", "error"}`` where status is
        ``"sent"`` or ``"failed"``. Adapters report failures in the result
        rather than raising.
        """
        ...
