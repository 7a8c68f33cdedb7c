from abc import ABC, abstractmethod


class INotifier(ABC):
    """Outgoing email interface - application layer"""

    @abstractmethod
    async def send_email(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text email. Raises on transport failure."""
        pass
