"""Abstract delivery interface for chat transports."""

from abc import ABC, abstractmethod


class Deliverer(ABC):
    """Sends reminder text to a chat.

    Implementations report failure by returning False rather than raising,
    so the dispatcher can leave the reminder due for the next tick.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Transport identifier (e.g., 'telegram')."""
        ...

    @abstractmethod
    async def deliver(self, chat_id: str, text: str) -> bool:
        """Send ``text`` to ``chat_id``.

        Returns:
            True if the transport accepted the message.
        """
        ...

    async def close(self) -> None:  # noqa: B027
        """Release transport resources."""
