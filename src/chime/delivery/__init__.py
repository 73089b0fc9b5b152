"""Delivery transports for reminder messages."""

from chime.delivery.base import Deliverer
from chime.delivery.telegram import TelegramDeliverer

__all__ = ["Deliverer", "TelegramDeliverer"]
