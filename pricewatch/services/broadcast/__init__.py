"""Price fan-out across covered markets."""
from pricewatch.services.broadcast.broadcaster import broadcast_price

__all__ = ["broadcast_price"]
