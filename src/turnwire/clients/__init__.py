"""Client helpers for Turnwire."""

from turnwire.clients.responses import TurnClient

__all__ = ["TurnClient"]
