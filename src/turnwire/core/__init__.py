"""Core primitives for Turnwire."""

from turnwire.core.errors import ErrorKind, TurnwireError
from turnwire.core.execution import TurnCore
from turnwire.core.model_family import ModelFamily, family_for_model, find_family_for_model
from turnwire.core.telemetry import instrument_turnwire, span

__all__ = [
    "ErrorKind",
    "ModelFamily",
    "TurnCore",
    "TurnwireError",
    "family_for_model",
    "find_family_for_model",
    "instrument_turnwire",
    "span",
]
