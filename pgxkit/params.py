"""Conversion of application values into values the driver can encode."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence


class Valuer(ABC):
    """A value that supplies its own database representation."""

    @abstractmethod
    def value(self) -> Any:
        """Return the value to send to the database."""


def _is_encoder(arg: Any) -> bool:
    return callable(getattr(arg, "encode_binary", None)) or callable(
        getattr(arg, "encode_text", None)
    )


def call_valuer_value(valuer: Optional[Valuer]) -> Any:
    """Return ``valuer.value()``, treating a missing valuer as NULL."""
    if valuer is None:
        return None
    return valuer.value()


def convert_driver_valuers(args: Sequence[Any]) -> List[Any]:
    """Replace every valuer in ``args`` with its value; encoders are kept as they are."""
    return [
        call_valuer_value(arg) if isinstance(arg, Valuer) and not _is_encoder(arg) else arg
        for arg in args
    ]