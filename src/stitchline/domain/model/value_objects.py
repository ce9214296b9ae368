"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from stitchline.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "CLP"


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Order totals and unit prices are stored as Decimal so sums over
    many line items never pick up floating-point noise.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __str__(self) -> str:
        return f"${self.amount:,.0f} {self.currency}"

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0"), currency)

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


_DATA_URI = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+);base64,", re.IGNORECASE)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "application/pdf": "pdf",
}


@dataclass(frozen=True)
class ImagePayload:
    """Raw file bytes plus their media type.

    Used for pet photos, design assets and evidence photos alike.
    """

    data: bytes
    media_type: str = "image/jpeg"

    def __post_init__(self) -> None:
        if not self.data:
            raise ValidationError("File is empty")

    @property
    def extension(self) -> str:
        return _EXTENSIONS.get(self.media_type.lower(), "bin")

    def to_base64(self) -> str:
        """Bare base64 text, without any data-URI prefix."""
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.media_type};base64,{self.to_base64()}"

    @staticmethod
    def from_data_uri(value: str) -> ImagePayload:
        """Decode ``data:<type>;base64,<payload>`` (prefix optional)."""
        match = _DATA_URI.match(value)
        media_type = match.group("media_type") if match else "image/jpeg"
        try:
            data = base64.b64decode(strip_data_uri(value), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Invalid base64 image payload") from exc
        return ImagePayload(data=data, media_type=media_type)


def strip_data_uri(value: str) -> str:
    """Drop a leading ``data:<type>;base64,`` header if present."""
    return _DATA_URI.sub("", value, count=1)
