from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

_DATETIME = TypeAdapter(datetime)
_EPOCH_RE = re.compile(r"^\s*[+-]?\d+(\.\d+)?\s*$")


def _check_timestamp(value: str) -> str:
    """Accept ISO-8601 text and return it untouched.

    pydantic parses the text only to prove it is a timestamp; the caller's
    spelling (precision, offset) is what gets echoed back.
    """
    if _EPOCH_RE.match(value):
        raise ValueError("timestamp must be ISO-8601, not epoch seconds")
    try:
        _DATETIME.validate_python(value)
    except ValidationError as e:
        raise ValueError(f"invalid ISO-8601 timestamp: {value!r}") from e
    return value


Timestamp = Annotated[str, AfterValidator(_check_timestamp)]


class PaymentRequest(BaseModel):
    """Inbound request for a payment token.

    Types are strict: ids and interval bounds must be JSON strings, the
    bounds ISO-8601. The interval is passed through unchecked.
    """
    model_config = ConfigDict(strict=True, populate_by_name=True)

    service_id: str
    method: str
    from_: Timestamp = Field(alias="from")
    to: Timestamp

    @property
    def period(self) -> tuple[datetime, datetime]:
        """The interval bounds as parsed datetimes."""
        return _DATETIME.validate_python(self.from_), _DATETIME.validate_python(self.to)


class PaymentResponse(BaseModel):
    """A freshly issued token with the interval and method it was issued for."""
    model_config = ConfigDict(populate_by_name=True)

    token: str
    from_: str = Field(alias="from")
    to: str
    method: str
