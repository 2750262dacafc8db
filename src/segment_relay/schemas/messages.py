"""
Relay message schemas.

Contains Pydantic models for the inbound request body and the outbound
segment envelope posted to the destination.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


def format_timestamp(timestamp: datetime) -> str:
    """Render a datetime as RFC 3339, using 'Z' for UTC."""
    text = timestamp.isoformat()
    if timestamp.utcoffset() is not None and timestamp.utcoffset().total_seconds() == 0:
        text = text[: -len("+00:00")] + "Z"
    return text


class InboundMessage(BaseModel):
    """Schema for the body of a segmentation request.

    Attributes:
        text: Payload to segment; chunked on its UTF-8 encoding
        time: Grouping timestamp copied onto every outbound segment. Accepts
            ISO 8601 strings or a JSON number of milliseconds since the Unix
            epoch. Naive timestamps are taken as UTC.

    Example:
        >>> msg = InboundMessage.model_validate_json(
        ...     '{"text": "123456", "time": "2024-02-28T01:01:01Z"}'
        ... )
        >>> msg.payload
        b'123456'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    text: str = Field(
        ...,
        description="Payload text to be split into segments",
    )
    time: datetime = Field(
        ...,
        description="Timestamp shared by all segments derived from this message",
    )

    @field_validator("time", mode="before")
    @classmethod
    def parse_epoch_millis(cls, v: Any) -> Any:
        """Read numeric timestamps as milliseconds since the Unix epoch."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            try:
                return datetime.fromtimestamp(v / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as e:
                raise ValueError(f"epoch milliseconds out of range: {v}") from e
        return v

    @field_validator("time")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def payload(self) -> bytes:
        return self.text.encode("utf-8")


class Segment(BaseModel):
    """Schema for one outbound segment envelope.

    Wire form (compact JSON, keys in this order):
        {"data": "ABCD", "time": "2024-02-28T01:01:01Z", "number": 0, "count": 3}

    Attributes:
        data: Chunk contents (UTF-8 text or base64, see build_segments)
        time: Timestamp of the originating inbound message
        number: Zero-based position of this segment in its sequence
        count: Total number of segments produced from the inbound message
    """

    model_config = ConfigDict(frozen=True)

    data: str
    time: datetime
    number: int = Field(..., ge=0)
    count: int = Field(..., ge=1)

    @model_validator(mode="after")
    def validate_number_within_count(self) -> "Segment":
        if self.number >= self.count:
            raise ValueError(
                f"number ({self.number}) must be less than count ({self.count})"
            )
        return self

    @field_serializer("time")
    def serialize_time(self, timestamp: datetime) -> str:
        return format_timestamp(timestamp)
