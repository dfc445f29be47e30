"""JSON wire codec aware of protobuf messages."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import IO, Any

from google.protobuf import json_format
from google.protobuf.message import Message

JSON_MEDIA_TYPE = "application/json"


class WireFormatError(Exception):
    """Raised when a value cannot be encoded to or decoded from the wire."""


@dataclass(frozen=True)
class JsonFormat:
    """Encode/decode JSON, routing protobuf messages through protojson rules.

    Messages always print fields without presence and use numeric enum values,
    matching the schemas derived for them.
    """

    emit_unpopulated: bool = True
    numeric_enums: bool = True

    def encode(self, sink: IO[bytes], value: Any) -> None:
        if isinstance(value, Message):
            try:
                text = json_format.MessageToJson(
                    value,
                    always_print_fields_with_no_presence=self.emit_unpopulated,
                    use_integers_for_enums=self.numeric_enums,
                    indent=None,
                )
            except json_format.SerializeToJsonError as exc:
                raise WireFormatError(f"Failed to encode {type(value).__name__}: {exc}") from exc
            sink.write(text.encode("utf-8"))
            return
        try:
            text = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise WireFormatError(f"Failed to encode {type(value).__name__}: {exc}") from exc
        sink.write(f"{text}\n".encode())

    def decode(self, data: bytes, destination: type[Any] | None = None) -> Any:
        """Decode ``data``; protobuf message classes get a freshly parsed instance."""
        if isinstance(destination, type) and issubclass(destination, Message):
            message = destination()
            try:
                json_format.Parse(data, message)
            except json_format.ParseError as exc:
                raise WireFormatError(
                    f"Failed to decode {destination.__name__}: {exc}"
                ) from exc
            return message
        try:
            return json.loads(data)
        except json.JSONDecodeError as exc:
            raise WireFormatError(f"Invalid JSON payload: {exc}") from exc


JSON_FORMAT = JsonFormat()

WIRE_FORMATS: dict[str, JsonFormat] = {JSON_MEDIA_TYPE: JSON_FORMAT}
