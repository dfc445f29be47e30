"""Wire format exports."""

from .json_format import JSON_FORMAT, JSON_MEDIA_TYPE, WIRE_FORMATS, JsonFormat, WireFormatError

__all__ = [
    "JSON_FORMAT",
    "JSON_MEDIA_TYPE",
    "WIRE_FORMATS",
    "JsonFormat",
    "WireFormatError",
]
