"""Workbook I/O: decoding uploaded product sheets and generating the template."""

from .reader import DecodeError, decode_payload, decode_rows
from .template import generate_template, generate_template_base64

__all__ = [
    "DecodeError",
    "decode_payload",
    "decode_rows",
    "generate_template",
    "generate_template_base64",
]
