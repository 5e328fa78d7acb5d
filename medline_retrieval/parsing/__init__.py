"""Parsers that convert fetched record streams into bibliographic entries."""

from .base import RecordParser
from .medline import MedlineParser

__all__ = ["MedlineParser", "RecordParser"]
