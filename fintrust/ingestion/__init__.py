"""Ingestion package."""

from fintrust.ingestion.parsers import (
    ParseError,
    parse_content,
    parse_delimited,
    parse_json,
)
from fintrust.ingestion.pipeline import IngestionPipeline

__all__ = [
    "IngestionPipeline",
    "ParseError",
    "parse_content",
    "parse_delimited",
    "parse_json",
]
