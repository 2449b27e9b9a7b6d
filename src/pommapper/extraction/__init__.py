"""Document extraction: parse POMs and evaluate XPath rules."""

from pommapper.extraction.xpath import (
    create_parser,
    extract,
    extract_all,
    parse_document,
)

__all__ = ["create_parser", "extract", "extract_all", "parse_document"]
