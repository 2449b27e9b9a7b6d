"""XPath extraction over parsed POM documents.

A document is parsed once per version and every configured rule is
evaluated against that tree. Rule failures are returned as
:class:`RuleOutcome` values, never raised.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from lxml import etree

from pommapper.errors import (
    DocumentParseError,
    ExtractionSetupError,
    RuleError,
)
from pommapper.models.artifact import ExtractionRule
from pommapper.models.version import RuleOutcome

logger = logging.getLogger(__name__)


def create_parser() -> etree.XMLParser:
    """Build a hardened XML parser (no network, no entity expansion)."""
    try:
        return etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            huge_tree=False,
        )
    except (etree.LxmlError, TypeError) as exc:
        msg = f"Cannot create XML parser: {exc}"
        raise ExtractionSetupError(msg) from exc


def parse_document(
    content: bytes, parser: etree.XMLParser
) -> etree._ElementTree:
    """Parse POM bytes and strip namespaces.

    POMs declare a default namespace; stripping it lets plain
    expressions such as ``//properties/apiLevel`` match.
    """
    try:
        root = etree.fromstring(content, parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise DocumentParseError(str(exc)) from exc
    if root is None:
        raise DocumentParseError("Document is empty")

    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = etree.QName(element).localname
    etree.cleanup_namespaces(root)
    return etree.ElementTree(root)


def _to_string(result: object) -> str:
    """Convert an XPath result with XPath ``string()`` semantics."""
    if isinstance(result, bool):
        return "true" if result else "false"
    if isinstance(result, float):
        if math.isnan(result):
            return "NaN"
        if math.isinf(result):
            return "Infinity" if result > 0 else "-Infinity"
        if result.is_integer():
            return str(int(result))
        return repr(result)
    if isinstance(result, str):
        return str(result)
    if isinstance(result, list):
        if not result:
            return ""
        first = result[0]
        if isinstance(first, etree._Element):
            # Processing instructions and comments have no children
            if not isinstance(first.tag, str):
                return first.text or ""
            return "".join(first.itertext())
        return str(first)
    return str(result)


def extract(
    document: etree._ElementTree,
    rule: ExtractionRule,
    artifact_id: str,
) -> RuleOutcome:
    """Evaluate one rule; failures come back as a failed outcome."""
    try:
        expression = etree.XPath(rule.query)
        value = _to_string(expression(document))
    except (etree.XPathError, ValueError, TypeError) as exc:
        error = RuleError(rule.id, artifact_id, str(exc))
        logger.warning("%s", error)
        return RuleOutcome(rule_id=rule.id, error=str(exc))
    return RuleOutcome(rule_id=rule.id, value=value)


def extract_all(
    document: etree._ElementTree,
    rules: Iterable[ExtractionRule],
    artifact_id: str,
) -> list[RuleOutcome]:
    """Evaluate every rule against the same parsed document."""
    return [extract(document, rule, artifact_id) for rule in rules]
