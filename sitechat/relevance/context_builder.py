"""
Context Assembler
=================

Renders selected ContextItems into the single text block that is
interpolated into the language-model prompt, and derives source
attribution (url / domain / company) from material metadata.
"""

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..intelligence.models import StructuredData
from .models import ContextItem, SourceInfo

logger = logging.getLogger(__name__)

URL_METADATA_KEYS = ("url", "sourceUrl", "originalUrl")
COMPANY_METADATA_KEYS = ("siteName", "author")

_DOMAIN_FALLBACK = re.compile(r"(?:https?://)?(?:www\.)?([^/?]+)")
_COMMON_TLD = re.compile(r"\.(?:com|org|net|io|co|app|dev)$")
_SEPARATORS = re.compile(r"[-_]")


def _first_string(metadata: Dict[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _domain_from_url(url: str) -> Optional[str]:
    hostname = urlparse(url).hostname
    if not hostname:
        match = _DOMAIN_FALLBACK.match(url)
        hostname = match.group(1) if match else None
    if not hostname:
        return None
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname or None


def _company_from_domain(domain: str) -> str:
    label = _COMMON_TLD.sub("", domain).split(".")[0]
    words = _SEPARATORS.sub(" ", label).split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def extract_source_info(metadata: Optional[Dict[str, Any]]) -> Optional[SourceInfo]:
    """
    Source attribution from ingestion metadata.

    url:     first of url / sourceUrl / originalUrl
    domain:  hostname of that url without "www."
    company: siteName, else author, else derived from the domain
    """
    metadata = metadata or {}
    url = _first_string(metadata, URL_METADATA_KEYS)
    domain = _domain_from_url(url) if url else None

    company = _first_string(metadata, COMPANY_METADATA_KEYS)
    if not company and domain:
        company = _company_from_domain(domain) or None

    info = SourceInfo(url=url, domain=domain, company=company)
    return None if info.is_empty else info


def format_structured_data(structured: Optional[StructuredData]) -> List[str]:
    """Bullet lines for the "Structured Information" block."""
    if structured is None:
        return []

    lines = []
    for ranking in structured.rankings or []:
        lines.append(f"- Rank #{ranking.rank}: {ranking.product}")

    if structured.winner is not None:
        lines.append(f"- Top pick: {structured.winner.product}")
        if structured.winner.reason:
            lines.append(f"  Reason: {structured.winner.reason}")

    for rec in structured.recommendations or []:
        lines.append(f"- Recommended for {rec.context}: {rec.product}")

    for price in structured.pricing or []:
        amount = f"{price.price} {price.currency}" if price.currency else price.price
        lines.append(f"- Price: {price.product} - {amount}")

    return lines


def build_optimized_context(context_items: List[ContextItem]) -> str:
    """
    Render the selected materials as one prompt-ready block.

    Each item becomes a numbered entry (title, source, content type,
    relevance as a whole percentage, body) optionally followed by its
    structured facts. No items renders as the empty string.
    """
    if not context_items:
        return ""

    context = "\n\nTraining Materials:\n"

    for index, item in enumerate(context_items, 1):
        context += f"\n{index}. {item.title}"

        if item.source_info is not None:
            details = []
            if item.source_info.company:
                details.append(f"Company: {item.source_info.company}")
            if item.source_info.domain:
                details.append(f"Domain: {item.source_info.domain}")
            if details:
                context += f" [{' | '.join(details)}]"

        labels = []
        if item.content_type is not None:
            labels.append(f"Type: {item.content_type.value}")
        labels.append(f"Relevance: {item.relevance:.0%}")
        context += f" ({', '.join(labels)}):\n{item.content}\n"

        structured_lines = format_structured_data(item.structured_data)
        if structured_lines:
            context += "\nStructured Information:\n" + "\n".join(structured_lines) + "\n"

    logger.debug("Built context from %d items (%d chars)", len(context_items), len(context))
    return context
