from __future__ import annotations

import html
import re


def clean_text(text: str | None) -> str:
    """Clean name/type-style text from seed files.

    - Decode HTML entities (e.g. &reg; -> ®)
    - Strip HTML tags while keeping inner text
    - Normalize whitespace
    """

    if not text:
        return ""

    text = html.unescape(text)

    # Remove HTML tags (e.g. <b>Aspirin</b> -> Aspirin)
    text = re.sub(r"<[^>]+>", "", text)

    text = text.replace("\r\n", " ").replace("\n", " ")
    text = re.sub(r"\s+", " ", text)

    return text.strip()


def normalize_term(text: str | None) -> str:
    """Trim and lower-case a raw query; None and whitespace become ""."""
    if not text:
        return ""
    return text.strip().lower()
