from __future__ import annotations

import re
from datetime import date


_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def generate_slug(text: str) -> str:
    slug = _SLUG_STRIP.sub("", text.lower())
    slug = _SLUG_SEPARATORS.sub("-", slug)
    return slug.strip("-")


# 解析 YYYY-MM-DD（允许带时间部分）
def parse_event_date(value: str) -> date:
    return date.fromisoformat(value.strip()[:10])


def year_from_date(value: str) -> int:
    return parse_event_date(value).year


# 例：1919-06-28 -> June 28, 1919
def format_event_date(value: str) -> str:
    try:
        parsed = parse_event_date(value)
    except ValueError:
        return value
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def count_words(content: str | None) -> int:
    if not content:
        return 0
    return len(content.split())
