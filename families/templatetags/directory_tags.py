import re

from django import template
from django.utils.html import escape
from django.utils.safestring import mark_safe

register = template.Library()


@register.filter
def highlight(text, query):
    """Wrap case-insensitive occurrences of `query` in <mark>."""
    text = "" if text is None else str(text)
    if not query:
        return text

    pattern = re.compile(f"({re.escape(str(query))})", re.IGNORECASE)
    parts = pattern.split(text)
    html = "".join(
        f"<mark>{escape(part)}</mark>" if index % 2 else escape(part)
        for index, part in enumerate(parts)
    )
    return mark_safe(html)


@register.filter
def yes_no(value):
    return "Yes" if value else "No"


@register.filter
def or_na(value):
    return value if value not in (None, "") else "N/A"
