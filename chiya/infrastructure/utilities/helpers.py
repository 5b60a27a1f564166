"""
Helper functions for customer entry URLs
"""

from typing import Optional, Tuple
from urllib.parse import parse_qs, quote, urlsplit


def build_table_url(base_url: str, shop_slug: str, table_number: int) -> str:
    """Customer entry URL printed as the table's QR code"""
    return f"{base_url.rstrip('/')}/menu/{quote(shop_slug)}?table={int(table_number)}"


def parse_entry_url(url: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a customer entry URL into (shop slug, raw table value).

    The table value is returned as given; validation happens at checkout.
    """
    parts = urlsplit(url)
    segments = [segment for segment in parts.path.split("/") if segment]
    slug = None
    if "menu" in segments:
        index = segments.index("menu")
        if index + 1 < len(segments):
            slug = segments[index + 1]

    table_values = parse_qs(parts.query).get("table")
    table = table_values[0] if table_values else None
    return slug, table
