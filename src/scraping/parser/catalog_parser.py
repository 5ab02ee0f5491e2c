"""Parser for HTML service catalogs listing "name $ amount" fragments."""

import re
from dataclasses import dataclass

from selectolax.parser import HTMLParser

from src.scraping.parser.normalize import normalize_service_name
from src.utils.currency import parse_amount


@dataclass
class CatalogEntry:
    service_name: str
    price: float


class CatalogPriceParser:
    """Finds service/price pairs in free-form catalog markup.

    Every element whose full text (children included) contains a currency
    marker is checked; the first name-like fragment (3-100 chars) directly
    followed by an amount wins. Ancestors repeat their descendants' matches,
    so entries are unique on (service_name, price) in document order.
    """

    CURRENCY_MARKER = "$"
    PRICE_PATTERN = re.compile(r"(.{3,100}?)\s*\$\s*([\d.,]+)")
    SKIP_TAGS = ["script", "style", "noscript", "template"]

    def __init__(self, html: str):
        self.tree = HTMLParser(html)
        self.tree.strip_tags(self.SKIP_TAGS)

    def extract_entries(self) -> list[CatalogEntry]:
        entries: list[CatalogEntry] = []
        seen: set[tuple[str, float]] = set()
        for text in self._currency_texts():
            match = self.PRICE_PATTERN.search(text)
            if not match:
                continue
            service_name = normalize_service_name(match.group(1))
            price = parse_amount(match.group(2))
            if not service_name or price <= 0 or (service_name, price) in seen:
                continue
            seen.add((service_name, price))
            entries.append(CatalogEntry(service_name=service_name, price=price))
        return entries

    def _currency_texts(self) -> list[str]:
        texts: list[str] = []
        root = self.tree.body or self.tree.root
        if root is None:
            return texts
        for node in root.css("*"):
            text = node.text(deep=True, separator=" ").strip()
            if self.CURRENCY_MARKER in text:
                texts.append(text)
        return texts
