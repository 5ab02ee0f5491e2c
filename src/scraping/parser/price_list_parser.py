"""Parser for the text of a PDF price list.

The extracted text is a sequence of lines where section headers end with a
colon and each service is a name line followed by a "$ <amount>" line::

    CORTES Y PEINADOS:
    Corte Dama
    $ 15000
"""

import re
from dataclasses import dataclass

from src.models.competitor import ServiceCategory
from src.scraping.parser.normalize import normalize_service_name
from src.utils.currency import parse_amount

# Header fragments of this document, matched by substring in order
SECTION_CATEGORIES: list[tuple[str, ServiceCategory]] = [
    ("CORTE", ServiceCategory.HAIRCUT),
    ("PEINADOS", ServiceCategory.HAIRCUT),
    ("TRATAMIENTOS", ServiceCategory.TREATMENTS),
    ("LAVADOS", ServiceCategory.OTHER),
    ("EXTENSIONES", ServiceCategory.OTHER),
    ("COLORACIÓN", ServiceCategory.COLOR),
    ("COLORACION", ServiceCategory.COLOR),
    ("DECOLORACIÓN", ServiceCategory.COLOR),
    ("DECOLORACION", ServiceCategory.COLOR),
    ("MAQUILLAJE", ServiceCategory.OTHER),
]

_HEADER_PATTERN = re.compile(r"^([^:]+):$")
_PRICE_LINE_PATTERN = re.compile(r"^\$\s*([\d.,]+)$")


@dataclass
class PriceListEntry:
    service_name: str
    price: float
    category: ServiceCategory


def split_lines(text: str) -> list[str]:
    """Split extracted text into stripped, non-empty lines."""
    return [line.strip() for line in re.split(r"\r?\n", text) if line.strip()]


def category_for_header(header: str) -> ServiceCategory:
    upper = header.upper()
    for fragment, category in SECTION_CATEGORIES:
        if fragment in upper:
            return category
    return ServiceCategory.OTHER


def parse_price_list(lines: list[str]) -> list[PriceListEntry]:
    entries: list[PriceListEntry] = []
    category = ServiceCategory.OTHER

    i = 0
    while i < len(lines) - 1:
        line = lines[i]

        if line.endswith(":") and len(line) > 3:
            header = _HEADER_PATTERN.match(line)
            if header:
                category = category_for_header(header.group(1).strip())
                i += 1
                continue

        price_match = _PRICE_LINE_PATTERN.match(lines[i + 1])
        if price_match and "$" not in line and ":" not in line and len(line) > 2:
            service_name = normalize_service_name(line)
            price = parse_amount(price_match.group(1))
            if service_name and price > 0:
                entries.append(
                    PriceListEntry(service_name=service_name, price=price, category=category)
                )
                i += 2
                continue

        i += 1

    return entries
