import httpx

from src.models.competitor import CompetitorSource
from src.scraping.extractors.base import BaseExtractor
from src.scraping.extractors.catalog import CatalogExtractor
from src.scraping.extractors.pdf_price_list import PdfPriceListExtractor

_EXTRACTORS: dict[CompetitorSource, type[BaseExtractor]] = {
    CompetitorSource.CERINI: CatalogExtractor,
    CompetitorSource.MALA: PdfPriceListExtractor,
}


def create_extractor(source: CompetitorSource, client: httpx.AsyncClient) -> BaseExtractor:
    """Create the extractor registered for a source."""
    extractor_class = _EXTRACTORS.get(source)
    if extractor_class is None:
        raise KeyError(f"No extractor registered for source {source!r}")
    return extractor_class(client)


def list_sources() -> list[CompetitorSource]:
    return list(_EXTRACTORS)
