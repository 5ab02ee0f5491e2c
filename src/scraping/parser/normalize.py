"""Service-name cleanup and keyword categorization."""

import re

from src.models.competitor import ServiceCategory

# Checked in order, first match wins. Color must stay ahead of the generic
# treatment terms.
_CATEGORY_PATTERNS: list[tuple[ServiceCategory, re.Pattern[str]]] = [
    (ServiceCategory.HAIRCUT, re.compile(r"corte|barba|flequillo")),
    (
        ServiceCategory.COLOR,
        re.compile(r"color|tint|balayage|mechas|iluminación|iluminacion"),
    ),
    (
        ServiceCategory.CHEMICAL_TREATMENT,
        re.compile(r"cauterización|cauterizacion|botox|alisado|keratina"),
    ),
    (ServiceCategory.STYLING, re.compile(r"peinado|brushing|planchado")),
    (
        ServiceCategory.TREATMENTS,
        re.compile(
            r"tratamiento|baño de crema|bano de crema|nutrición|nutricion"
            r"|hidratación|hidratacion"
        ),
    ),
]


def normalize_service_name(raw: str) -> str:
    """Collapse whitespace and canonicalize colon spacing ("A:B" -> "A: B")."""
    name = re.sub(r"\s+", " ", raw)
    name = re.sub(r"\s*:\s*", ": ", name)
    return name.strip()


def categorize_service(name: str) -> ServiceCategory:
    lowered = name.lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return ServiceCategory.OTHER
