from urllib.parse import urljoin


def resolve_url(href: str, base_url: str) -> str:
    """Resolve a possibly relative href against the page it was found on."""
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base_url, href)
