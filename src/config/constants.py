CATALOG_URL = "https://cerini.net/servicios/"

PRICE_LIST_PAGE_URL = "https://www.malapeluqueria.com/lista-de-precios"
PRICE_LIST_PDF_URL = (
    "https://www.malapeluqueria.com/_files/ugd/7ac9db_5def412290b44acab1a1eafb4f64e972.pdf"
)

DEFAULT_CURRENCY = "ARS"

LATEST_PRICES_LIMIT = 200
DEBUG_TEXT_MAX_CHARS = 200_000
