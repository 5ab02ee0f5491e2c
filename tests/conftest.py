import pytest

from tests.helpers import FakePriceTable, FakeRunLedger, FrozenClock


@pytest.fixture
def sample_catalog_html() -> str:
    return """
    <html>
    <head><title>Servicios</title><script>var promo = "Corte $ 1";</script></head>
    <body>
    <section class="servicios">
        <h2>Cortes</h2>
        <ul>
            <li>Corte Caballero $20.000</li>
            <li>Barba $8500</li>
        </ul>
        <p>Consultas sin cargo</p>
    </section>
    </body>
    </html>
    """


@pytest.fixture
def sample_price_list_text() -> str:
    return "\n".join(
        [
            "LISTA DE PRECIOS",
            "CORTES Y PEINADOS:",
            "Corte Dama",
            "$ 15000",
            "Corte Caballero",
            "$ 8000",
            "",
            "COLORACIÓN:",
            "Color   Raíz",
            "$ 22.500",
            "Mechas",
            "consultar",
            "\f",
        ]
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def run_ledger() -> FakeRunLedger:
    return FakeRunLedger()


@pytest.fixture
def price_table() -> FakePriceTable:
    return FakePriceTable()
