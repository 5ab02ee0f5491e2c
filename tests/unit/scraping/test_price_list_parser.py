from src.models.competitor import ServiceCategory
from src.scraping.parser.price_list_parser import (
    category_for_header,
    parse_price_list,
    split_lines,
)


def test_parse_two_line_grammar_with_header():
    lines = ["CORTES Y PEINADOS:", "Corte Dama", "$ 15000", "Corte Caballero", "$ 8000"]
    entries = parse_price_list(lines)

    assert [(e.service_name, e.price, e.category) for e in entries] == [
        ("Corte Dama", 15000.0, ServiceCategory.HAIRCUT),
        ("Corte Caballero", 8000.0, ServiceCategory.HAIRCUT),
    ]


def test_category_persists_until_next_header(sample_price_list_text):
    entries = parse_price_list(split_lines(sample_price_list_text))

    assert [(e.service_name, e.category) for e in entries] == [
        ("Corte Dama", ServiceCategory.HAIRCUT),
        ("Corte Caballero", ServiceCategory.HAIRCUT),
        ("Color Raíz", ServiceCategory.COLOR),
    ]
    assert entries[2].price == 22500.0


def test_lines_before_any_header_are_other():
    entries = parse_price_list(["Lavado", "$ 3000"])

    assert entries[0].category == ServiceCategory.OTHER


def test_invalid_price_does_not_abort_scan():
    lines = ["TRATAMIENTOS:", "Gratis", "$ 0", "Nutrición", "$ 12.000"]
    entries = parse_price_list(lines)

    assert [(e.service_name, e.price) for e in entries] == [("Nutrición", 12000.0)]
    assert entries[0].category == ServiceCategory.TREATMENTS


def test_colon_and_currency_lines_are_not_service_names():
    lines = ["Nota: precios finales", "$ 100", "$ 200", "$ 300"]
    assert parse_price_list(lines) == []


def test_category_for_header():
    assert category_for_header("DECOLORACIÓN") == ServiceCategory.COLOR
    assert category_for_header("Tratamientos capilares") == ServiceCategory.TREATMENTS
    assert category_for_header("MAQUILLAJE") == ServiceCategory.OTHER
    assert category_for_header("MANOS Y PIES") == ServiceCategory.OTHER


def test_split_lines_drops_blank_lines():
    assert split_lines("a\r\n\n  b  \n\f\n") == ["a", "b"]
