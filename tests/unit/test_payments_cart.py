import math
import re

import pytest

from checkout_api.payments import ValidationError, amount_to_string, normalize_items

AMOUNT_RE = re.compile(r"^\d+\.\d{2}$")


def test_normalize_items_preserves_order_and_format():
    items = [
        {"id": "startup-yearly", "name": "Startup Plan (Yearly)", "price": 39, "quantity": 1},
        {"name": "  Email Credits Top-up ", "price": 4.5, "quantity": 3, "category": "DIGITAL_GOODS"},
        {"name": "AI Planning Credits", "price": "12.3"},
    ]
    result = normalize_items(items, "USD")

    assert len(result) == len(items)
    assert [r["name"] for r in result] == ["Startup Plan (Yearly)", "Email Credits Top-up", "AI Planning Credits"]
    assert all(AMOUNT_RE.match(r["unit_amount"]["value"]) for r in result)
    assert result[0] == {
        "reference_id": "startup-yearly",
        "name": "Startup Plan (Yearly)",
        "quantity": "1",
        "category": "DIGITAL_GOODS",
        "unit_amount": {"currency_code": "USD", "value": "39.00"},
    }
    # Valeurs par défaut: reference_id positionnel, quantité 1, catégorie DIGITAL_GOODS
    assert result[2]["reference_id"] == "ITEM-3"
    assert result[2]["quantity"] == "1"
    assert result[2]["category"] == "DIGITAL_GOODS"
    assert result[1]["quantity"] == "3"
    assert result[1]["unit_amount"]["value"] == "4.50"


@pytest.mark.parametrize("price,expected", [
    (9.999, "10.00"),
    (5.005, "5.01"),
    (0.125, "0.13"),
    (19.994, "19.99"),
    ("49", "49.00"),
])
def test_prices_are_rounded_half_up_to_cents(price, expected):
    result = normalize_items([{"name": "Plan", "price": price}], "EUR")
    assert result[0]["unit_amount"] == {"currency_code": "EUR", "value": expected}


def test_quantity_accepts_integral_float_and_numeric_string():
    result = normalize_items([
        {"name": "A", "price": 1, "quantity": 2.0},
        {"name": "B", "price": 1, "quantity": "4"},
    ], "USD")
    assert [r["quantity"] for r in result] == ["2", "4"]


@pytest.mark.parametrize("items", [None, [], {}, "items", {"name": "A", "price": 1}])
def test_missing_or_empty_cart_raises(items):
    with pytest.raises(ValidationError) as exc:
        normalize_items(items, "USD")
    assert "Missing cart items" in exc.value.message
    assert exc.value.status_code == 400


@pytest.mark.parametrize("name", [None, "", "   ", 42])
def test_missing_name_identifies_position(name):
    items = [{"name": "Valid", "price": 10}, {"name": name, "price": 10}]
    with pytest.raises(ValidationError) as exc:
        normalize_items(items, "USD")
    assert "Item #2" in exc.value.message
    assert "name" in exc.value.message


@pytest.mark.parametrize("price", [0, -5, None, "abc", math.nan, math.inf, True, 0.001])
def test_invalid_price_raises_and_nothing_is_returned(price):
    items = [{"name": "Good", "price": 10}, {"name": "Scaleup Plan", "price": price}]
    with pytest.raises(ValidationError) as exc:
        normalize_items(items, "USD")
    assert 'Item #2 ("Scaleup Plan") has an invalid price.' == exc.value.message


@pytest.mark.parametrize("quantity", [0, -1, 1.5, "two", True])
def test_invalid_quantity_raises(quantity):
    with pytest.raises(ValidationError) as exc:
        normalize_items([{"name": "Credits", "price": 3, "quantity": quantity}], "USD")
    assert exc.value.message == 'Item #1 ("Credits") has an invalid quantity.'


def test_non_object_item_raises():
    with pytest.raises(ValidationError) as exc:
        normalize_items([{"name": "A", "price": 1}, "oops"], "USD")
    assert "Item #2" in exc.value.message


def test_amount_to_string():
    assert amount_to_string(39) == "39.00"
    assert amount_to_string("5.005") == "5.01"
    assert amount_to_string(None) == "0.00"


@pytest.mark.parametrize("price", [1e30, "1e30", -1e30, "1000000000000.00"])
def test_out_of_range_price_is_rejected(price):
    with pytest.raises(ValidationError) as exc:
        normalize_items([{"name": "Plan", "price": price}], "USD")
    assert exc.value.message == 'Item #1 ("Plan") has an invalid price.'


def test_largest_price_is_accepted():
    result = normalize_items([{"name": "Plan", "price": "999999999999.99"}], "USD")
    assert result[0]["unit_amount"]["value"] == "999999999999.99"


@pytest.mark.parametrize("quantity", [10 ** 12, "1e30", -10 ** 30])
def test_out_of_range_quantity_is_rejected(quantity):
    with pytest.raises(ValidationError) as exc:
        normalize_items([{"name": "Credits", "price": 1, "quantity": quantity}], "USD")
    assert exc.value.message == 'Item #1 ("Credits") has an invalid quantity.'


def test_explicit_category_is_kept_and_non_string_rejected():
    result = normalize_items([
        {"name": "A", "price": 1, "category": ""},
        {"name": "B", "price": 1, "category": "PHYSICAL_GOODS"},
        {"name": "C", "price": 1, "category": None},
    ], "USD")
    assert [r["category"] for r in result] == ["", "PHYSICAL_GOODS", "DIGITAL_GOODS"]

    with pytest.raises(ValidationError) as exc:
        normalize_items([{"name": "A", "price": 1}, {"name": "B", "price": 1, "category": 7}], "USD")
    assert exc.value.message == 'Item #2 ("B") has an invalid category.'
