import pytest

from storefront.errors import ValidationFailed
from storefront.ordering.pricing import BASE_PRICE, full_order_total, is_number, price_minimal_order
from storefront.ordering.submission import (
    FullOrderSubmission,
    MinimalSubmission,
    classify_submission,
    draft_from_submission,
)
from storefront.ordering.validation import validate_order_payload


@pytest.mark.parametrize(
    "wilaya, fee",
    [("16 - Alger", 400), ("01 - Adrar", 900), ("31 - Oran", 600)],
)
@pytest.mark.parametrize("qty", [1, 3, 20])
def test_minimal_total_is_base_times_qty_plus_shipping(minimal_payload, wilaya, fee, qty):
    data = validate_order_payload(dict(minimal_payload, wilaya=wilaya, qty=qty)).data
    quote = price_minimal_order(data)

    assert quote.subtotal == BASE_PRICE * qty
    assert quote.shipping == fee
    assert quote.total == BASE_PRICE * qty + fee


def test_minimal_line_item_encodes_color_and_size(minimal_payload):
    data = validate_order_payload(minimal_payload).data
    quote = price_minimal_order(data)

    assert quote.items == [{"name": "Premium Hoodie (Black, M)", "qty": 2, "price": BASE_PRICE}]
    assert quote.total == 2 * BASE_PRICE + 400


def test_full_total_prefers_supplied_number():
    items = [{"name": "A", "qty": 2, "price": 100}]
    assert full_order_total(items, 999) == 999
    assert full_order_total(items, 0) == 0


def test_full_total_sums_items_when_total_missing_or_not_a_number():
    items = [{"name": "A", "qty": 2, "price": 100}, {"name": "B", "price": 50}, {"name": "C", "qty": 3}]
    assert full_order_total(items) == 250
    assert full_order_total(items, "999") == 250
    assert full_order_total(items, True) == 250


def test_full_total_never_negative():
    assert full_order_total([], -10) == 0


def test_classify_by_items_list():
    assert isinstance(classify_submission({"items": []}), FullOrderSubmission)
    assert isinstance(classify_submission({"items": "nope"}), MinimalSubmission)
    assert isinstance(classify_submission({"name": "x"}), MinimalSubmission)
    assert isinstance(classify_submission(None), MinimalSubmission)


def test_minimal_draft(minimal_payload):
    draft = draft_from_submission(classify_submission(dict(minimal_payload, email="a@b.dz")))

    assert draft.customer_name == "Amina Benali"
    assert draft.email == "a@b.dz"
    assert draft.address == {"street": "12 Rue Didouche Mourad", "city": "Alger"}
    assert draft.total == 2 * BASE_PRICE + 400
    assert draft.status == "pending"


def test_minimal_draft_raises_with_error_list():
    with pytest.raises(ValidationFailed) as exc:
        draft_from_submission(classify_submission({"phone": "123", "qty": 0}))
    assert "invalid phone" in exc.value.errors
    assert "invalid qty" in exc.value.errors


def test_full_draft_defaults():
    draft = draft_from_submission(classify_submission({"items": [{"name": "Cap", "price": 500, "qty": 0}]}))

    assert draft.customer_name == "—"
    assert draft.address == {"street": "", "city": ""}
    assert draft.items == [{"name": "Cap", "qty": 1, "price": 500}]
    assert draft.total == 500


def test_full_draft_keeps_caller_fields():
    body = {
        "customerName": "Karim",
        "email": "k@example.com",
        "phone": "0661234567",
        "address": {"street": "1 Rue", "city": "Oran", "zip": "31000"},
        "items": [{"name": "Cap", "price": 500, "qty": 2}],
        "total": 1200,
        "status": "shipped",
    }
    draft = draft_from_submission(classify_submission(body))

    assert draft.customer_name == "Karim"
    assert draft.address["zip"] == "31000"
    assert draft.total == 1200
    assert draft.status == "shipped"


def test_full_draft_rejects_non_object_items():
    with pytest.raises(ValidationFailed) as exc:
        draft_from_submission(classify_submission({"items": ["cap"]}))
    assert exc.value.errors == ["invalid item at position 0"]


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), 10 ** 400, True, "5"])
def test_is_number_rejects_non_finite_and_non_numeric(value):
    assert not is_number(value)


def test_non_finite_supplied_total_falls_back_to_item_sum():
    items = [{"name": "Cap", "qty": 1, "price": 10}]
    assert full_order_total(items, float("inf")) == 10
    assert full_order_total(items, float("-inf")) == 10
    assert full_order_total(items, float("nan")) == 10


def test_non_finite_item_price_becomes_zero():
    draft = draft_from_submission(classify_submission({"items": [{"name": "Cap", "qty": 2, "price": float("inf")}]}))
    assert draft.items == [{"name": "Cap", "qty": 2, "price": 0}]
    assert draft.total == 0


def test_overflowing_item_sum_is_rejected():
    body = {"items": [{"name": "Cap", "qty": 20, "price": 1e308}]}
    with pytest.raises(ValidationFailed) as exc:
        draft_from_submission(classify_submission(body))
    assert exc.value.errors == ["invalid total"]
