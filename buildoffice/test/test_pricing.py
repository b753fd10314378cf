"""
Price, tax and quantity recalculation of order, cost estimate and quotation rows
"""

import pytest

from buildoffice.business.pricing import (
    CostEstimatePriceRow,
    OrderPriceRow,
    QuotationPriceRow,
    margin_from_prices,
    parse_number,
    preview_row,
)


@pytest.mark.parametrize('raw, expected', [
    ('12,5', 12.5),
    ('12.5', 12.5),
    (' 1 000,50 ', 1000.5),
    (7, 7.0),
    ('', None),
    ('abc', None),
    ('nan', None),
    ('inf', None),
    (None, None),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_order_net_edit_recomputes_gross_total():
    row = OrderPriceRow(quantity=2).edit('net_amount', '100')
    assert row.amount == 246.0, "2 x 100 net at 23% should be 246 gross"
    assert row.total_net == 200.0


def test_order_gross_edit_back_solves_unit_net():
    row = OrderPriceRow(tax_rate=23, quantity=2).edit('amount', '246')
    assert row.net_amount == 100.0
    assert row.amount == '246', "the edited field keeps what was typed"


def test_order_blank_quantity_counts_as_one():
    row = OrderPriceRow(net_amount='10', quantity='').edit('tax_rate', '8')
    assert row.amount == 10.8


def test_order_gross_edit_without_tax_leaves_net():
    row = OrderPriceRow(net_amount=5, tax_rate='').edit('amount', '100')
    assert row.net_amount == 5


def test_order_unknown_field_rejected():
    with pytest.raises(ValueError):
        OrderPriceRow().edit('discount', '5')


def test_cost_estimate_totals():
    row = CostEstimatePriceRow(quantity='3', unit_net_price='10', tax_rate='23')
    assert row.unit_gross_price == 12.3
    assert row.total_net == 30.0
    assert row.total_gross == 36.9


def test_quotation_margin_round_trip():
    row = QuotationPriceRow(quantity=2).edit('unit_price', '100')
    assert row.price_with_margin == 100.0, "no margin yet"

    row = row.edit('margin', '25')
    assert row.price_with_margin == 125.0
    assert row.total == 250.0

    row = row.edit('price_with_margin', '150')
    assert row.margin == 50.0


def test_quotation_price_with_margin_without_base_price_keeps_margin():
    row = QuotationPriceRow(margin=10).edit('price_with_margin', '80')
    assert row.margin == 10
    assert row.total == 80.0


def test_margin_from_zero_price():
    assert margin_from_prices(0, 50) == 0.0


def test_preview_row_ignores_unknown_values():
    row = preview_row('order', {'net_amount': '50', 'foo': 'bar'}, 'tax_rate', '0')
    assert row['amount'] == 50.0
    assert 'foo' not in row


def test_preview_row_unknown_kind():
    with pytest.raises(ValueError):
        preview_row('invoice', {}, 'amount', '1')


def test_preview_row_rejects_non_object_values():
    with pytest.raises(ValueError):
        preview_row('order', ['net_amount', '50'], 'tax_rate', '0')
