"""
Price, quantity and tax triangulation shared by orders, cost estimates and quotations.

Form rows keep whatever the user typed in the edited field and recompute the
dependent fields from it. Derived values are rounded to two decimals, the
precision the forms display.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict, replace
from typing import Any

DEFAULT_TAX_RATE = 23.0
PRICE_PRECISION = 2


def parse_number(raw: Any) -> float | None:
    """
    Lenient form-number parser.

    Accepts ints, floats and strings using either ``.`` or ``,`` as the decimal
    separator. Blank, invalid or non-finite input gives ``None``.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(' ', '').replace(',', '.')
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _round(value: float) -> float:
    return round(value, PRICE_PRECISION)


def gross_price(net: float, tax_rate: float) -> float:
    """Gross price of a net price at ``tax_rate`` percent"""
    return net * (1 + tax_rate / 100)


def order_totals(unit_net: float, quantity: float, tax_rate: float) -> tuple[float, float]:
    """
    Totals of an order line.

    Returns:
        Tuple of (total_net, total_gross), unrounded
    """
    total_net = unit_net * quantity
    return total_net, gross_price(total_net, tax_rate)


def unit_net_from_total_gross(total_gross: float, tax_rate: float, quantity: float) -> float:
    """Back-solve the unit net price of an order line from its gross total"""
    if quantity <= 0:
        raise ValueError("quantity must be > 0 to derive a unit net price")
    return total_gross / (1 + tax_rate / 100) / quantity


def price_with_margin(unit_price: float, margin: float) -> float:
    return unit_price * (1 + margin / 100)


def margin_from_prices(unit_price: float, with_margin: float) -> float:
    """Margin percent turning ``unit_price`` into ``with_margin``; 0 when there is no base price"""
    if unit_price == 0:
        return 0.0
    return (with_margin / unit_price - 1) * 100


def quotation_total(quantity: float, with_margin: float) -> float:
    return quantity * with_margin


def _order_quantity(raw: Any) -> float:
    # blank and zero quantities count as a single unit
    return parse_number(raw) or 1.0


@dataclass(frozen=True)
class OrderPriceRow:
    """
    Order form state: ``net_amount`` is the unit net price, ``amount`` the gross total.
    """
    net_amount: Any = None
    tax_rate: Any = DEFAULT_TAX_RATE
    quantity: Any = 1
    amount: Any = None

    FIELDS = ('net_amount', 'tax_rate', 'quantity', 'amount')

    def edit(self, field: str, raw: Any) -> OrderPriceRow:
        if field not in self.FIELDS:
            raise ValueError(f"Unknown order price field: {field}")
        row = replace(self, **{field: raw})

        if field == 'amount':
            total_gross = parse_number(raw)
            tax = parse_number(row.tax_rate)
            qty = _order_quantity(row.quantity)
            if total_gross is not None and tax is not None and qty > 0:
                unit_net = unit_net_from_total_gross(total_gross, tax, qty)
                row = replace(row, net_amount=_round(unit_net))
            return row

        unit_net = parse_number(row.net_amount)
        tax = parse_number(row.tax_rate)
        if unit_net is not None and tax is not None:
            _, total_gross = order_totals(unit_net, _order_quantity(row.quantity), tax)
            row = replace(row, amount=_round(total_gross))
        return row

    @property
    def total_net(self) -> float | None:
        unit_net = parse_number(self.net_amount)
        if unit_net is None:
            return None
        return _round(unit_net * _order_quantity(self.quantity))

    def to_dict(self) -> dict:
        data = asdict(self)
        data['total_net'] = self.total_net
        return data


@dataclass(frozen=True)
class CostEstimatePriceRow:
    """Cost estimate form state; gross and totals are always derived from the inputs"""
    quantity: Any = 1
    unit_net_price: Any = None
    tax_rate: Any = DEFAULT_TAX_RATE

    FIELDS = ('quantity', 'unit_net_price', 'tax_rate')

    def edit(self, field: str, raw: Any) -> CostEstimatePriceRow:
        if field not in self.FIELDS:
            raise ValueError(f"Unknown cost estimate price field: {field}")
        return replace(self, **{field: raw})

    def _values(self) -> tuple[float, float, float]:
        return (
            parse_number(self.quantity) or 0.0,
            parse_number(self.unit_net_price) or 0.0,
            parse_number(self.tax_rate) or 0.0,
        )

    @property
    def unit_gross_price(self) -> float:
        _, net, tax = self._values()
        return _round(gross_price(net, tax))

    @property
    def total_net(self) -> float:
        qty, net, _ = self._values()
        return _round(qty * net)

    @property
    def total_gross(self) -> float:
        qty, net, tax = self._values()
        return _round(qty * gross_price(net, tax))

    def to_dict(self) -> dict:
        data = asdict(self)
        data.update(
            unit_gross_price=self.unit_gross_price,
            total_net=self.total_net,
            total_gross=self.total_gross,
        )
        return data


@dataclass(frozen=True)
class QuotationPriceRow:
    """
    Quotation form state.

    Unit price and margin drive the price with margin; typing a price with
    margin back-solves the margin when a base price exists.
    """
    quantity: Any = 1
    unit_price: Any = None
    margin: Any = 0
    price_with_margin: Any = None

    FIELDS = ('quantity', 'unit_price', 'margin', 'price_with_margin')

    def edit(self, field: str, raw: Any) -> QuotationPriceRow:
        if field not in self.FIELDS:
            raise ValueError(f"Unknown quotation price field: {field}")
        row = replace(self, **{field: raw})

        if field in ('unit_price', 'margin'):
            price = parse_number(row.unit_price) or 0.0
            margin = parse_number(row.margin) or 0.0
            row = replace(row, price_with_margin=_round(price_with_margin(price, margin)))
        elif field == 'price_with_margin':
            with_margin = parse_number(raw) or 0.0
            price = parse_number(row.unit_price) or 0.0
            if price != 0:
                row = replace(row, margin=_round(margin_from_prices(price, with_margin)))
        return row

    @property
    def total(self) -> float:
        qty = parse_number(self.quantity) or 0.0
        with_margin = parse_number(self.price_with_margin) or 0.0
        return _round(quotation_total(qty, with_margin))

    def to_dict(self) -> dict:
        data = asdict(self)
        data['total'] = self.total
        return data


PRICE_ROWS = {
    'order': OrderPriceRow,
    'cost_estimate': CostEstimatePriceRow,
    'quotation': QuotationPriceRow,
}


def preview_row(kind: str, values: dict, field: str, raw: Any) -> dict:
    """
    Apply a single field edit to a form row and return the recalculated row.

    Args:
        kind: ``order``, ``cost_estimate`` or ``quotation``
        values: Current form values (unknown keys are ignored)
        field: Edited field
        raw: Value typed into the field
    """
    row_cls = PRICE_ROWS.get(kind)
    if row_cls is None:
        raise ValueError(f"Unknown price row kind: {kind}")
    if values is not None and not isinstance(values, dict):
        raise ValueError("values must be an object of form fields")
    current = {k: v for k, v in (values or {}).items() if k in row_cls.FIELDS}
    return row_cls(**current).edit(field, raw).to_dict()
