"""Tests for round-half-up rounding."""

import math

import pytest

from order_pricing.pricing.models import LineResult, TaxMode
from order_pricing.pricing.rounding import round_half_up, round_line_result


@pytest.mark.parametrize("value, expected", [
    (0.125, 0.13),
    (0.375, 0.38),
    (-0.125, -0.12),
    (236.0, 236.0),
    (17.999999999999996, 18.0),
    (0.004, 0.0),
    (0.0, 0.0),
])
def test_round_half_up_two_places(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize("value, expected", [(0.5, 1.0), (1.5, 2.0), (2.5, 3.0), (-2.5, -2.0)])
def test_round_half_up_differs_from_bankers_rounding(value, expected):
    assert round_half_up(value, 0) == expected


def test_round_half_up_representation_error_not_compensated():
    # 1.005 is stored as 1.00499999...
    assert round_half_up(1.005) == 1.0


def test_round_half_up_non_finite_passthrough():
    assert math.isnan(round_half_up(float("nan")))
    assert round_half_up(float("inf")) == float("inf")


def test_round_line_result_rounds_every_field():
    result = LineResult(
        line_total=10.005,
        discount_amount=1.0049,
        price_after_discount=9.0001,
        tax_amount=1.375,
        base_price=7.625,
        final_total=9.0001,
        tax_mode=TaxMode.INCLUSIVE,
    )
    rounded = round_line_result(result)
    assert rounded.discount_amount == 1.0
    assert rounded.price_after_discount == 9.0
    assert rounded.tax_amount == 1.38
    assert rounded.base_price == 7.63
    assert rounded.final_total == 9.0
    assert rounded.tax_mode is TaxMode.INCLUSIVE


def test_round_half_up_beyond_float_precision_passthrough():
    # 1e307 * 100 overflows; such values carry no fractional digits anyway
    assert round_half_up(1e307) == 1e307
    assert round_half_up(-1.7e308) == -1.7e308
