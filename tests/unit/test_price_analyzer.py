from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.utils.price_analyzer import (
    compute_discount,
    compute_price_statistics,
    compute_share_percentages,
    count_valid_offers,
    round_half_up,
    select_best_offers,
)


def offer(id, product_id, price, valid=True):
    return SimpleNamespace(id=id, product_id=product_id, offer_price=Decimal(str(price)), valid=valid)


@pytest.mark.parametrize(
    "offer_price, original, expected",
    [
        (75, 100, 25.0),
        (Decimal("990"), Decimal("1290"), 23.3),
        (100, 100, 0.0),
        (120, 100, -20.0),
    ],
)
def test_compute_discount(offer_price, original, expected):
    assert compute_discount(offer_price, original) == expected


def test_discount_undefined_without_original_price():
    assert compute_discount(50, None) is None
    assert compute_discount(50, 0) is None


def test_round_half_up_away_from_zero():
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(2.5) == 3.0


def test_best_offer_skips_invalid():
    offers = [offer(1, 10, 50), offer(2, 10, 40), offer(3, 10, 30, valid=False), offer(4, 20, 15)]

    best = select_best_offers(offers)

    assert best[10].id == 2
    assert best[20].id == 4


def test_best_offer_tie_keeps_first():
    best = select_best_offers([offer(7, 1, 40), offer(8, 1, 40)])

    assert best[1].id == 7


def test_product_without_valid_offers_is_absent():
    offers = [offer(1, 10, 30, valid=False)]

    assert select_best_offers(offers) == {}
    assert count_valid_offers(offers) == {}


def test_price_statistics():
    stats = compute_price_statistics([Decimal("50"), Decimal("40"), Decimal("45.5")])

    assert stats["precio_minimo"] == 40.0
    assert stats["precio_maximo"] == 50.0
    assert stats["precio_promedio"] == 45.17
    assert stats["diferencia_porcentaje"] == 25
    assert stats["total_ofertas_validas"] == 3
    assert stats["precio_minimo"] <= stats["precio_promedio"] <= stats["precio_maximo"]


def test_price_statistics_edge_cases():
    assert compute_price_statistics([]) == {}
    assert compute_price_statistics([0, 10])["diferencia_porcentaje"] is None
    assert compute_price_statistics([12])["diferencia_porcentaje"] == 0


def test_share_percentages():
    assert compute_share_percentages({"a": 1, "b": 2}, 3) == {"a": 33.33, "b": 66.67}
    assert compute_share_percentages({"a": 0}, 0) == {"a": 0.0}
