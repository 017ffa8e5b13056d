import pytest

from app.services.offer_ranking import (
    Pagination,
    ProductSortKey,
    SortKey,
    offer_order_by,
    parse_product_sort_key,
    parse_sort_key,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, SortKey.PRICE_ASC),
        ("price_desc", SortKey.PRICE_DESC),
        ("PRECIO_DESC", SortKey.PRICE_DESC),
        ("fecha_desc", SortKey.DATE_DESC),
        ("supermercado", SortKey.SELLER_NAME_ASC),
        ("cualquier_cosa", SortKey.PRICE_ASC),
    ],
)
def test_parse_sort_key(value, expected):
    assert parse_sort_key(value) == expected


def test_parse_product_sort_key():
    assert parse_product_sort_key(None) == ProductSortKey.NAME_ASC
    assert parse_product_sort_key("price_desc") == ProductSortKey.PRICE_DESC
    assert parse_product_sort_key("otro") == ProductSortKey.NAME_ASC


def test_order_by_ends_with_offer_id():
    for key in SortKey:
        clauses = offer_order_by(key)
        assert "offers.id" in str(clauses[-1])


class TestPagination:

    def test_defaults(self):
        pagination = Pagination.from_params()

        assert pagination.page == 1
        assert pagination.limit == 10
        assert pagination.offset == 0

    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            ("0", "5", (1, 5)),
            ("-3", "0", (1, 1)),
            ("2", "1000", (2, 100)),
            ("abc", "xyz", (1, 10)),
            (3, 10, (3, 10)),
        ],
    )
    def test_clamping(self, page, limit, expected):
        pagination = Pagination.from_params(page, limit)

        assert (pagination.page, pagination.limit) == expected

    def test_meta(self):
        meta = Pagination(page=3, limit=10).meta(25)

        assert meta == {"total": 25, "page": 3, "limit": 10, "totalPages": 3}
        assert Pagination(page=3, limit=10).offset == 20

    def test_meta_without_results(self):
        assert Pagination().meta(0)["totalPages"] == 0

    def test_huge_page_keeps_offset_in_range(self):
        pagination = Pagination.from_params("99999999999999999999", "10")

        assert 0 < pagination.offset <= 2 ** 63 - 1
        assert Pagination.from_params("1", "99999999999999999999").limit == 100
