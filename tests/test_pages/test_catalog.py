"""
カタログ テスト
"""

import pytest

from qat.catalog import (
    BACKPACK,
    BLUE,
    FLEECE_JACKET,
    PRODUCTS,
    color_by_name,
    product_at,
    product_by_name,
    total_price,
)


class TestCatalog:
    """商品・カラー定義のテスト。"""

    def test_positions_are_sequential(self):
        assert [p.index for p in PRODUCTS] == list(range(1, len(PRODUCTS) + 1))

    def test_display_price(self):
        assert BACKPACK.display_price == "$29.99"

    def test_lookup(self):
        assert product_by_name("Sauce Labs Fleece Jacket") is FLEECE_JACKET
        assert product_at(1) is BACKPACK
        assert color_by_name("Blue") is BLUE

    @pytest.mark.parametrize("lookup", [lambda: product_by_name("Sauce Labs Hat"), lambda: product_at(7),
                                        lambda: color_by_name("green")])
    def test_unknown_raises_key_error(self, lookup):
        with pytest.raises(KeyError):
            lookup()

    def test_total_is_rounded(self):
        assert total_price(*PRODUCTS) == 129.94
