"""
カタログ — デモアプリの商品・カラー定義

テストが参照する商品（一覧上の位置・名前・価格）とカラー選択肢の不変テーブル。

主な機能:
  - Product / PRODUCTS: 商品テーブル
  - Color / COLORS: カラー選択肢テーブル
  - product_by_name / product_at / color_by_name: 検索ヘルパー
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    """商品。

    Attributes:
        index: 商品一覧上の位置（1 始まり）
        name: 表示名
        price: 単価（USD）
    """

    index: int
    name: str
    price: float

    @property
    def display_price(self) -> str:
        return f"${self.price:.2f}"


@dataclass(frozen=True)
class Color:
    """商品詳細画面のカラー選択肢。"""

    name: str
    accessibility_id: str


BACKPACK = Product(1, "Sauce Labs Backpack", 29.99)
BIKE_LIGHT = Product(2, "Sauce Labs Bike Light", 9.99)
BOLT_TSHIRT = Product(3, "Sauce Labs Bolt T-Shirt", 15.99)
FLEECE_JACKET = Product(4, "Sauce Labs Fleece Jacket", 49.99)
ONESIE = Product(5, "Sauce Labs Onesie", 7.99)
TEST_TSHIRT = Product(6, "Test.allTheThings() T-Shirt", 15.99)

PRODUCTS: tuple[Product, ...] = (
    BACKPACK, BIKE_LIGHT, BOLT_TSHIRT, FLEECE_JACKET, ONESIE, TEST_TSHIRT,
)

BLACK = Color("black", "black circle")
BLUE = Color("blue", "blue circle")
GRAY = Color("gray", "gray circle")
RED = Color("red", "red circle")

COLORS: tuple[Color, ...] = (BLACK, BLUE, GRAY, RED)


def product_by_name(name: str) -> Product:
    """表示名から商品を引く。

    Raises:
        KeyError: 該当する商品が無い場合
    """
    for product in PRODUCTS:
        if product.name == name:
            return product
    raise KeyError(f"商品が見つかりません: {name!r}")


def product_at(index: int) -> Product:
    """一覧上の位置（1 始まり）から商品を引く。"""
    for product in PRODUCTS:
        if product.index == index:
            return product
    raise KeyError(f"位置 {index} に商品はありません")


def color_by_name(name: str) -> Color:
    for color in COLORS:
        if color.name == name.lower():
            return color
    raise KeyError(f"カラーが見つかりません: {name!r}")


def total_price(*products: Product, quantity: int = 1) -> float:
    """商品の合計金額（小数第 2 位で丸め）を返す。"""
    return round(sum(p.price for p in products) * quantity, 2)
