from .cart import CartPage
from .checkout import CheckoutPage, PaymentCard, ShippingAddress
from .home import HomePage
from .login import LoginPage
from .product_details import ProductDetailsPage
from .products import ProductsPage, SortOption

__all__ = [
    "CartPage",
    "CheckoutPage",
    "HomePage",
    "LoginPage",
    "PaymentCard",
    "ProductDetailsPage",
    "ProductsPage",
    "ShippingAddress",
    "SortOption",
]
