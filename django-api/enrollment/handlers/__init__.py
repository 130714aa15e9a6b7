from enrollment.handlers.views import (
    CartDetailView,
    CartItemDetailView,
    CartItemDuplicateView,
    CartItemFamilyDiscountView,
    CartItemListView,
    CheckoutView,
    CourseListView,
    PackageListView,
    QuoteView,
)

__all__ = [
    "CartDetailView",
    "CartItemDetailView",
    "CartItemDuplicateView",
    "CartItemFamilyDiscountView",
    "CartItemListView",
    "CheckoutView",
    "CourseListView",
    "PackageListView",
    "QuoteView",
]
