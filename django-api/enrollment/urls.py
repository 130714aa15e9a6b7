from django.urls import path

from enrollment.handlers import (
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

urlpatterns = [
    path("packages", PackageListView.as_view(), name="package-list"),
    path("courses", CourseListView.as_view(), name="course-list"),
    path("pricing/quote", QuoteView.as_view(), name="pricing-quote"),
    path("carts/<str:cart_id>", CartDetailView.as_view(), name="cart-detail"),
    path("carts/<str:cart_id>/items", CartItemListView.as_view(), name="cart-item-list"),
    path(
        "carts/<str:cart_id>/items/<str:item_id>",
        CartItemDetailView.as_view(),
        name="cart-item-detail",
    ),
    path(
        "carts/<str:cart_id>/items/<str:item_id>/duplicate",
        CartItemDuplicateView.as_view(),
        name="cart-item-duplicate",
    ),
    path(
        "carts/<str:cart_id>/items/<str:item_id>/toggle-family-discount",
        CartItemFamilyDiscountView.as_view(),
        name="cart-item-toggle-family-discount",
    ),
    path("carts/<str:cart_id>/checkout", CheckoutView.as_view(), name="cart-checkout"),
]
