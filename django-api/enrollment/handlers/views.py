"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from enrollment import conf
from enrollment.domain import CartItemId, Course, StudentData
from enrollment.domain.errors import CartValidationError, DomainError, ErrorCode, InvalidCartItemIdError
from enrollment.domain.models import CustomerInfo
from enrollment.gateways import get_payment_gateway
from enrollment.handlers.serializers import (
    CartItemSerializer,
    CartSummarySerializer,
    CourseSerializer,
    CustomerSerializer,
    PricingCalculationSerializer,
    PricingPackageSerializer,
    QuoteRequestSerializer,
    StudentInputSerializer,
    StudentUpdateSerializer,
    ValidationResultSerializer,
)
from enrollment.services.cart_service import CartService
from enrollment.services.checkout_service import CheckoutService
from enrollment.services.pricing_service import PricingService
from enrollment.stores.django_store import CacheCartStore, DjangoCatalogStore

ERROR_STATUS = {
    ErrorCode.INVALID_STUDENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CART_ITEM_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CART_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CART_ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE_STUDENT: status.HTTP_409_CONFLICT,
    ErrorCode.PAYMENT_FAILED: status.HTTP_502_BAD_GATEWAY,
}


def error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message}
    if isinstance(error, CartValidationError):
        body["errors"] = list(error.errors)
    return Response({"error": body}, status=ERROR_STATUS[error.code])


def pricing_service() -> PricingService:
    return PricingService(DjangoCatalogStore(), conf.standard_price_list())


def cart_service(cart_id: str) -> CartService:
    return CartService(CacheCartStore(), pricing_service(), cart_id)


def cart_pricing_courses(course_ids: list[str]) -> list[Course]:
    return pricing_service().resolve_courses(course_ids)


def parse_item_id(item_id: str) -> CartItemId:
    try:
        return CartItemId.from_string(item_id)
    except ValueError:
        raise InvalidCartItemIdError()


def cart_response(cart: CartService, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(
        {
            "cart_id": cart.cart_id,
            "summary": CartSummarySerializer(cart.summary()).data,
            "validation": ValidationResultSerializer(cart.validate()).data,
            "is_expired": cart.is_expired(),
        },
        status=status_code,
    )


class PackageListView(APIView):
    """Handler for GET /api/packages"""

    def get(self, request: Request) -> Response:
        packages = DjangoCatalogStore().list_packages()
        return Response(PricingPackageSerializer(packages, many=True).data)


class CourseListView(APIView):
    """Handler for GET /api/courses"""

    def get(self, request: Request) -> Response:
        courses = DjangoCatalogStore().list_courses()
        return Response(CourseSerializer(courses, many=True).data)


class QuoteView(APIView):
    """Handler for POST /api/pricing/quote"""

    def post(self, request: Request) -> Response:
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        service = pricing_service()
        courses = service.resolve_courses(data["course_ids"])
        body = {
            "pricing": PricingCalculationSerializer(
                service.quote(courses, data["family_eligible"])
            ).data,
            "recommendations": service.recommendations(courses),
        }
        if "age" in data:
            body["age_check"] = ValidationResultSerializer(service.age_check(data["age"], courses)).data
        return Response(body)


class CartDetailView(APIView):
    """Handler for GET/DELETE /api/carts/{cart_id}"""

    def get(self, request: Request, cart_id: str) -> Response:
        return cart_response(cart_service(cart_id))

    def delete(self, request: Request, cart_id: str) -> Response:
        cart_service(cart_id).clear()
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemListView(APIView):
    """Handler for POST /api/carts/{cart_id}/items"""

    def post(self, request: Request, cart_id: str) -> Response:
        serializer = StudentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        cart = cart_service(cart_id)
        student = StudentData(
            first_name=data["first_name"],
            last_name=data["last_name"],
            age=data.get("age"),
            courses=tuple(cart_pricing_courses(data["course_ids"])),
            schedule_ids=tuple(data["schedule_ids"]),
            is_second_dancer_in_family=data.get("is_second_dancer_in_family"),
            family_discount_override=data.get("family_discount_override"),
        )
        try:
            item_id = cart.add_student(student)
        except DomainError as error:
            return error_response(error)

        response = cart_response(cart, status.HTTP_201_CREATED)
        response.data["item_id"] = str(item_id)
        return response


class CartItemDetailView(APIView):
    """Handler for PATCH/DELETE /api/carts/{cart_id}/items/{item_id}"""

    def patch(self, request: Request, cart_id: str, item_id: str) -> Response:
        serializer = StudentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        cart = cart_service(cart_id)
        courses = None
        if "course_ids" in data:
            courses = tuple(cart_pricing_courses(data["course_ids"]))
        try:
            item = cart.update_student(
                parse_item_id(item_id),
                first_name=data.get("first_name"),
                last_name=data.get("last_name"),
                age=data.get("age"),
                courses=courses,
                schedule_ids=tuple(data["schedule_ids"]) if "schedule_ids" in data else None,
            )
        except DomainError as error:
            return error_response(error)
        return Response(CartItemSerializer(item).data)

    def delete(self, request: Request, cart_id: str, item_id: str) -> Response:
        try:
            cart_service(cart_id).remove_student(parse_item_id(item_id))
        except DomainError as error:
            return error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemDuplicateView(APIView):
    """Handler for POST /api/carts/{cart_id}/items/{item_id}/duplicate"""

    def post(self, request: Request, cart_id: str, item_id: str) -> Response:
        cart = cart_service(cart_id)
        try:
            new_id = cart.duplicate_student(parse_item_id(item_id))
        except DomainError as error:
            return error_response(error)

        response = cart_response(cart, status.HTTP_201_CREATED)
        response.data["item_id"] = str(new_id)
        return response


class CartItemFamilyDiscountView(APIView):
    """Handler for POST /api/carts/{cart_id}/items/{item_id}/toggle-family-discount"""

    def post(self, request: Request, cart_id: str, item_id: str) -> Response:
        cart = cart_service(cart_id)
        try:
            cart.toggle_family_discount(parse_item_id(item_id))
        except DomainError as error:
            return error_response(error)
        return cart_response(cart)


class CheckoutView(APIView):
    """Handler for POST /api/carts/{cart_id}/checkout"""

    def post(self, request: Request, cart_id: str) -> Response:
        serializer = CustomerSerializer(data=request.data.get("customer", {}))
        serializer.is_valid(raise_exception=True)
        customer = CustomerInfo(**serializer.validated_data)

        checkout = CheckoutService(get_payment_gateway())
        try:
            result = checkout.start_checkout(cart_service(cart_id), customer)
        except DomainError as error:
            return error_response(error)

        return Response(
            {
                "redirect_url": result.redirect_url,
                "external_order_id": result.external_order_id,
            },
            status=status.HTTP_201_CREATED,
        )
