"""Serializers for transforming domain models to API responses and parsing input."""

from rest_framework import serializers

from enrollment.domain.discounts import format_price


class CourseSerializer(serializers.Serializer):
    """Serializer for Course domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    age_range = serializers.CharField()
    course_type = serializers.CharField()


class PricingPackageSerializer(serializers.Serializer):
    """Serializer for PricingPackage domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    package_type = serializers.CharField()
    price = serializers.IntegerField()
    discount_amount = serializers.IntegerField()
    price_display = serializers.SerializerMethodField()
    description = serializers.CharField()
    order = serializers.IntegerField()

    def get_price_display(self, obj) -> str:
        return format_price(max(obj.price - obj.discount_amount, 0))


class PricingCalculationSerializer(serializers.Serializer):
    """Serializer for PricingCalculation domain model."""

    total = serializers.IntegerField()
    total_display = serializers.SerializerMethodField()
    original_price = serializers.IntegerField(allow_null=True)
    discount = serializers.IntegerField()
    applied_family_discount = serializers.IntegerField(allow_null=True)
    package_id = serializers.CharField(allow_null=True)
    package_name = serializers.CharField()
    is_toddler_pricing = serializers.BooleanField()

    def get_total_display(self, obj) -> str:
        return format_price(obj.total)


class CartItemSerializer(serializers.Serializer):
    """Serializer for CartItem domain model."""

    id = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    full_name = serializers.CharField()
    age = serializers.IntegerField(allow_null=True)
    courses = CourseSerializer(many=True)
    schedule_ids = serializers.ListField(child=serializers.CharField())
    is_second_dancer_in_family = serializers.BooleanField()
    family_discount_override = serializers.SerializerMethodField()
    added_at = serializers.DateTimeField()

    def get_family_discount_override(self, obj) -> bool | None:
        return obj.family_discount_override.as_flag()


class PricedCartItemSerializer(serializers.Serializer):
    """Serializer for a cart item with its pricing."""

    item = CartItemSerializer()
    pricing = PricingCalculationSerializer()


class CartSummarySerializer(serializers.Serializer):
    """Serializer for CartSummary domain model."""

    item_count = serializers.IntegerField()
    total = serializers.IntegerField()
    total_discount = serializers.IntegerField()
    original_total = serializers.IntegerField()
    has_items = serializers.BooleanField()
    items = PricedCartItemSerializer(many=True)


class ValidationResultSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    message = serializers.CharField()
    errors = serializers.ListField(child=serializers.CharField())


class QuoteRequestSerializer(serializers.Serializer):
    """Input for POST /api/pricing/quote."""

    course_ids = serializers.ListField(child=serializers.CharField(), allow_empty=True)
    family_eligible = serializers.BooleanField(default=False)
    age = serializers.IntegerField(required=False, min_value=0)


class StudentInputSerializer(serializers.Serializer):
    """Input for adding a student. Business rules are checked by the service."""

    first_name = serializers.CharField(allow_blank=True)
    last_name = serializers.CharField(allow_blank=True)
    age = serializers.IntegerField(required=False, allow_null=True)
    course_ids = serializers.ListField(child=serializers.CharField(), allow_empty=True)
    schedule_ids = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    is_second_dancer_in_family = serializers.BooleanField(required=False, allow_null=True)
    family_discount_override = serializers.BooleanField(required=False, allow_null=True)


class StudentUpdateSerializer(serializers.Serializer):
    """Input for updating a student; every field is optional."""

    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    age = serializers.IntegerField(required=False)
    course_ids = serializers.ListField(child=serializers.CharField(), required=False)
    schedule_ids = serializers.ListField(child=serializers.CharField(), required=False)


class CustomerSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, allow_blank=True, default="")
