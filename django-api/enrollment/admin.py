from django.contrib import admin

from enrollment.models import Course, PricingPackage


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["name", "age_range", "course_type", "instructor", "is_active"]
    list_filter = ["course_type", "is_active"]
    search_fields = ["name", "instructor"]


@admin.register(PricingPackage)
class PricingPackageAdmin(admin.ModelAdmin):
    list_display = ["name", "package_type", "price_in_ore", "discount_amount", "order", "is_active"]
    list_filter = ["package_type", "is_active"]
    list_editable = ["order", "is_active"]
    search_fields = ["name"]
