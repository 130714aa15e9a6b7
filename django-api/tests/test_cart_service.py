"""Unit tests for CartService.

These use the in-memory stores and a fake clock.
Run with: pytest tests/test_cart_service.py -v
"""

import json
import logging

import pytest

from enrollment.domain import CartItemId, FamilyDiscountChoice, StudentData
from enrollment.domain.errors import (
    CartItemNotFoundError,
    DuplicateStudentError,
    InvalidStudentError,
)
from enrollment.domain.snapshot import item_to_record
from enrollment.services.cart_service import CartService
from enrollment.services.pricing_service import PricingService


@pytest.fixture
def pricing(catalog) -> PricingService:
    return PricingService(catalog)


@pytest.fixture
def make_cart(cart_store, pricing, clock):
    def make(cart_id="default"):
        return CartService(cart_store, pricing, cart_id, clock=clock)

    return make


@pytest.fixture
def cart(make_cart) -> CartService:
    return make_cart()


@pytest.fixture
def student(courses):
    def make(first_name="Ola", last_name="Hansen", age=9, selection=("jazz",), **kwargs):
        return StudentData(
            first_name=first_name,
            last_name=last_name,
            age=age,
            courses=tuple(courses[key] for key in selection),
            **kwargs,
        )

    return make


class TestAddStudent:
    """Tests for add_student."""

    def test_first_student_is_not_family_eligible(self, cart, student):
        cart.add_student(student())
        assert cart.items[0].is_second_dancer_in_family is False

    def test_second_student_gets_family_discount(self, cart, student):
        """Only the second student is priced with a family discount."""
        cart.add_student(student("Ola", "Hansen"))
        cart.add_student(student("Kari", "Hansen", selection=("hiphop",)))

        summary = cart.summary()
        first, second = summary.items
        assert first.pricing.discount == 0
        assert first.pricing.applied_family_discount is None
        assert second.pricing.applied_family_discount == 25_500
        assert summary.total == 170_000 + 144_500
        assert summary.total_discount == 25_500
        assert summary.original_total == 340_000

    def test_explicit_flag_on_first_student(self, cart, student):
        cart.add_student(student(is_second_dancer_in_family=True))
        assert cart.items[0].is_second_dancer_in_family is True

    def test_override_false_on_second_student(self, cart, student):
        cart.add_student(student("Ola", "Hansen"))
        cart.add_student(student("Kari", "Hansen", family_discount_override=False))
        second = cart.items[1]
        assert second.is_second_dancer_in_family is False
        assert second.family_discount_override is FamilyDiscountChoice.NOT_ELIGIBLE

    def test_names_are_trimmed(self, cart, student):
        cart.add_student(student("  Ola ", " Hansen"))
        assert cart.items[0].full_name == "Ola Hansen"

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"first_name": " "}, "Fornavn er påkrevd"),
            ({"last_name": ""}, "Etternavn er påkrevd"),
            ({"age": 2}, "Ugyldig alder (må være mellom 3-100 år)"),
            ({"age": None}, "Ugyldig alder (må være mellom 3-100 år)"),
            ({"selection": ()}, "Minst én klasse må velges"),
        ],
    )
    def test_invalid_student(self, cart, student, kwargs, message):
        with pytest.raises(InvalidStudentError) as exc_info:
            cart.add_student(student(**kwargs))
        assert exc_info.value.message == message
        assert not cart.has_items

    def test_duplicate_name_is_rejected(self, cart, student):
        cart.add_student(student("Ola", "Hansen"))
        with pytest.raises(DuplicateStudentError):
            cart.add_student(student("ola", "HANSEN"))
        assert len(cart.items) == 1


class TestMutations:
    """Tests for remove, update, duplicate and toggle."""

    def test_remove_student(self, cart, student):
        item_id = cart.add_student(student())
        cart.remove_student(item_id)
        assert not cart.has_items

    def test_remove_unknown_student(self, cart, student):
        cart.add_student(student())
        with pytest.raises(CartItemNotFoundError):
            cart.remove_student(CartItemId.new())

    def test_update_student(self, cart, student, courses):
        item_id = cart.add_student(student())
        updated = cart.update_student(item_id, age=10, courses=(courses["jazz"], courses["ballet"]))
        assert updated.age == 10
        assert len(cart.items[0].courses) == 2
        assert cart.summary().items[0].pricing.package_name == "2 klasser"

    def test_update_blank_name_keeps_current(self, cart, student):
        item_id = cart.add_student(student())
        assert cart.update_student(item_id, first_name="  ").first_name == "Ola"

    def test_update_to_existing_name_is_rejected(self, cart, student):
        cart.add_student(student("Ola", "Hansen"))
        item_id = cart.add_student(student("Kari", "Hansen"))
        with pytest.raises(DuplicateStudentError):
            cart.update_student(item_id, first_name="Ola")

    def test_duplicate_student(self, cart, student):
        """A copy is a family member with a marked last name and a new id."""
        item_id = cart.add_student(student("Ola", "Hansen"))
        copy_id = cart.duplicate_student(item_id)

        copy = cart.items[1]
        assert copy.id == copy_id
        assert copy_id != item_id
        assert copy.last_name == "Hansen (kopi)"
        assert copy.is_second_dancer_in_family is True
        assert copy.family_discount_override is FamilyDiscountChoice.ELIGIBLE
        assert len(cart.items) == 2

    def test_toggle_family_discount(self, cart, student):
        cart.add_student(student("Ola", "Hansen"))
        item_id = cart.add_student(student("Kari", "Hansen"))

        assert cart.toggle_family_discount(item_id) is False
        item = cart.items[1]
        assert item.is_second_dancer_in_family is False
        assert item.family_discount_override is FamilyDiscountChoice.NOT_ELIGIBLE
        assert cart.summary().total_discount == 0

    def test_reset_family_discount_by_position(self, cart, student):
        first_id = cart.add_student(student("Ola", "Hansen"))
        second_id = cart.add_student(student("Kari", "Hansen"))
        cart.toggle_family_discount(first_id)
        cart.toggle_family_discount(second_id)

        cart.reset_family_discount_by_position()
        assert [item.is_second_dancer_in_family for item in cart.items] == [False, True]

    def test_clear(self, cart, cart_store, student):
        cart.add_student(student())
        cart.clear()
        assert not cart.has_items
        assert "default" not in cart_store.snapshots


class TestExpiry:
    """Tests for the cart time to live."""

    def test_item_kept_before_ttl(self, cart, student, clock):
        cart.add_student(student())
        clock.advance(29)
        assert cart.summary().item_count == 1
        assert not cart.is_expired()

    def test_refresh_removes_expired(self, cart, student, clock):
        cart.add_student(student())
        clock.advance(31)
        assert cart.is_expired()
        assert cart.refresh() == 1
        assert cart.summary().item_count == 0

    def test_expired_items_dropped_on_load(self, make_cart, cart_store, student, clock):
        make_cart().add_student(student())
        clock.advance(31)
        assert not make_cart().has_items
        assert json.loads(cart_store.snapshots["default"]) == []

    def test_expired_on_load_is_reported(self, make_cart, cart_store, student, clock):
        """A fresh instance reports students it dropped while loading."""
        make_cart().add_student(student("Ola", "Hansen"))
        stale = json.loads(cart_store.snapshots["default"])
        clock.advance(31)
        make_cart().add_student(student("Kari", "Hansen"))
        fresh = json.loads(cart_store.snapshots["default"])
        cart_store.snapshots["default"] = json.dumps(stale + fresh)

        cart = make_cart()
        assert cart.is_expired()
        assert [item.first_name for item in cart.items] == ["Kari"]

    def test_clear_resets_expired_flag(self, make_cart, student, clock):
        make_cart().add_student(student())
        clock.advance(31)
        cart = make_cart()
        assert cart.is_expired()
        cart.clear()
        assert not cart.is_expired()

    def test_only_old_items_expire(self, cart, student, clock):
        cart.add_student(student("Ola", "Hansen"))
        clock.advance(20)
        cart.add_student(student("Kari", "Hansen"))
        clock.advance(15)
        assert cart.refresh() == 1
        assert [item.first_name for item in cart.items] == ["Kari"]


class TestPersistence:
    """Tests for loading and saving snapshots."""

    def test_changes_visible_to_new_instance(self, make_cart, student):
        make_cart().add_student(student())
        assert make_cart().items[0].full_name == "Ola Hansen"

    def test_carts_are_separate(self, make_cart, student):
        make_cart("a").add_student(student())
        assert not make_cart("b").has_items

    def test_mutation_rereads_snapshot(self, make_cart, student):
        """Two instances of the same cart never lose each other's writes."""
        first = make_cart()
        second = make_cart()
        first.add_student(student("Ola", "Hansen"))
        second.add_student(student("Kari", "Hansen"))

        assert [item.first_name for item in second.items] == ["Ola", "Kari"]
        assert second.items[1].is_second_dancer_in_family is True

    def test_corrupted_snapshot_is_discarded(self, make_cart, cart_store, caplog):
        cart_store.snapshots["default"] = "{not json"
        with caplog.at_level(logging.ERROR, logger="enrollment"):
            cart = make_cart()
        assert not cart.has_items
        assert "default" not in cart_store.snapshots
        assert "Discarding unreadable cart snapshot" in caplog.text

    def test_legacy_snapshot_is_upgraded(self, make_cart, cart_store, clock):
        legacy = [
            {
                "id": "1692358800000",
                "student_name": "Ola Hansen",
                "age": 9,
                "courses": [{"id": "jazz", "name": "Jazz", "age_range": "10+"}],
                "added_at": clock.now.isoformat(),
            }
        ]
        cart_store.snapshots["default"] = json.dumps(legacy)

        cart = make_cart()
        assert cart.items[0].first_name == "Ola"
        assert cart.items[0].last_name == "Hansen"
        stored = json.loads(cart_store.snapshots["default"])
        assert "student_name" not in stored[0]
        assert stored[0]["first_name"] == "Ola"


class TestValidate:
    """Tests for validate."""

    def test_empty_cart(self, cart):
        result = cart.validate()
        assert not result.valid
        assert result.message == "Handlekurven er tom"
        assert result.errors == ("Legg til minst én student for å fortsette",)

    def test_valid_cart(self, cart, student):
        cart.add_student(student())
        result = cart.validate()
        assert result.valid
        assert result.message == "Handlekurven er gyldig"

    def test_reports_bad_stored_items(self, make_cart, cart_store, clock, student):
        cart = make_cart()
        cart.add_student(student())
        record = item_to_record(cart.items[0])
        broken = {**record, "id": str(CartItemId.new()), "age": None, "courses": []}
        cart_store.snapshots["default"] = json.dumps([record, broken])

        result = make_cart().validate()
        assert not result.valid
        assert result.message == "Feil i handlekurven"
        assert "Student 2 (Ola Hansen): Ugyldig alder" in result.errors
        assert "Student 2 (Ola Hansen): Ingen klasser valgt" in result.errors
        assert "Duplikate studentnavn er ikke tillatt" in result.errors

    def test_numeric_string_age_is_upgraded(self, make_cart, cart_store, student):
        make_cart().add_student(student(age=9))
        record = json.loads(cart_store.snapshots["default"])[0]
        cart_store.snapshots["default"] = json.dumps([{**record, "age": "9"}])

        cart = make_cart()
        assert cart.items[0].age == 9
        assert cart.validate().valid
        assert json.loads(cart_store.snapshots["default"])[0]["age"] == 9

    def test_unreadable_age_discards_snapshot(self, make_cart, cart_store, student):
        make_cart().add_student(student())
        record = json.loads(cart_store.snapshots["default"])[0]
        cart_store.snapshots["default"] = json.dumps([{**record, "age": "ni"}])

        cart = make_cart()
        assert not cart.has_items
        assert cart.validate().message == "Handlekurven er tom"
        assert "default" not in cart_store.snapshots

    def test_validate_does_not_mutate(self, cart, cart_store, student):
        cart.add_student(student())
        before = cart_store.snapshots["default"]
        cart.validate()
        assert cart_store.snapshots["default"] == before


class TestQueries:
    """Tests for cart read helpers."""

    def test_empty_summary(self, cart):
        summary = cart.summary()
        assert summary.item_count == 0
        assert summary.total == 0
        assert not summary.has_items

    def test_class_count_and_family_flags(self, cart, student):
        cart.add_student(student("Ola", "Hansen", selection=("jazz", "hiphop")))
        assert cart.total_class_count() == 2
        assert not cart.can_apply_family_discount()
        assert not cart.has_potential_family_discount()

        cart.add_student(student("Kari", "Hansen"))
        assert cart.total_class_count() == 3
        assert cart.can_apply_family_discount()
        assert cart.has_potential_family_discount()

    def test_detect_family(self, cart, student):
        cart.add_student(student("Ola", "Hansen"))
        assert cart.detect_family("Kari", "Hansen").is_likely_family

    def test_analytics(self, cart, student):
        cart.add_student(student("Ola", "Hansen", selection=("jazz", "hiphop")))
        cart.add_student(student("Kari", "Hansen"))

        analytics = cart.analytics()
        assert analytics.total_students == 2
        assert analytics.total_classes == 3
        assert analytics.average_classes_per_student == 1.5
        assert analytics.family_discount_eligible == 1
        assert analytics.estimated_savings == 20_000 + 25_500
        assert analytics.cart_value == 320_000 + 144_500
