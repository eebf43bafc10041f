"""
Unit tests for the error collection and the recorder helpers.

Tests coverage:
- ErrorCollection - add, add_base, merge, full_messages, lookups
- ErrorsMixin - lazy collection on plain and ORM objects
- RecordInvalid - message built from the record's errors
- record_failure() / merge_invalid_record()
"""

from transactionable.exceptions import RecordInvalid
from transactionable.models import ErrorCollection, humanize
from transactionable.services.transactions.recorder import merge_invalid_record, record_failure
from tests.models import FarOutError, IceCream, PlainVanillaIceCream


class TestErrorCollection:
    """Test message bookkeeping."""

    def test_field_messages_are_humanized(self):
        errors = ErrorCollection()
        errors.add("topping", "can't be blank")

        assert errors.full_messages == ["Topping can't be blank"]

    def test_base_messages_are_verbatim(self):
        errors = ErrorCollection()
        errors.add_base("FarOutError")

        assert errors.full_messages == ["FarOutError"]

    def test_order_is_preserved(self):
        errors = ErrorCollection()
        errors.add_base("first")
        errors.add("flavor", "is unknown")

        assert errors.full_messages == ["first", "Flavor is unknown"]
        assert errors.to_dict() == {"base": ["first"], "flavor": ["is unknown"]}

    def test_merge_copies_entries(self):
        source = ErrorCollection()
        source.add("topping", "can't be blank")
        destination = ErrorCollection()
        destination.add_base("already here")

        destination.merge(source)

        assert destination.full_messages == ["already here", "Topping can't be blank"]
        assert len(source) == 1

    def test_merge_with_itself_is_a_no_op(self):
        errors = ErrorCollection()
        errors.add_base("once")

        errors.merge(errors)

        assert errors.full_messages == ["once"]

    def test_lookup_by_attribute(self):
        errors = ErrorCollection()
        errors.add("topping", "can't be blank")
        errors.add("topping", "is too sweet")

        assert errors["topping"] == ["can't be blank", "is too sweet"]
        assert errors["flavor"] == []

    def test_clear(self):
        errors = ErrorCollection()
        errors.add_base("gone")
        errors.clear()

        assert len(errors) == 0

    def test_humanize(self):
        assert humanize("first_name") == "First name"
        assert humanize("owner_id") == "Owner"


class TestErrorsMixin:
    """Test the lazily created collection."""

    def test_same_collection_every_access(self):
        cone = PlainVanillaIceCream()

        assert cone.errors is cone.errors

    def test_orm_instance_gets_collection(self):
        cone = IceCream(flavor="mint")
        cone.errors.add_base("noted")

        assert cone.errors.full_messages == ["noted"]


class TestRecordInvalid:
    """Test the validation failure error."""

    def test_carries_record_and_messages(self):
        cone = PlainVanillaIceCream()
        cone.valid()

        error = RecordInvalid(cone)

        assert error.record is cone
        assert str(error) == "Validation failed: Topping can't be blank"

    def test_valid_record(self):
        assert str(RecordInvalid(PlainVanillaIceCream(topping="sprinkles"))) == "Validation failed"


class TestRecorder:
    """Test recording helpers."""

    def test_record_failure_adds_type_name(self):
        cone = PlainVanillaIceCream()

        assert record_failure(cone, FarOutError("with a message")) is True
        assert cone.errors.full_messages == ["FarOutError"]

    def test_record_failure_without_target(self):
        assert record_failure(None, FarOutError()) is False

    def test_merge_from_other_record(self):
        invalid = PlainVanillaIceCream()
        invalid.valid()
        target = PlainVanillaIceCream(topping="fudge")

        assert merge_invalid_record(target, invalid) is True
        assert target.errors.full_messages == ["Topping can't be blank"]

    def test_merge_skipped_for_same_record(self):
        cone = PlainVanillaIceCream()
        cone.valid()

        assert merge_invalid_record(cone, cone) is False
        assert cone.errors.full_messages == ["Topping can't be blank"]

    def test_merge_skipped_without_target(self):
        invalid = PlainVanillaIceCream()
        invalid.valid()

        assert merge_invalid_record(None, invalid) is False
