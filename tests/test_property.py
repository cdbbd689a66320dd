import pytest

from gateway_addon.domain.property.errors import (
    AboveMaximum,
    BelowMinimum,
    InvalidEnumValue,
    NotAMultiple,
    PropertyValidationError,
    ReadOnlyViolation,
)
from gateway_addon.domain.property.property import Property, is_multiple_of, render_enum_value


class TestBooleanCoercion:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (0, False),
            ("", False),
            (None, False),
            (1, True),
            ("x", True),
            ({"a": 1}, True),
            (object(), True),
            (True, True),
            (False, False),
        ],
    )
    @pytest.mark.asyncio
    async def test_boolean_cache_is_strict(self, notifier, raw, expected):
        prop = Property(notifier, "on", {"type": "boolean"})

        result = await prop.request_value_change(raw)

        assert result is expected
        assert await prop.read_cached_value() is expected

    def test_set_cached_value_coerces_without_notifying(self, notifier):
        prop = Property(notifier, "on", {"type": "boolean"})

        assert prop.set_cached_value("yes") is True
        assert prop.value is True
        notifier.notify_property_changed.assert_not_called()

    def test_non_boolean_values_are_stored_as_given(self, notifier):
        prop = Property(notifier, "color", {"type": "string"})

        assert prop.set_cached_value("#ff0000") == "#ff0000"


class TestReadPath:

    @pytest.mark.asyncio
    async def test_read_before_write_is_none(self, notifier):
        prop = Property(notifier, "level", {"type": "integer"})

        assert await prop.read_cached_value() is None
        assert prop.prev_get_value is None

    @pytest.mark.asyncio
    async def test_read_records_prev_get_value(self, notifier):
        prop = Property(notifier, "level", {"type": "integer"})
        prop.set_cached_value(7)

        assert prop.prev_get_value is None
        assert await prop.read_cached_value() == 7
        assert prop.prev_get_value == 7


class TestChangeNotification:

    @pytest.mark.asyncio
    async def test_equivalent_boolean_write_notifies_once(self, notifier):
        prop = Property(notifier, "on", {"type": "boolean"})

        await prop.request_value_change(1)
        await prop.request_value_change(True)

        notifier.notify_property_changed.assert_called_once_with(prop)

    @pytest.mark.asyncio
    async def test_every_change_notifies(self, notifier):
        prop = Property(notifier, "level", {"type": "integer"})

        await prop.request_value_change(1)
        await prop.request_value_change(2)
        await prop.request_value_change(2)

        assert notifier.notify_property_changed.call_count == 2

    def test_set_cached_value_and_notify_reports_change(self, notifier):
        prop = Property(notifier, "level", {"type": "integer"})

        assert prop.set_cached_value_and_notify(5) is True
        assert prop.set_cached_value_and_notify(5) is False

    def test_switching_between_bool_and_number_is_a_change(self, notifier):
        prop = Property(notifier, "level", {"type": "integer"})
        prop.set_cached_value(1)

        assert prop.set_cached_value_and_notify(True) is True

    def test_notification_sees_updated_value(self, notifier):
        prop = Property(notifier, "level", {"type": "integer"})
        seen = []
        notifier.notify_property_changed.side_effect = lambda p: seen.append(p.value)

        prop.set_cached_value_and_notify(9)

        assert seen == [9]


class TestValidation:

    @pytest.mark.asyncio
    async def test_read_only_rejects_everything(self, notifier):
        prop = Property(notifier, "temp", {"type": "number", "readOnly": True})
        prop.set_cached_value(21.5)

        for value in (21.5, 0, "x", None):
            with pytest.raises(ReadOnlyViolation, match="Read-only property"):
                await prop.request_value_change(value)

        assert prop.value == 21.5
        notifier.notify_property_changed.assert_not_called()

    @pytest.mark.asyncio
    async def test_below_minimum(self, notifier):
        prop = Property(notifier, "level", {"type": "integer", "minimum": 10})
        prop.set_cached_value(20)

        with pytest.raises(BelowMinimum, match="Value less than minimum: 10"):
            await prop.request_value_change(9)

        assert prop.value == 20
        assert await prop.request_value_change(10) == 10

    @pytest.mark.asyncio
    async def test_above_maximum(self, notifier):
        prop = Property(notifier, "level", {"type": "integer", "maximum": 100})

        with pytest.raises(AboveMaximum, match="Value greater than maximum: 100"):
            await prop.request_value_change(101)

        assert prop.value is None
        assert await prop.request_value_change(100) == 100

    @pytest.mark.asyncio
    async def test_numeric_strings_are_range_checked(self, notifier):
        prop = Property(notifier, "level", {"type": "string", "minimum": 0})

        with pytest.raises(BelowMinimum):
            await prop.request_value_change("-1")

    @pytest.mark.asyncio
    async def test_non_numeric_values_skip_range_checks(self, notifier):
        prop = Property(notifier, "label", {"type": "string", "minimum": 0, "maximum": 1})

        assert await prop.request_value_change("abc") == "abc"

    @pytest.mark.parametrize(
        "multiple_of, value, accepted",
        [
            (0.1, 0.3, True),
            (0.1, 0.7, True),
            (0.01, 1.15, True),
            (5, 45, True),
            (5, 42, False),
            (0.1, 0.35, False),
            (0.5, 2.5, True),
            (2, 1_000_000_000, True),
            (2, 1_000_000_001, False),
            (3, 3 * 10**18 + 1, False),
            (7, 7 * 10**30, True),
            (0.5, 1e12 + 0.5, True),
            (0.5, 1e12 + 0.25, False),
            (0.1, 1234567.8, True),
        ],
    )
    @pytest.mark.asyncio
    async def test_multiple_of(self, notifier, multiple_of, value, accepted):
        prop = Property(notifier, "level", {"type": "number", "multipleOf": multiple_of})

        if accepted:
            assert await prop.request_value_change(value) == value
        else:
            with pytest.raises(NotAMultiple, match=f"Value is not a multiple of: {multiple_of}"):
                await prop.request_value_change(value)
            assert prop.value is None

    @pytest.mark.asyncio
    async def test_multiple_of_rejects_non_numeric(self, notifier):
        prop = Property(notifier, "level", {"type": "number", "multipleOf": 2})

        with pytest.raises(NotAMultiple):
            await prop.request_value_change("even")

    def test_multiple_of_zero_never_matches(self):
        assert is_multiple_of(4, 0) is False

    @pytest.mark.asyncio
    async def test_multiple_of_integer_too_large_for_float(self, notifier):
        exact = Property(notifier, "count", {"type": "integer", "multipleOf": 5})
        fractional = Property(notifier, "count", {"type": "number", "multipleOf": 0.5})
        huge = 10**400

        with pytest.raises(NotAMultiple):
            await exact.request_value_change(huge + 1)
        assert await exact.request_value_change(huge) == huge

        with pytest.raises(NotAMultiple):
            await fractional.request_value_change(huge)
        assert fractional.value is None

    def test_large_integers_use_exact_remainder(self):
        assert is_multiple_of(2**53 + 2, 2) is True
        assert is_multiple_of(2**53 + 1, 2) is False
        assert is_multiple_of(-1_000_000_001, 2) is False

    @pytest.mark.asyncio
    async def test_enum_membership(self, notifier):
        prop = Property(notifier, "mode", {"type": "string", "enum": ["night", "day", "auto"]})

        assert await prop.request_value_change("auto") == "auto"

        with pytest.raises(InvalidEnumValue, match="Invalid enum value") as exc_info:
            await prop.request_value_change("dusk")

        assert "dusk" in str(exc_info.value)
        assert prop.value == "auto"

    @pytest.mark.asyncio
    async def test_enum_order_does_not_matter(self, notifier):
        forward = Property(notifier, "speed", {"type": "integer", "enum": ["1", "2", "3"]})
        backward = Property(notifier, "speed", {"type": "integer", "enum": ["3", "2", "1"]})

        assert await forward.request_value_change(2) == 2
        assert await backward.request_value_change(2) == 2

    @pytest.mark.asyncio
    async def test_enum_uses_string_rendering(self, notifier):
        prop = Property(notifier, "flag", {"type": "string", "enum": ["true", "1"]})

        assert await prop.request_value_change(True) is True
        assert await prop.request_value_change(1.0) == 1.0

        with pytest.raises(InvalidEnumValue):
            await prop.request_value_change(False)

    @pytest.mark.asyncio
    async def test_empty_enum_accepts_anything(self, notifier):
        prop = Property(notifier, "mode", {"type": "string", "enum": []})

        assert await prop.request_value_change("anything") == "anything"

    @pytest.mark.asyncio
    async def test_checks_run_in_order(self, notifier):
        prop = Property(
            notifier,
            "level",
            {"type": "integer", "readOnly": True, "minimum": 10, "enum": ["50"]},
        )

        with pytest.raises(ReadOnlyViolation):
            await prop.request_value_change(1)

        prop.read_only = False
        with pytest.raises(BelowMinimum):
            await prop.request_value_change(1)

        with pytest.raises(InvalidEnumValue):
            await prop.request_value_change(20)

    @pytest.mark.asyncio
    async def test_rejections_share_a_base_class(self, notifier):
        prop = Property(notifier, "level", {"type": "integer", "maximum": 1})

        with pytest.raises(PropertyValidationError) as exc_info:
            await prop.request_value_change(2)

        assert exc_info.value.value == 2
        assert exc_info.value.bound == 1

    def test_render_enum_value(self):
        assert render_enum_value(None) == "null"
        assert render_enum_value(False) == "false"
        assert render_enum_value(3.0) == "3"
        assert render_enum_value(3.5) == "3.5"
        assert render_enum_value("on") == "on"


class TestDeviceBackedOverride:

    @pytest.mark.asyncio
    async def test_override_keeps_notification_contract(self, notifier):

        class EchoingProperty(Property):
            """Pretends the hardware clamps every write to 50."""

            async def request_value_change(self, value):
                self.validate(value)
                self.set_cached_value_and_notify(min(value, 50))
                return self.value

        prop = EchoingProperty(notifier, "level", {"type": "integer", "maximum": 100})

        assert await prop.request_value_change(80) == 50
        assert await prop.request_value_change(60) == 50
        notifier.notify_property_changed.assert_called_once_with(prop)
