"""
TrackedValue tests.

Tests:
1-2. Creation and serialization aliases
3-5. Override / refresh / clear
6-8. Merge on re-rate
9.   value must match its source
"""

import pytest
from pydantic import ValidationError

from movequote.tracked_value import (
    TrackedValue, clear_override, create_tracked_value, merge, override_tracked_value,
    refresh_tracked_value,
)


def test_create_sets_all_three_to_estimate():
    tracked = create_tracked_value(4.75, "hours")
    assert tracked.value == tracked.initial_value == tracked.estimated_value == 4.75
    assert tracked.actual_value is None
    assert not tracked.is_overridden


def test_serializes_camel_case():
    data = create_tracked_value(169, "$/hr").model_dump(by_alias=True)
    assert data == {
        "value": 169, "initialValue": 169, "estimatedValue": 169,
        "actualValue": None, "isOverridden": False, "unit": "$/hr",
    }
    assert TrackedValue.model_validate(data).estimated_value == 169


def test_override_wins():
    tracked = override_tracked_value(create_tracked_value(3), 4)
    assert tracked.value == 4
    assert tracked.estimated_value == 3
    assert tracked.is_overridden


def test_refresh_keeps_override():
    tracked = refresh_tracked_value(override_tracked_value(create_tracked_value(3), 4), 5)
    assert tracked.value == 4
    assert tracked.estimated_value == 5
    assert tracked.initial_value == 3


def test_clear_override_falls_back_to_estimate():
    tracked = clear_override(override_tracked_value(create_tracked_value(3), 4))
    assert tracked.value == 3
    assert tracked.actual_value is None
    assert not tracked.is_overridden


def test_merge_without_old_returns_fresh():
    fresh = create_tracked_value(10)
    assert merge(None, fresh) is fresh


def test_merge_overridden_keeps_user_value():
    old = override_tracked_value(create_tracked_value(5, "hours"), 6)
    merged = merge(old, create_tracked_value(7, "hours"))
    assert merged.value == 6
    assert merged.actual_value == 6
    assert merged.estimated_value == 7
    assert merged.initial_value == 5
    assert merged.is_overridden


def test_merge_plain_takes_fresh_and_keeps_initial():
    old = refresh_tracked_value(create_tracked_value(5), 6)
    merged = merge(old, create_tracked_value(7))
    assert merged.value == 7
    assert merged.estimated_value == 7
    assert merged.initial_value == 5


def test_inconsistent_value_rejected():
    with pytest.raises(ValidationError):
        TrackedValue(value=9, initial_value=3, estimated_value=3, actual_value=None, is_overridden=False)
    with pytest.raises(ValidationError):
        TrackedValue(value=3, initial_value=3, estimated_value=3, actual_value=4, is_overridden=True)
