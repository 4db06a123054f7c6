"""
TrackedValue: a billable quantity that remembers where it came from.

value is always derived: the user's actual_value when the field is overridden,
otherwise the system's estimated_value. Recalculation only ever touches
estimated_value; the override pair belongs to the user.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _resolve(estimated, actual, is_overridden: bool):
    if is_overridden and actual is not None:
        return actual
    return estimated


class TrackedValue(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    value: T
    initial_value: T
    estimated_value: T
    actual_value: Optional[T] = None
    is_overridden: bool = False
    unit: Optional[str] = None

    @model_validator(mode="after")
    def _value_matches_source(self):
        expected = _resolve(self.estimated_value, self.actual_value, self.is_overridden)
        if self.value != expected:
            raise ValueError(
                f"value {self.value!r} does not match its source {expected!r} "
                f"(is_overridden={self.is_overridden})"
            )
        return self


def _rebuild(existing: TrackedValue, **changes: Any) -> TrackedValue:
    fields = {
        "initial_value": existing.initial_value,
        "estimated_value": existing.estimated_value,
        "actual_value": existing.actual_value,
        "is_overridden": existing.is_overridden,
        "unit": existing.unit,
    }
    fields.update(changes)
    fields["value"] = _resolve(fields["estimated_value"], fields["actual_value"], fields["is_overridden"])
    return existing.__class__(**fields)


def create_tracked_value(estimated, unit: Optional[str] = None) -> TrackedValue:
    """First system estimate for a quantity."""
    return TrackedValue(
        value=estimated,
        initial_value=estimated,
        estimated_value=estimated,
        actual_value=None,
        is_overridden=False,
        unit=unit,
    )


def refresh_tracked_value(existing: TrackedValue, estimated) -> TrackedValue:
    """New system estimate. An existing override keeps winning."""
    return _rebuild(existing, estimated_value=estimated)


def override_tracked_value(existing: TrackedValue, actual) -> TrackedValue:
    """User sets the actual value."""
    return _rebuild(existing, actual_value=actual, is_overridden=True)


def clear_override(existing: TrackedValue) -> TrackedValue:
    return _rebuild(existing, actual_value=None, is_overridden=False)


def merge(old: Optional[TrackedValue], fresh: TrackedValue) -> TrackedValue:
    """
    Combine a persisted value with a freshly computed one.

    Overridden: keep the user's value and override flag, pick up the new estimate.
    Not overridden: take the fresh value but keep the very first estimate as initial_value.
    """
    if old is None:
        return fresh
    if old.is_overridden:
        return _rebuild(old, estimated_value=fresh.estimated_value, unit=old.unit or fresh.unit)
    return _rebuild(fresh, initial_value=old.initial_value)
