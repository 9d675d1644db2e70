"""Form binding and the success/failure result every boundary consumes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Generic, Optional, TypeVar, Union
from urllib.parse import urlparse

from ..errors import ValidationFailed

T = TypeVar("T")


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Validation succeeded; ``value`` is the typed payload."""

    value: T


@dataclass(frozen=True)
class Invalid:
    """Validation failed; ``errors`` maps field -> messages."""

    errors: dict[str, list[str]]


FormResult = Union[Valid[T], Invalid]


def unwrap(result: FormResult[T]) -> T:
    """Return the payload or raise ``ValidationFailed`` with the field errors."""

    if isinstance(result, Invalid):
        raise ValidationFailed(result.errors)
    return result.value


@dataclass
class BaseForm(Generic[T]):
    """Binds raw request data and produces a ``FormResult``.

    Subclasses list their ``FIELDS`` and implement ``clean`` which reads
    ``raw_data``, records problems with ``_add_error`` and returns the payload.
    """

    FIELDS: ClassVar[tuple[str, ...]] = ()

    raw_data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None):
        """Create a form populated from request data."""

        data = data or {}
        return cls(raw_data={key: data.get(key) for key in cls.FIELDS if key in data})

    def validate(self) -> FormResult[T]:
        self.errors.clear()
        payload = self.clean()
        if self.errors:
            return Invalid(errors={k: list(v) for k, v in self.errors.items()})
        return Valid(payload)

    def clean(self) -> T:  # pragma: no cover - abstract
        raise NotImplementedError

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    # Field readers -------------------------------------------------------

    def _text(
        self,
        name: str,
        *,
        required: bool = False,
        min_length: int = 0,
        max_length: int | None = None,
        label: str | None = None,
    ) -> Optional[str]:
        label = label or name.replace("_", " ").capitalize()
        value = self.raw_data.get(name)
        if value is None:
            value = ""
        if not isinstance(value, str):
            value = str(value)
        value = value.strip()
        if not value:
            if required:
                self._add_error(name, f"{label} is required.")
            return None
        if len(value) < min_length:
            self._add_error(name, f"{label} must be at least {min_length} characters.")
        if max_length is not None and len(value) > max_length:
            self._add_error(name, f"{label} must be {max_length} characters or fewer.")
        return value

    def _int(
        self,
        name: str,
        *,
        required: bool = False,
        positive: bool = False,
        label: str | None = None,
    ) -> Optional[int]:
        label = label or name.replace("_", " ").capitalize()
        value = self.raw_data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                self._add_error(name, f"{label} is required.")
            return None
        if isinstance(value, bool):
            self._add_error(name, f"{label} must be a whole number.")
            return None
        if isinstance(value, float) and not value.is_integer():
            self._add_error(name, f"{label} must be a whole number.")
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            self._add_error(name, f"{label} must be a whole number.")
            return None
        if positive and parsed <= 0:
            self._add_error(name, f"{label} must be a positive integer.")
            return None
        return parsed

    def _bool(self, name: str, *, default: bool) -> bool:
        value = self.raw_data.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        self._add_error(name, f"{name.replace('_', ' ').capitalize()} must be true or false.")
        return default

    def _choice(self, name: str, choices: tuple[str, ...], *, default: str | None = None) -> Optional[str]:
        value = self._text(name)
        if value is None:
            return default
        value = value.lower()
        if value not in choices:
            self._add_error(name, f"Must be one of: {', '.join(choices)}.")
            return default
        return value

    def _datetime(self, name: str) -> Optional[datetime]:
        value = self._text(name)
        if value is None:
            return None
        try:
            if len(value) == 10:
                return datetime.strptime(value, "%Y-%m-%d")
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            self._add_error(name, "Enter a valid date (YYYY-MM-DD or ISO 8601).")
            return None

    def _url(self, name: str, *, max_length: int = 500) -> Optional[str]:
        value = self._text(name, max_length=max_length)
        if value is None:
            return None
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            self._add_error(name, "Must be a valid URL (e.g., https://example.com/template).")
        return value
