"""This module defines the basic types of the App resource,  trying to
formalize the distinction between a field which was left out of a request
and a field which was explicitly sent empty.
"""

from dataclasses import dataclass, replace

# -----------------------------------------------------------------------------------------
#                                identifiers
# -----------------------------------------------------------------------------------------


class StrComparable(str):
    """Base class for making str subclasses comparable to themselves or str
    instances.   Note that intentionally not even subclasses are comparable,
    only a class and str.
    """

    def _check_class(self, other):
        """Comparable if type(other) is type(self) or str.   TypeError otherwise."""
        if type(other) not in [str, type(None), type(self)]:
            raise TypeError(f"{type(self)} cannot be compared to {type(other)}.")

    def __eq__(self, other):
        self._check_class(other)
        return str(self) == str(other)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(str(self))


class AppId(StrComparable):
    """Server generated identifier of an App.  Never empty and kept exactly as
    given,  so " 1" and "1" are different ids.
    """

    def __new__(cls, value: str):
        if not isinstance(value, str):
            raise TypeError("App id is not a string.")
        if not value:
            raise ValueError("App id must not be empty.")
        return super().__new__(cls, value)


# -----------------------------------------------------------------------------------------
#                                optional request fields
# -----------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Present:
    """A request field which was sent,  possibly as the empty string."""

    value: str


class Absent:
    """A request field which was not sent at all.  Use the ABSENT singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = Absent()

Field = Present | Absent


def field_of(value: str | None) -> Field:
    """Convert a plain Python value,  None meaning not sent,  to a Field."""
    if value is None:
        return ABSENT
    if isinstance(value, (Present, Absent)):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Field value must be a string, not {type(value).__name__}.")
    return Present(value)


# -----------------------------------------------------------------------------------------
#                                resource and payload
# -----------------------------------------------------------------------------------------


@dataclass
class App:
    """The App resource as stored and as returned to clients."""

    id: AppId
    label: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": str(self.id),
            "label": self.label,
            "description": self.description,
        }

    def updated(self, request: "AppUpdateRequest") -> "App":
        """Return a copy with every present field of `request` applied."""
        changes = {}
        if isinstance(request.label, Present):
            changes["label"] = request.label.value
        if isinstance(request.description, Present):
            changes["description"] = request.description.value
        return replace(self, **changes)


@dataclass(frozen=True)
class AppUpdateRequest:
    """Payload of POST, PUT and PATCH.  Each field is Present(value) or ABSENT."""

    label: Field = ABSENT
    description: Field = ABSENT

    @classmethod
    def of(cls, label: str | None = None, description: str | None = None):
        """Build a request from plain strings,  None meaning not sent."""
        return cls(label=field_of(label), description=field_of(description))

    def missing_fields(self) -> list[str]:
        """Names of the required fields which are absent,  in checking order."""
        missing = []
        if isinstance(self.label, Absent):
            missing.append("Label")
        if isinstance(self.description, Absent):
            missing.append("Description")
        return missing

    def to_dict(self) -> dict[str, str]:
        """JSON body form,  absent fields omitted."""
        d = {}
        if isinstance(self.label, Present):
            d["label"] = self.label.value
        if isinstance(self.description, Present):
            d["description"] = self.description.value
        return d


# -----------------------------------------------------------------------------------------


__all__ = [
    "AppId",
    "Present",
    "Absent",
    "ABSENT",
    "Field",
    "field_of",
    "App",
    "AppUpdateRequest",
]
