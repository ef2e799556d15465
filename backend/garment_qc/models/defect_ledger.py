"""Defect ledger model

A ledger is the inspector's tally for one AQL inspection session: one entry
per (category, inspection point), each holding separate critical/major/minor
counts. Entries with all-zero counts are kept; the entry set doubles as the
record of which points were inspected.

Wire format (storage/transmission by the caller) is a JSON array::

    [{"category": "FABRIC", "inspectionPoint": "Woven / Knit Material",
      "critical": 0, "major": 1, "minor": 2}, ...]

``point`` and ``inspection_point`` are accepted as aliases for
``inspectionPoint`` when reading.
"""

import json

from marshmallow import Schema, fields, validate, pre_load, ValidationError

from .verdict import DefectTotals, Severity
from ..utils.errors import InvalidInputError
from ..utils.validators import MAX_LABEL_LENGTH, is_label, require_count, require_label

POINT_KEY_ALIASES = ("point", "inspection_point")


def _label(value):
    # Same rule as DefectLedger.upsert, so a serialized ledger always reads back
    if not is_label(value):
        raise ValidationError(f"Must be a non-blank string of at most {MAX_LABEL_LENGTH} characters.")


class DefectEntrySchema(Schema):
    """Marshmallow schema for a serialized defect entry"""

    category = fields.Str(required=True, validate=_label)
    inspection_point = fields.Str(required=True, data_key="inspectionPoint", validate=_label)
    critical = fields.Int(strict=True, load_default=0, validate=validate.Range(min=0))
    major = fields.Int(strict=True, load_default=0, validate=validate.Range(min=0))
    minor = fields.Int(strict=True, load_default=0, validate=validate.Range(min=0))

    @pre_load
    def unify_point_key(self, data, **kwargs):
        if isinstance(data, dict) and "inspectionPoint" not in data:
            for alias in POINT_KEY_ALIASES:
                if alias in data:
                    data = dict(data)
                    data["inspectionPoint"] = data.pop(alias)
                    break
        return data


class DefectEntry:
    """Defect counts for one inspection point"""

    def __init__(self, **kwargs):
        self.category = kwargs.get("category")
        self.inspection_point = kwargs.get("inspection_point")
        self.critical = kwargs.get("critical", 0)
        self.major = kwargs.get("major", 0)
        self.minor = kwargs.get("minor", 0)

    @property
    def key(self):
        return (self.category, self.inspection_point)

    def to_dict(self):
        return {
            "category": self.category,
            "inspectionPoint": self.inspection_point,
            "critical": self.critical,
            "major": self.major,
            "minor": self.minor,
        }

    def __eq__(self, other):
        if not isinstance(other, DefectEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"DefectEntry({self.category!r}, {self.inspection_point!r}, "
            f"critical={self.critical}, major={self.major}, minor={self.minor})"
        )


class DefectLedger:
    """Caller-owned accumulator of DefectEntry values keyed by (category, point)."""

    def __init__(self, entries=None):
        # dicts keep insertion order, which is the display order
        self._entries = {}
        for entry in entries or []:
            if entry.key in self._entries:
                raise InvalidInputError(
                    f"Duplicate defect entry for {entry.category!r} / {entry.inspection_point!r}",
                    field="inspectionPoint",
                )
            self._entries[entry.key] = entry

    @classmethod
    def seeded(cls, catalog):
        """One all-zero entry for every point of an inspection catalog."""
        ledger = cls()
        for category, point in catalog.iter_points():
            ledger._entries[(category, point.name)] = DefectEntry(category=category, inspection_point=point.name)
        return ledger

    # ------------------------------------------------------------------
    # Mutation / lookup
    # ------------------------------------------------------------------

    def upsert(self, category, inspection_point, field, count):
        """Set one severity count, creating the entry at zero if needed."""
        require_label(category, "category")
        require_label(inspection_point, "inspectionPoint")
        try:
            severity = Severity(field)
        except ValueError:
            raise InvalidInputError(
                f"field must be one of critical, major, minor; got {field!r}", field="field"
            ) from None
        require_count(count, severity.value)

        entry = self._entries.get((category, inspection_point))
        if entry is None:
            entry = DefectEntry(category=category, inspection_point=inspection_point)
            self._entries[entry.key] = entry
        setattr(entry, severity.value, count)
        return entry

    def get(self, category, inspection_point):
        """The recorded entry, or an all-zero (unrecorded) view of it."""
        entry = self._entries.get((category, inspection_point))
        if entry is None:
            return DefectEntry(category=category, inspection_point=inspection_point)
        return entry

    @property
    def entries(self):
        return list(self._entries.values())

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def totals(self) -> DefectTotals:
        critical = major = minor = 0
        for entry in self._entries.values():
            critical += entry.critical
            major += entry.major
            minor += entry.minor
        return DefectTotals(critical=critical, major=major, minor=minor)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def to_list(self):
        return [entry.to_dict() for entry in self._entries.values()]

    def serialize(self) -> str:
        return json.dumps(self.to_list())

    @classmethod
    def from_list(cls, data):
        if not isinstance(data, list):
            raise InvalidInputError("Defect ledger must be a JSON array of entries", field="defects")
        try:
            loaded = DefectEntrySchema(many=True).load(data)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid defect entry: {e.messages}", field="defects") from e
        return cls(DefectEntry(**item) for item in loaded)

    @classmethod
    def deserialize(cls, raw: str):
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Defect ledger is not valid JSON: {e}", field="defects") from e
        return cls.from_list(data)
