"""Measurement point model

A measurement point is one point of measure (POM) on a sample garment: the
designer's specified value and tolerance are known up front, the actual value
is filled in by the inspector. Until then the point is pending and has no
result.
"""

from marshmallow import Schema, fields, validate, post_load

from ..utils.errors import InvalidInputError
from ..utils.tolerance import ToleranceEvaluator
from ..utils.validators import require_number


class MeasurementPointSchema(Schema):
    """Marshmallow schema for measurement point payloads (camelCase on the wire)"""

    id = fields.Str(required=True, validate=validate.Length(min=1, max=64))
    point_of_measure = fields.Str(
        required=True, data_key="pointOfMeasure", validate=validate.Length(min=1, max=255)
    )
    designer_measurement = fields.Float(required=True, data_key="designerMeasurement", allow_nan=False)
    tolerance = fields.Float(required=True, allow_nan=False, validate=validate.Range(min=0.0))
    actual_measurement = fields.Float(
        load_default=None, allow_none=True, data_key="actualMeasurement", allow_nan=False
    )

    @post_load
    def make_point(self, data, **kwargs):
        return MeasurementPoint(**data)


class MeasurementPoint:
    """One point of measure on a sample"""

    def __init__(self, **kwargs):
        self.id = kwargs.get("id")
        self.point_of_measure = kwargs.get("point_of_measure")
        self.designer_measurement = kwargs.get("designer_measurement", 0)
        self.tolerance = kwargs.get("tolerance", 0)
        # None until the inspector records a value
        self.actual_measurement = kwargs.get("actual_measurement")

    @classmethod
    def from_size_spec(cls, point_of_measure, size_values, tolerance, size="M", point_id=None):
        """Build a point from a size-graded spec, e.g. ``{"S": 50, "M": 52}``.

        Uses the requested size when graded for it, otherwise the first size
        listed; a point with no graded sizes gets a designer value of 0.
        The tolerance is required and must be a finite number >= 0.
        """
        tolerance = require_number(tolerance, "tolerance")
        if tolerance < 0:
            raise InvalidInputError(f"tolerance must be >= 0, got {tolerance}", field="tolerance")
        sizes = list(size_values or {})
        target = size if size in sizes else (sizes[0] if sizes else None)
        designer = size_values[target] if target is not None else 0
        return cls(
            id=point_id or point_of_measure,
            point_of_measure=point_of_measure,
            designer_measurement=designer,
            tolerance=tolerance,
        )

    @property
    def is_complete(self) -> bool:
        return self.actual_measurement is not None

    def record(self, actual_measurement):
        """Record the inspector's reading and return the evaluated result."""
        result = ToleranceEvaluator.evaluate(
            self.designer_measurement, actual_measurement, self.tolerance, point_id=self.id
        )
        self.actual_measurement = actual_measurement
        return result

    def evaluate(self):
        return ToleranceEvaluator.evaluate(
            self.designer_measurement, self.actual_measurement, self.tolerance, point_id=self.id
        )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def to_dict(self):
        doc = {
            "id": self.id,
            "pointOfMeasure": self.point_of_measure,
            "designerMeasurement": self.designer_measurement,
            "tolerance": self.tolerance,
            "actualMeasurement": self.actual_measurement,
        }
        if self.is_complete:
            result = self.evaluate()
            doc["variance"] = result.variance
            doc["status"] = result.status.value
        else:
            doc["variance"] = None
            doc["status"] = None
        return doc

    @classmethod
    def from_dict(cls, data: dict):
        return MeasurementPointSchema().load(data)
