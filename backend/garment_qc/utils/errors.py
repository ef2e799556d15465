"""Exceptions raised by the quality decision engine."""


class QualityEngineError(Exception):
    """Base class for every engine error"""


class InvalidInputError(QualityEngineError, ValueError):
    """Input that is out of the engine's domain (negative counts, bad lot size...)"""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field


class IncompleteMeasurementError(QualityEngineError):
    """Raised when a measurement point without an actual value is evaluated."""

    def __init__(self, point_ids):
        self.point_ids = list(point_ids)
        listed = ", ".join(str(pid) for pid in self.point_ids) or "<unknown>"
        super().__init__(f"Actual measurement missing for point(s): {listed}")


class SamplingPlanError(QualityEngineError):
    """A sampling plan table that does not cover its lot-size domain cleanly"""
