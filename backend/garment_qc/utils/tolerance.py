"""Dimensional tolerance checks used during sample development.

- ToleranceEvaluator: compare one actual garment measurement against the
  designer's spec and tolerance band.
- InspectionAggregator: roll a sample's per-point results up into a single
  Passed/Failed verdict. Only results outside the tolerance band reject a
  sample; a WithinTolerance deviation is accepted as conforming.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..models.verdict import (
    InspectionProgress,
    MeasurementResult,
    MeasurementStatus,
    SampleInspectionVerdict,
    SampleStatus,
)
from .errors import IncompleteMeasurementError, InvalidInputError
from .validators import require_number

logger = logging.getLogger(__name__)

# Floating point guard for an exact match; not part of the tolerance band.
MEASUREMENT_EPSILON = 0.001


class ToleranceEvaluator:
    """Variance and tri-state status for a single point of measure."""

    @staticmethod
    def evaluate(designer_measurement, actual_measurement, tolerance, point_id=None) -> MeasurementResult:
        if actual_measurement is None:
            raise IncompleteMeasurementError([point_id] if point_id is not None else [])

        designer = require_number(designer_measurement, "designerMeasurement")
        actual = require_number(actual_measurement, "actualMeasurement")
        band = require_number(tolerance, "tolerance")
        if band < 0:
            raise InvalidInputError(f"tolerance must be >= 0, got {band}", field="tolerance")

        variance = actual - designer
        deviation = abs(variance)
        if deviation <= MEASUREMENT_EPSILON:
            status = MeasurementStatus.PASS
        elif deviation <= band:
            status = MeasurementStatus.WITHIN_TOLERANCE
        else:
            status = MeasurementStatus.FAIL

        return MeasurementResult(variance=variance, status=status, point_id=point_id)


class InspectionAggregator:
    """Combine per-point results into a sample inspection verdict."""

    @staticmethod
    def aggregate(results: Iterable[MeasurementResult]) -> SampleInspectionVerdict:
        collected = tuple(results)
        for r in collected:
            if isinstance(r, MeasurementResult):
                continue
            # A pending reading, either as a bare None or an unmeasured point
            if r is None or getattr(r, "is_complete", True) is False:
                raise IncompleteMeasurementError([getattr(r, "id", None)])
            raise InvalidInputError(
                f"aggregate expects MeasurementResult values, got {type(r).__name__}", field="results"
            )

        any_fail = any(r.status is MeasurementStatus.FAIL for r in collected)
        status = SampleStatus.FAILED if any_fail else SampleStatus.PASSED
        logger.debug("Sample verdict %s over %d measurement(s)", status.value, len(collected))
        return SampleInspectionVerdict(status=status, results=collected)

    @classmethod
    def evaluate_points(cls, points: Sequence) -> SampleInspectionVerdict:
        """Evaluate complete MeasurementPoints in order and aggregate them.

        All points must carry an actual measurement; otherwise an
        ``IncompleteMeasurementError`` listing the pending point ids is raised
        before anything is evaluated.
        """
        pending = [p.id for p in points if not p.is_complete]
        if pending:
            raise IncompleteMeasurementError(pending)
        return cls.aggregate(p.evaluate() for p in points)

    @classmethod
    def progress(cls, points: Sequence) -> InspectionProgress:
        recorded = sum(1 for p in points if p.is_complete)
        if recorded == 0:
            return InspectionProgress.PENDING
        if recorded < len(points):
            return InspectionProgress.IN_PROGRESS
        verdict = cls.evaluate_points(points)
        return InspectionProgress(verdict.status.value)
