"""Result types produced by the two evaluators.

Lot acceptance (AQL) and sample inspection (dimensional tolerance) use
different severity policies, so each has its own status enum. All results are
immutable and fully derived from the evaluator inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from ..utils.aql import SamplingPlanRow


class MeasurementStatus(str, Enum):
    PASS = "Pass"
    WITHIN_TOLERANCE = "WithinTolerance"
    FAIL = "Fail"


class SampleStatus(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"


class InspectionProgress(str, Enum):
    """Lifecycle of a sample inspection as its measurements are filled in."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    PASSED = "Passed"
    FAILED = "Failed"


class LotStatus(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"
    REWORK = "Rework"


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


@dataclass(frozen=True)
class DefectTotals:
    critical: int = 0
    major: int = 0
    minor: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"critical": self.critical, "major": self.major, "minor": self.minor}


@dataclass(frozen=True)
class MeasurementResult:
    variance: float
    status: MeasurementStatus
    point_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        doc = {"variance": self.variance, "status": self.status.value}
        if self.point_id is not None:
            doc["id"] = self.point_id
        return doc


@dataclass(frozen=True)
class SampleInspectionVerdict:
    status: SampleStatus
    results: Tuple[MeasurementResult, ...] = field(default_factory=tuple)

    @property
    def failed_points(self) -> List[str]:
        return [r.point_id for r in self.results if r.status is MeasurementStatus.FAIL and r.point_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class LotVerdict:
    sample_size: int
    totals: DefectTotals
    status: LotStatus
    plan_used: "SamplingPlanRow"
    reasons: Tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return self.status is LotStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sampleSize": self.sample_size,
            "totals": self.totals.to_dict(),
            "status": self.status.value,
            "planUsed": self.plan_used.to_dict(),
            "reasons": list(self.reasons),
        }
