"""AQL utilities.

This module provides the lot acceptance side of the engine:

- SamplingPlanTable: given a lot size, return the sampling plan row (sample
  size and major/minor acceptance limits) from a General Inspection Level II
  table. Rows are validated when the table is built.

- LotAcceptanceEvaluator: sum a DefectLedger and decide whether the lot is
  Passed, Failed, or needs Rework. The critical limit is always 0 and is never
  read from the table.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from ..models.verdict import DefectTotals, LotStatus, LotVerdict
from .errors import InvalidInputError, SamplingPlanError
from .validators import require_count

logger = logging.getLogger(__name__)

CRITICAL_DEFECTS_ALLOWED = 0

# Reason codes attached to a verdict for display
REASON_CRITICAL_FOUND = "CRITICAL_FOUND"
REASON_MAJOR_EXCEEDED = "MAJOR_EXCEEDED"
REASON_MINOR_EXCEEDED = "MINOR_EXCEEDED"


@dataclass(frozen=True)
class SamplingPlanRow:
    min_lot_size: int
    max_lot_size: int
    sample_size: int
    max_major: int
    max_minor: int

    def contains(self, lot_size: int) -> bool:
        return self.min_lot_size <= lot_size <= self.max_lot_size

    def to_dict(self) -> Dict[str, int]:
        return {
            "minLotSize": self.min_lot_size,
            "maxLotSize": self.max_lot_size,
            "sampleSize": self.sample_size,
            "maxMajor": self.max_major,
            "maxMinor": self.max_minor,
        }


class SamplingPlanTable:
    """Ordered, immutable lot-size -> sampling plan lookup.

    The last row doubles as the open-ended top band: lots larger than its
    ``max_lot_size`` use it too.
    """

    MIN_LOT_SIZE = 2

    def __init__(self, rows: Iterable[SamplingPlanRow]):
        self._rows: Tuple[SamplingPlanRow, ...] = tuple(rows)
        self._validate()
        self._lower_bounds = [row.min_lot_size for row in self._rows]

    def _validate(self):
        if not self._rows:
            raise SamplingPlanError("Sampling plan table has no rows")
        if self._rows[0].min_lot_size != self.MIN_LOT_SIZE:
            raise SamplingPlanError(
                f"First row must start at lot size {self.MIN_LOT_SIZE}, starts at {self._rows[0].min_lot_size}"
            )
        previous = None
        for row in self._rows:
            if row.max_lot_size < row.min_lot_size:
                raise SamplingPlanError(f"Row {row} has an empty lot-size range")
            if row.sample_size < 1 or row.max_major < 0 or row.max_minor < 0:
                raise SamplingPlanError(f"Row {row} has a negative limit or no sample")
            if previous is not None and row.min_lot_size != previous.max_lot_size + 1:
                raise SamplingPlanError(
                    f"Rows {previous.min_lot_size}-{previous.max_lot_size} and "
                    f"{row.min_lot_size}-{row.max_lot_size} are not contiguous"
                )
            previous = row

    @property
    def rows(self) -> Tuple[SamplingPlanRow, ...]:
        return self._rows

    def lookup(self, lot_size: int, clamp_undersized: bool = False) -> SamplingPlanRow:
        """Return the plan row for ``lot_size``.

        Lots below the table's first row are rejected unless
        ``clamp_undersized`` is set, in which case the first row is used.
        """
        if isinstance(lot_size, bool) or not isinstance(lot_size, int):
            raise InvalidInputError(f"lot size must be an integer, got {lot_size!r}", field="lotSize")
        if lot_size < self.MIN_LOT_SIZE:
            if clamp_undersized and lot_size >= 0:
                return self._rows[0]
            raise InvalidInputError(
                f"lot size must be >= {self.MIN_LOT_SIZE}, got {lot_size}", field="lotSize"
            )

        # Oversized lots land on the last row
        index = bisect.bisect_right(self._lower_bounds, lot_size) - 1
        return self._rows[index]


GENERAL_LEVEL_II_PLAN = SamplingPlanTable([
    SamplingPlanRow(2, 8, 2, 0, 0),
    SamplingPlanRow(9, 15, 13, 1, 1),
    SamplingPlanRow(16, 25, 13, 1, 1),
    SamplingPlanRow(26, 50, 13, 1, 1),
    SamplingPlanRow(51, 90, 13, 1, 1),
    SamplingPlanRow(91, 150, 20, 1, 2),
    SamplingPlanRow(151, 280, 32, 2, 3),
    SamplingPlanRow(281, 500, 50, 3, 5),
    SamplingPlanRow(501, 1200, 80, 5, 7),
    SamplingPlanRow(1201, 3200, 125, 7, 10),
    SamplingPlanRow(3201, 10000, 200, 10, 14),
])


class LotAcceptanceEvaluator:
    """Tiered accept/reject/rework decision for a production lot."""

    @staticmethod
    def decide(totals: DefectTotals, plan: SamplingPlanRow) -> LotStatus:
        # Order matters: each clause is final once matched.
        if totals.critical > CRITICAL_DEFECTS_ALLOWED:
            return LotStatus.FAILED
        if totals.major > plan.max_major:
            return LotStatus.FAILED
        if totals.minor > plan.max_minor:
            return LotStatus.REWORK
        return LotStatus.PASSED

    @staticmethod
    def reasons(totals: DefectTotals, plan: SamplingPlanRow) -> Tuple[str, ...]:
        found = []
        if totals.critical > CRITICAL_DEFECTS_ALLOWED:
            found.append(REASON_CRITICAL_FOUND)
        if totals.major > plan.max_major:
            found.append(REASON_MAJOR_EXCEEDED)
        if totals.minor > plan.max_minor:
            found.append(REASON_MINOR_EXCEEDED)
        return tuple(found)

    @classmethod
    def evaluate_totals(
        cls,
        lot_size: int,
        totals: DefectTotals,
        table: Optional[SamplingPlanTable] = None,
        clamp_undersized: bool = False,
    ) -> LotVerdict:
        for name in ("critical", "major", "minor"):
            require_count(getattr(totals, name), name)

        plan = (table or GENERAL_LEVEL_II_PLAN).lookup(lot_size, clamp_undersized=clamp_undersized)
        status = cls.decide(totals, plan)
        logger.debug(
            "Lot of %s -> plan %s-%s, totals %s, status %s",
            lot_size, plan.min_lot_size, plan.max_lot_size, totals, status.value,
        )
        return LotVerdict(
            sample_size=plan.sample_size,
            totals=totals,
            status=status,
            plan_used=plan,
            reasons=cls.reasons(totals, plan),
        )

    @classmethod
    def evaluate(
        cls,
        lot_size: int,
        ledger,
        table: Optional[SamplingPlanTable] = None,
        clamp_undersized: bool = False,
    ) -> LotVerdict:
        return cls.evaluate_totals(lot_size, ledger.totals(), table=table, clamp_undersized=clamp_undersized)
