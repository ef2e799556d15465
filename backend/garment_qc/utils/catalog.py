"""Garment inspection point catalog.

The default catalog lists the points an inspector walks through on an AQL
inspection, grouped by category. It is reference data for seeding ledgers and
for display; the lot evaluator accepts points that are not in it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class InspectionPoint:
    name: str
    description: str = ""
    is_safety: bool = False

    def to_dict(self):
        return {"name": self.name, "description": self.description, "isSafety": self.is_safety}


class InspectionCatalog:
    """Ordered mapping of category -> inspection points"""

    def __init__(self, categories: Sequence[Tuple[str, Sequence[InspectionPoint]]]):
        self._categories: Dict[str, Tuple[InspectionPoint, ...]] = {}
        for category, points in categories:
            if category in self._categories:
                raise ValueError(f"Duplicate inspection category {category!r}")
            names = [p.name for p in points]
            if len(names) != len(set(names)):
                raise ValueError(f"Duplicate inspection point in category {category!r}")
            self._categories[category] = tuple(points)

    def categories(self) -> List[str]:
        return list(self._categories)

    def points(self, category: str) -> Tuple[InspectionPoint, ...]:
        try:
            return self._categories[category]
        except KeyError:
            raise KeyError(f"Unknown inspection category {category!r}") from None

    def iter_points(self) -> Iterator[Tuple[str, InspectionPoint]]:
        for category, points in self._categories.items():
            for point in points:
                yield category, point

    def is_safety_point(self, category: str, point_name: str) -> bool:
        for point in self._categories.get(category, ()):
            if point.name == point_name:
                return point.is_safety
        return False

    def to_dict(self):
        return {
            "categories": [
                {"category": category, "points": [p.to_dict() for p in points]}
                for category, points in self._categories.items()
            ]
        }


GARMENT_INSPECTION_CATALOG = InspectionCatalog([
    ("FABRIC", (
        InspectionPoint("Woven / Knit Material", "Holes, shading, runs, or snags."),
        InspectionPoint("Interfacing / Lining", "Bubbling, peeling, or mismatched color."),
        InspectionPoint("Print / Embroidery", "Bleeding, cracking, or missing stitches."),
    )),
    ("PRODUCTION", (
        InspectionPoint("Pattern / Seams", "Twisted seams, puckering, or open seams."),
        InspectionPoint("Stitches / Thread", "Skipped stitches, broken thread, or raw edges."),
        InspectionPoint("Neck / Shoulder / Hem", "Asymmetry, uneven heights, or wavy hems."),
        InspectionPoint("Sleeves / Cuffs", "Unaligned cuffs or uneven sleeve lengths."),
    )),
    ("HARDWARE", (
        InspectionPoint("Buttons / Snaps / Zips", "Loose buttons, stuck zippers, or sharp edges."),
        InspectionPoint("Velcro / Elastic", "Weak grip or loss of elasticity."),
    )),
    ("FINISHING", (
        InspectionPoint("Trimming / Threads", "Long loose threads (uncut)."),
        InspectionPoint("Pressing / Washing", "Iron marks, burns, or water spots."),
        InspectionPoint("Stains / Dirt", "Oil spots, chalk marks, or dust."),
    )),
    ("SAFETY", (
        InspectionPoint("Nickel / Needle Test", "Mandatory pass. Metal contamination.", is_safety=True),
        InspectionPoint("Button Pull Test", "Choking hazard (pull test).", is_safety=True),
    )),
    ("PACKAGING", (
        InspectionPoint("Labels / Price Tags", "Wrong price, missing size tag, or skewed label."),
        InspectionPoint("Transport Markings", "Wrong carton marking or SKU mismatch."),
    )),
])
