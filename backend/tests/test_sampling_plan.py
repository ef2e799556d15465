"""Sampling plan table lookup and load-time validation."""

import pytest

from garment_qc.utils.aql import GENERAL_LEVEL_II_PLAN, SamplingPlanRow, SamplingPlanTable
from garment_qc.utils.errors import InvalidInputError, SamplingPlanError


REFERENCE_ROWS = [
    (2, 8, 2, 0, 0),
    (9, 15, 13, 1, 1),
    (16, 25, 13, 1, 1),
    (26, 50, 13, 1, 1),
    (51, 90, 13, 1, 1),
    (91, 150, 20, 1, 2),
    (151, 280, 32, 2, 3),
    (281, 500, 50, 3, 5),
    (501, 1200, 80, 5, 7),
    (1201, 3200, 125, 7, 10),
    (3201, 10000, 200, 10, 14),
]


class TestReferenceTable:

    def test_rows_match_general_level_ii(self):
        rows = [
            (r.min_lot_size, r.max_lot_size, r.sample_size, r.max_major, r.max_minor)
            for r in GENERAL_LEVEL_II_PLAN.rows
        ]
        assert rows == REFERENCE_ROWS

    def test_every_lot_size_maps_to_exactly_one_containing_row(self):
        for n in range(2, 10001):
            row = GENERAL_LEVEL_II_PLAN.lookup(n)
            assert row.contains(n)
            assert sum(1 for r in GENERAL_LEVEL_II_PLAN.rows if r.contains(n)) == 1

    @pytest.mark.parametrize('lot_size', [10001, 25000, 10 ** 9])
    def test_oversized_lots_use_last_row(self, lot_size):
        row = GENERAL_LEVEL_II_PLAN.lookup(lot_size)
        assert (row.min_lot_size, row.max_lot_size) == (3201, 10000)
        assert row.sample_size == 200

    @pytest.mark.parametrize('lot_size,sample_size', [(2, 2), (8, 2), (9, 13), (100, 20), (150, 20), (151, 32), (1200, 80)])
    def test_band_edges(self, lot_size, sample_size):
        assert GENERAL_LEVEL_II_PLAN.lookup(lot_size).sample_size == sample_size


class TestUndersizedAndInvalidLots:

    @pytest.mark.parametrize('lot_size', [0, 1])
    def test_undersized_lot_rejected_by_default(self, lot_size):
        with pytest.raises(InvalidInputError) as exc:
            GENERAL_LEVEL_II_PLAN.lookup(lot_size)
        assert exc.value.field == 'lotSize'

    @pytest.mark.parametrize('lot_size', [0, 1])
    def test_undersized_lot_clamps_when_asked(self, lot_size):
        row = GENERAL_LEVEL_II_PLAN.lookup(lot_size, clamp_undersized=True)
        assert row == GENERAL_LEVEL_II_PLAN.rows[0]

    def test_negative_lot_never_clamped(self):
        with pytest.raises(InvalidInputError):
            GENERAL_LEVEL_II_PLAN.lookup(-5, clamp_undersized=True)

    @pytest.mark.parametrize('lot_size', [10.0, '100', True, None])
    def test_non_integer_lot_rejected(self, lot_size):
        with pytest.raises(InvalidInputError):
            GENERAL_LEVEL_II_PLAN.lookup(lot_size)


class TestTableValidation:

    def test_gap_between_rows(self):
        with pytest.raises(SamplingPlanError):
            SamplingPlanTable([SamplingPlanRow(2, 8, 2, 0, 0), SamplingPlanRow(10, 15, 13, 1, 1)])

    def test_overlapping_rows(self):
        with pytest.raises(SamplingPlanError):
            SamplingPlanTable([SamplingPlanRow(2, 8, 2, 0, 0), SamplingPlanRow(8, 15, 13, 1, 1)])

    def test_must_start_at_two(self):
        with pytest.raises(SamplingPlanError):
            SamplingPlanTable([SamplingPlanRow(1, 8, 2, 0, 0)])

    def test_negative_limit(self):
        with pytest.raises(SamplingPlanError):
            SamplingPlanTable([SamplingPlanRow(2, 8, 2, -1, 0)])

    def test_empty_table(self):
        with pytest.raises(SamplingPlanError):
            SamplingPlanTable([])

    def test_rows_are_immutable(self):
        row = GENERAL_LEVEL_II_PLAN.rows[0]
        with pytest.raises(AttributeError):
            row.max_major = 5
        assert isinstance(GENERAL_LEVEL_II_PLAN.rows, tuple)

    def test_row_wire_names(self):
        assert GENERAL_LEVEL_II_PLAN.lookup(100).to_dict() == {
            'minLotSize': 91, 'maxLotSize': 150, 'sampleSize': 20, 'maxMajor': 1, 'maxMinor': 2,
        }
