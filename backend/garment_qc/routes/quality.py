"""Quality decision endpoints

Stateless JSON wrappers around the engine: every request carries all of its
inputs and the verdict is returned, never stored.
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from marshmallow import Schema, ValidationError, fields, validate

from ..models.defect_ledger import DefectLedger
from ..models.measurement import MeasurementPointSchema
from ..models.verdict import InspectionProgress
from ..utils.aql import GENERAL_LEVEL_II_PLAN, LotAcceptanceEvaluator
from ..utils.catalog import GARMENT_INSPECTION_CATALOG
from ..utils.errors import InvalidInputError
from ..utils.tolerance import InspectionAggregator, ToleranceEvaluator

logger = logging.getLogger(__name__)

quality_bp = Blueprint("quality", __name__, url_prefix="/api/quality")


class LotVerdictRequestSchema(Schema):
    """Marshmallow schema for lot verdict requests"""

    lot_size = fields.Int(required=True, strict=True, data_key="lotSize")
    # Entries are validated by the ledger itself
    defects = fields.List(fields.Raw(), load_default=list)


class MeasurementRequestSchema(Schema):
    designer_measurement = fields.Float(required=True, data_key="designerMeasurement", allow_nan=False)
    actual_measurement = fields.Float(required=True, data_key="actualMeasurement", allow_nan=False)
    tolerance = fields.Float(required=True, allow_nan=False, validate=validate.Range(min=0.0))


class SampleVerdictRequestSchema(Schema):
    measurements = fields.List(
        fields.Nested(MeasurementPointSchema), required=True, validate=validate.Length(min=1)
    )


lot_verdict_schema = LotVerdictRequestSchema()
measurement_schema = MeasurementRequestSchema()
sample_verdict_schema = SampleVerdictRequestSchema()


def _clamp_undersized():
    return current_app.config.get("UNDERSIZED_LOT_POLICY", "reject") == "clamp"


# -----------------------------------------------------------------------------
# Sampling plan reference
# -----------------------------------------------------------------------------

@quality_bp.route("/sampling-plan", methods=["GET"])
def list_sampling_plan():
    """Return every row of the General Inspection Level II plan."""
    rows = [row.to_dict() for row in GENERAL_LEVEL_II_PLAN.rows]
    return jsonify({"success": True, "data": {"rows": rows, "criticalAllowed": 0}})


@quality_bp.route("/sampling-plan/<int(signed=True):lot_size>", methods=["GET"])
def get_sampling_plan(lot_size):
    row = GENERAL_LEVEL_II_PLAN.lookup(lot_size, clamp_undersized=_clamp_undersized())
    return jsonify({"success": True, "data": row.to_dict()})


# -----------------------------------------------------------------------------
# Production lot (AQL) verdict
# -----------------------------------------------------------------------------

@quality_bp.route("/lot-verdict", methods=["POST"])
def lot_verdict():
    """Decide a lot from its order quantity and the inspector's defect tally.

    Expected JSON payload: {
        "lotSize": int,
        "defects": [{"category", "inspectionPoint", "critical", "major", "minor"}, ...]
    }
    """
    payload = request.get_json(silent=True) or {}
    validated = lot_verdict_schema.load(payload)

    ledger = DefectLedger.from_list(validated["defects"])
    verdict = LotAcceptanceEvaluator.evaluate(
        validated["lot_size"], ledger, clamp_undersized=_clamp_undersized()
    )
    if not verdict.passed:
        logger.info(
            "Lot of %s %s: %s", validated["lot_size"], verdict.status.value, ", ".join(verdict.reasons)
        )

    data = verdict.to_dict()
    data["defects"] = ledger.to_list()
    return jsonify({"success": True, "data": data})


# -----------------------------------------------------------------------------
# Sample development (dimensional tolerance)
# -----------------------------------------------------------------------------

@quality_bp.route("/measurements/evaluate", methods=["POST"])
def evaluate_measurement():
    payload = request.get_json(silent=True) or {}
    validated = measurement_schema.load(payload)
    result = ToleranceEvaluator.evaluate(
        validated["designer_measurement"],
        validated["actual_measurement"],
        validated["tolerance"],
    )
    return jsonify({"success": True, "data": result.to_dict()})


@quality_bp.route("/sample-verdict", methods=["POST"])
def sample_verdict():
    """Complete a sample inspection.

    Every measurement must carry an actualMeasurement; otherwise the request
    is answered with 409 and the list of pending point ids.
    """
    payload = request.get_json(silent=True) or {}
    points = sample_verdict_schema.load(payload)["measurements"]

    ids = [p.id for p in points]
    if len(ids) != len(set(ids)):
        raise InvalidInputError("Measurement ids must be unique", field="measurements")

    verdict = InspectionAggregator.evaluate_points(points)
    data = verdict.to_dict()
    data["progress"] = InspectionProgress(verdict.status.value).value
    data["failedPoints"] = verdict.failed_points
    return jsonify({"success": True, "data": data})


@quality_bp.route("/inspection-catalog", methods=["GET"])
def inspection_catalog():
    return jsonify({"success": True, "data": GARMENT_INSPECTION_CATALOG.to_dict()})


def validation_error_response(e: ValidationError):
    """Flatten marshmallow messages the way the template endpoints do."""
    error_messages = []
    messages = e.messages if isinstance(e.messages, dict) else {"_schema": e.messages}
    for field, errors in messages.items():
        if isinstance(errors, list):
            error_messages.extend([f"{field}: {error}" for error in errors])
        else:
            error_messages.append(f"{field}: {errors}")
    return {
        "success": False,
        "message": "Validation error",
        "error": "VALIDATION_ERROR",
        "details": error_messages,
    }, 400
