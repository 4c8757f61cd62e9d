"""API endpoints for SKU generation and catalog helpers."""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, jsonify, request
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from api.errors import error_response, handle_errors
from api.exceptions import ValidationError
from services.catalog_import import import_catalog_text
from services.variant_builder import ProductAttribute, build_variants
from utils.sku import (
    GenerateSkuOptions,
    Segment,
    generate_simple_sku,
    generate_sku,
    is_valid_sku,
    sanitize_segment,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


class VariantRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_name: Segment
    brand: Segment = None
    category: Segment = None
    region: Segment = None
    attributes: list[ProductAttribute] = Field(default_factory=list)


def _json_body() -> dict[str, Any]:
    """Return the JSON object body or raise a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _product_name(data: dict[str, Any]) -> Segment:
    for key in ("productName", "product_name"):
        if key in data:
            return data[key]
    raise ValidationError("Missing required field: productName")


# ===========================================================================
# SKU endpoints
# ===========================================================================


@api_bp.route("/skus", methods=["POST"])
@handle_errors
def create_sku() -> tuple:
    """Generate a SKU from brand, product name, attributes and region/category."""
    options = GenerateSkuOptions.model_validate(_json_body())
    return jsonify({"sku": generate_sku(options)}), 200


@api_bp.route("/skus/simple", methods=["POST"])
@handle_errors
def create_simple_sku() -> tuple:
    """Generate a SKU from the product name only."""
    product_name = _product_name(_json_body())
    options = GenerateSkuOptions(product_name=product_name)
    return jsonify({"sku": generate_simple_sku(options.product_name)}), 200


@api_bp.route("/skus/batch", methods=["POST"])
@handle_errors
def create_skus_batch() -> tuple:
    """Generate SKUs for a list of option objects, preserving order."""
    items = _json_body().get("items")
    if not isinstance(items, list):
        raise ValidationError("Missing required field: items")
    skus = [generate_sku(GenerateSkuOptions.model_validate(item)) for item in items]
    logger.info("Generated %d SKU(s) in batch", len(skus))
    return jsonify({"skus": skus}), 200


@api_bp.route("/skus/validate", methods=["POST"])
@handle_errors
def validate_sku() -> tuple:
    """Check whether a value has the generated SKU shape."""
    sku = _json_body().get("sku")
    return jsonify({"sku": sku, "valid": is_valid_sku(sku)}), 200


@api_bp.route("/skus/sanitize", methods=["GET"])
@handle_errors
def sanitize() -> tuple:
    """Preview how a single segment is normalized."""
    value = request.args.get("value")
    if value is None:
        return error_response("Missing required parameter: value", 400)
    return jsonify({"value": value, "sanitized": sanitize_segment(value)}), 200


# ===========================================================================
# Variants
# ===========================================================================


@api_bp.route("/variants", methods=["POST"])
@handle_errors
def create_variants() -> tuple:
    """Expand product attributes into SKU'd variants."""
    payload = VariantRequest.model_validate(_json_body())
    variants = build_variants(
        payload.product_name,
        payload.attributes,
        brand=payload.brand,
        category=payload.category,
        region=payload.region,
    )
    return jsonify([v.model_dump() for v in variants]), 201


# ===========================================================================
# Catalog import
# ===========================================================================


@api_bp.route("/catalog/import", methods=["POST"])
@handle_errors
def import_catalog() -> tuple:
    """Assign SKUs to an uploaded catalog CSV."""
    if "file" not in request.files:
        return error_response("No file provided", 400)

    file = request.files["file"]
    if not file.filename:
        return error_response("No file provided", 400)

    if not file.filename.lower().endswith(".csv"):
        return error_response("Only CSV files are accepted", 400)

    try:
        text = file.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        return error_response("File must be UTF-8 encoded", 400)

    result = import_catalog_text(text)
    return jsonify(
        {
            "rows": [row.model_dump() for row in result.rows],
            "collisions": result.collisions,
        }
    ), 200
