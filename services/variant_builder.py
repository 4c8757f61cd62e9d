"""Variant expansion for multi-attribute products.

A product defines attributes (Color, Storage, Region...) each with a list
of values; one variant exists per combination.  Every variant gets a
deterministic SKU from utils.sku.
"""

from __future__ import annotations

import itertools
import logging
import math

from pydantic import BaseModel, Field

from api.exceptions import ConflictError, ValidationError
from config import settings
from utils.sku import GenerateSkuOptions, Segment, generate_sku

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class AttributeOption(BaseModel):
    """One selectable value of an attribute, e.g. label "Black", value "black"."""

    label: str
    value: str | None = None

    @property
    def code_source(self) -> str:
        """The text the SKU is derived from (value, falling back to label)."""
        return self.value or self.label


class ProductAttribute(BaseModel):
    name: str
    values: list[AttributeOption] = Field(default_factory=list)


class AttributeSelection(BaseModel):
    attribute_name: str
    attribute_label: str
    attribute_value: str | None = None


class Variant(BaseModel):
    """A single sellable combination of attribute values."""

    sku: str
    attribute_combination: list[AttributeSelection] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def build_variants(
    product_name: Segment,
    attributes: list[ProductAttribute] | None = None,
    brand: Segment = None,
    category: Segment = None,
    region: Segment = None,
    limit: int | None = None,
) -> list[Variant]:
    """Expand *attributes* into one SKU'd variant per value combination.

    Combinations follow the attribute order given.  With no attributes a
    single variant carrying the product-level SKU is returned.

    Raises ValidationError for an attribute without values or when the
    number of combinations exceeds *limit* (``settings.max_variants`` by
    default), and ConflictError when two combinations sanitize to the same
    SKU.
    """
    attributes = attributes or []
    limit = settings.max_variants if limit is None else limit

    for attr in attributes:
        if not attr.values:
            raise ValidationError(f"Attribute '{attr.name}' has no values")

    names = [attr.name for attr in attributes]
    if len(set(names)) != len(names):
        raise ValidationError("Attribute names must be unique")

    total = math.prod(len(attr.values) for attr in attributes)
    if total > limit:
        raise ValidationError(
            f"{total} variant combinations exceeds the limit of {limit}",
            details={"combinations": total, "limit": limit},
        )

    variants: list[Variant] = []
    seen: dict[str, list[AttributeSelection]] = {}
    for combo in itertools.product(*(attr.values for attr in attributes)):
        selections = [
            AttributeSelection(
                attribute_name=attr.name,
                attribute_label=option.label,
                attribute_value=option.value,
            )
            for attr, option in zip(attributes, combo)
        ]
        sku = generate_sku(
            GenerateSkuOptions(
                product_name=product_name,
                brand=brand,
                attributes={attr.name: option.code_source for attr, option in zip(attributes, combo)},
                category=category,
                region=region,
            )
        )
        if sku in seen:
            raise ConflictError(
                f"Duplicate SKU {sku} for different attribute combinations",
                details={
                    "sku": sku,
                    "combinations": [
                        [s.attribute_label for s in seen[sku]],
                        [s.attribute_label for s in selections],
                    ],
                },
            )
        seen[sku] = selections
        variants.append(Variant(sku=sku, attribute_combination=selections))

    logger.debug("Built %d variant(s) for %r", len(variants), product_name)
    return variants


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_variant(variants: list[Variant], sku: str | None) -> Variant | None:
    """Return the variant with exactly this SKU, or None."""
    if not sku:
        return None
    for variant in variants:
        if variant.sku == sku:
            return variant
    return None


def search_variants(variants: list[Variant], term: str | None) -> list[Variant]:
    """Case-insensitive substring search over SKU and attribute labels/values."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(variants)

    def _matches(variant: Variant) -> bool:
        if needle in variant.sku.lower():
            return True
        for sel in variant.attribute_combination:
            if needle in sel.attribute_label.lower():
                return True
            if sel.attribute_value and needle in sel.attribute_value.lower():
                return True
        return False

    return [v for v in variants if _matches(v)]
