"""Bulk SKU assignment for catalog CSV files.

Expected columns: ``product_name`` (required), optional ``brand``,
``category`` and ``region``.  Any other column is treated as a product
attribute (``color``, ``storage``...).  A ``sku`` column, if present, is
overwritten.
"""

from __future__ import annotations

import csv
import io
import logging
from collections import defaultdict
from pathlib import Path
from typing import IO

from pydantic import BaseModel, Field

from api.exceptions import ValidationError
from utils.sku import GenerateSkuOptions, generate_sku

logger = logging.getLogger(__name__)

_FIXED_COLUMNS = ("product_name", "brand", "category", "region")
_SKU_COLUMN = "sku"


class CatalogRow(BaseModel):
    """One product line from an import file."""

    row_number: int
    product_name: str
    brand: str | None = None
    category: str | None = None
    region: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)
    sku: str | None = None


class ImportResult(BaseModel):
    columns: list[str]
    rows: list[CatalogRow]
    collisions: dict[str, list[int]] = Field(default_factory=dict)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def read_catalog(source: str | Path | IO[str]) -> tuple[list[str], list[CatalogRow]]:
    """Parse a catalog CSV into rows.

    Returns the header (without ``sku``) and the parsed rows.
    Raises ValidationError when the ``product_name`` column is missing.
    """
    if isinstance(source, (str, Path)):
        with open(source, newline="", encoding="utf-8-sig") as fh:
            return read_catalog(fh)

    reader = csv.DictReader(source)
    header = [name.strip() for name in (reader.fieldnames or [])]
    if "product_name" not in header:
        raise ValidationError("Missing required column: product_name")
    reader.fieldnames = header

    columns = [name for name in header if name != _SKU_COLUMN]
    attr_columns = [name for name in columns if name not in _FIXED_COLUMNS]

    rows: list[CatalogRow] = []
    for i, record in enumerate(reader, 1):
        attributes = {}
        for name in attr_columns:
            value = _blank_to_none(record.get(name))
            if value is not None:
                attributes[name] = value
        rows.append(
            CatalogRow(
                row_number=i,
                product_name=(record.get("product_name") or "").strip(),
                brand=_blank_to_none(record.get("brand")),
                category=_blank_to_none(record.get("category")),
                region=_blank_to_none(record.get("region")),
                attributes=attributes,
            )
        )
    return columns, rows


def assign_skus(columns: list[str], rows: list[CatalogRow]) -> ImportResult:
    """Generate a SKU for every row and report SKUs shared by several rows."""
    by_sku: dict[str, list[int]] = defaultdict(list)
    for row in rows:
        row.sku = generate_sku(
            GenerateSkuOptions(
                product_name=row.product_name,
                brand=row.brand,
                attributes=row.attributes or None,
                category=row.category,
                region=row.region,
            )
        )
        by_sku[row.sku].append(row.row_number)

    collisions = {sku: nums for sku, nums in by_sku.items() if len(nums) > 1}
    for sku, nums in collisions.items():
        logger.warning("SKU %s generated for %d rows: %s", sku, len(nums), nums)

    logger.info("Assigned SKUs to %d row(s), %d collision(s)", len(rows), len(collisions))
    return ImportResult(columns=columns, rows=rows, collisions=collisions)


def write_catalog(result: ImportResult, dest: str | Path | IO[str]) -> None:
    """Write the imported rows back out as CSV with a trailing ``sku`` column."""
    if isinstance(dest, (str, Path)):
        Path(dest).parent.mkdir(parents=True, exist_ok=True)
        with open(dest, "w", newline="", encoding="utf-8") as fh:
            write_catalog(result, fh)
        return

    fieldnames = [*result.columns, _SKU_COLUMN]
    writer = csv.DictWriter(dest, fieldnames=fieldnames)
    writer.writeheader()
    for row in result.rows:
        record = {
            "product_name": row.product_name,
            "brand": row.brand or "",
            "category": row.category or "",
            "region": row.region or "",
            **row.attributes,
            _SKU_COLUMN: row.sku,
        }
        writer.writerow({name: record.get(name, "") for name in fieldnames})


def import_catalog(source: str | Path | IO[str], dest: str | Path | IO[str] | None = None) -> ImportResult:
    """Read *source*, assign SKUs and optionally write the result to *dest*."""
    columns, rows = read_catalog(source)
    result = assign_skus(columns, rows)
    if dest is not None:
        write_catalog(result, dest)
    return result


def import_catalog_text(text: str) -> ImportResult:
    """Convenience wrapper for in-memory CSV text (e.g. an uploaded file)."""
    return import_catalog(io.StringIO(text))
