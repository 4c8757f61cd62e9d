"""Tests for services.catalog_import."""

from __future__ import annotations

import csv
import io
import logging

import pytest

from api.exceptions import ValidationError
from services.catalog_import import (
    assign_skus,
    import_catalog,
    import_catalog_text,
    read_catalog,
    write_catalog,
)


class TestReadCatalog:
    def test_columns_and_attributes(self, catalog_csv) -> None:
        columns, rows = read_catalog(catalog_csv)
        assert columns == ["product_name", "brand", "category", "region", "color", "storage"]
        assert len(rows) == 4
        first = rows[0]
        assert first.row_number == 1
        assert first.brand == "RM"
        assert first.region == "US"
        assert first.attributes == {"color": "Black", "storage": "128GB"}

    def test_blank_cells_become_none(self, catalog_csv) -> None:
        _, rows = read_catalog(catalog_csv)
        galaxy = rows[2]
        assert galaxy.brand is None
        assert galaxy.category is None
        assert galaxy.attributes == {}

    def test_existing_sku_column_dropped(self) -> None:
        columns, rows = read_catalog(io.StringIO("product_name,sku\nWidget,OLD-1\n"))
        assert columns == ["product_name"]
        assert rows[0].sku is None

    def test_missing_product_name_column(self) -> None:
        with pytest.raises(ValidationError, match="product_name"):
            read_catalog(io.StringIO("name,brand\nWidget,Acme\n"))

    def test_bom_is_ignored(self, tmp_path) -> None:
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffproduct_name\nWidget\n".encode())
        columns, rows = read_catalog(path)
        assert columns == ["product_name"]
        assert rows[0].product_name == "Widget"


class TestAssignSkus:
    def test_skus(self, catalog_csv) -> None:
        result = assign_skus(*read_catalog(catalog_csv))
        assert [row.sku for row in result.rows] == [
            "RM-IPHONE14-BLACK128GB-US-FJB8",
            "IPHONE14-BLACK128GB-4VUV",
            "GALAXYS23-S4IE",
            "IPHONE14-BLACK128GB-4VUV",
        ]

    def test_collisions_reported(self, catalog_csv, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="services.catalog_import"):
            result = assign_skus(*read_catalog(catalog_csv))
        assert result.collisions == {"IPHONE14-BLACK128GB-4VUV": [2, 4]}
        assert "IPHONE14-BLACK128GB-4VUV" in caplog.text

    def test_no_collisions(self) -> None:
        result = import_catalog_text("product_name,color\nPhone,Black\nPhone,White\n")
        assert result.collisions == {}
        assert [row.sku for row in result.rows] == ["PHONE-BLACK-K0LO", "PHONE-WHITE-FV6T"]


class TestWriteCatalog:
    def test_round_trip_adds_sku_column(self, catalog_csv) -> None:
        out = io.StringIO()
        write_catalog(assign_skus(*read_catalog(catalog_csv)), out)
        records = list(csv.DictReader(io.StringIO(out.getvalue())))
        assert list(records[0].keys())[-1] == "sku"
        assert records[0]["sku"] == "RM-IPHONE14-BLACK128GB-US-FJB8"
        assert records[2]["color"] == ""
        assert records[2]["sku"] == "GALAXYS23-S4IE"


class TestImportCatalog:
    def test_writes_destination(self, catalog_csv, tmp_path) -> None:
        dest = tmp_path / "out" / "catalog_skus.csv"
        result = import_catalog(catalog_csv, dest)
        assert dest.exists()
        lines = dest.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "product_name,brand,category,region,color,storage,sku"
        assert len(lines) == 5
        assert len(result.rows) == 4

    def test_without_destination(self, catalog_csv) -> None:
        result = import_catalog(catalog_csv)
        assert len(result.rows) == 4

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            import_catalog(tmp_path / "nope.csv")
