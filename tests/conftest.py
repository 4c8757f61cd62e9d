"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from flask import Flask
from flask.testing import FlaskClient

from api.app import create_app
from services.variant_builder import AttributeOption, ProductAttribute


@pytest.fixture
def app() -> Flask:
    """Flask app in testing mode."""
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def bike_attributes() -> list[ProductAttribute]:
    """Color x size options for a Trek Verve 3."""
    return [
        ProductAttribute(
            name="color",
            values=[AttributeOption(label="Blue"), AttributeOption(label="Red")],
        ),
        ProductAttribute(
            name="size",
            values=[AttributeOption(label="Medium"), AttributeOption(label="Large")],
        ),
    ]


@pytest.fixture
def catalog_csv(tmp_path: Path) -> Path:
    """A small catalog file with one duplicate product line."""
    path = tmp_path / "catalog.csv"
    path.write_text(
        "product_name,brand,category,region,color,storage\n"
        "iPhone 14,RM,Electronics,US,Black,128GB\n"
        "iPhone 14,,,,Black,128GB\n"
        "Galaxy S23,,,,,\n"
        "iPhone 14,,,,Black,128GB\n",
        encoding="utf-8",
    )
    return path
