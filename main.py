"""CLI entry point for the catalog SKU tools."""

from __future__ import annotations

import click

from config import configure_logging, settings


def _parse_pairs(pairs: tuple[str, ...], option: str) -> list[tuple[str, str]]:
    """Split ``KEY=VALUE`` strings, rejecting anything without a key."""
    parsed = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint=option)
        parsed.append((key.strip(), value.strip()))
    return parsed


@click.group()
def cli() -> None:
    """Catalog SKU generation tools."""
    configure_logging()


@cli.command()
@click.option("--name", "product_name", required=True, help="Product name.")
@click.option("--brand", default=None, help="Brand name or code.")
@click.option("--category", default=None, help="Category (used when no region).")
@click.option("--region", default=None, help="Region or market.")
@click.option("--attr", "attrs", multiple=True, help="Attribute as KEY=VALUE (repeatable).")
def generate(
    product_name: str,
    brand: str | None,
    category: str | None,
    region: str | None,
    attrs: tuple[str, ...],
) -> None:
    """Generate a SKU for one product or variant."""
    from utils.sku import GenerateSkuOptions, generate_sku

    attributes = dict(_parse_pairs(attrs, "--attr"))
    options = GenerateSkuOptions(
        product_name=product_name,
        brand=brand,
        attributes=attributes or None,
        category=category,
        region=region,
    )
    click.echo(generate_sku(options))


@cli.command()
@click.argument("product_name")
def simple(product_name: str) -> None:
    """Generate a SKU from a product name only."""
    from utils.sku import generate_simple_sku

    click.echo(generate_simple_sku(product_name))


@cli.command()
@click.option("--name", "product_name", required=True, help="Product name.")
@click.option("--brand", default=None, help="Brand name or code.")
@click.option("--category", default=None, help="Category (used when no region).")
@click.option("--region", default=None, help="Region or market.")
@click.option(
    "--attr",
    "attrs",
    multiple=True,
    help="Attribute options as NAME=V1,V2,... (repeatable).",
)
def variants(
    product_name: str,
    brand: str | None,
    category: str | None,
    region: str | None,
    attrs: tuple[str, ...],
) -> None:
    """List every variant SKU for a product's attribute options."""
    from api.exceptions import AppError
    from services.variant_builder import AttributeOption, ProductAttribute, build_variants

    attributes = [
        ProductAttribute(
            name=name,
            values=[AttributeOption(label=v.strip()) for v in raw.split(",") if v.strip()],
        )
        for name, raw in _parse_pairs(attrs, "--attr")
    ]
    try:
        built = build_variants(
            product_name, attributes, brand=brand, category=category, region=region
        )
    except AppError as exc:
        raise click.ClickException(str(exc)) from exc

    for variant in built:
        labels = " / ".join(s.attribute_label for s in variant.attribute_combination)
        click.echo(f"{variant.sku:<40} {labels}".rstrip())
    click.echo(f"\nTotal: {len(built)} variant(s)")


@cli.command("import-catalog")
@click.argument("src", type=click.Path(exists=True, dir_okay=False))
@click.argument("dest", type=click.Path(dir_okay=False))
def import_catalog_cmd(src: str, dest: str) -> None:
    """Assign SKUs to every row of a catalog CSV and write it to DEST."""
    from api.exceptions import AppError
    from services.catalog_import import import_catalog

    try:
        result = import_catalog(src, dest)
    except AppError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Wrote {len(result.rows)} row(s) to {dest}")
    if result.collisions:
        click.echo(f"\n{len(result.collisions)} duplicate SKU(s):")
        for sku, rows in sorted(result.collisions.items()):
            click.echo(f"  {sku}: rows {', '.join(str(r) for r in rows)}")


@cli.command()
@click.argument("skus", nargs=-1, required=True)
def validate(skus: tuple[str, ...]) -> None:
    """Check that each SKU has the generated format."""
    from utils.sku import is_valid_sku

    invalid = 0
    for sku in skus:
        ok = is_valid_sku(sku)
        invalid += not ok
        click.echo(f"{sku}: {'ok' if ok else 'invalid'}")
    if invalid:
        raise SystemExit(1)


@cli.command()
def web() -> None:
    """Start the Flask API server."""
    from api.app import create_app

    app = create_app()
    app.run(
        host=settings.flask_host,
        port=settings.flask_port,
        debug=settings.flask_debug,
    )


if __name__ == "__main__":
    cli()
