"""SKU generation utility.

Stable, human-readable, variant-aware codes of the form
BRAND-PRODUCT-ATTRS-REGION-HASH, e.g. ``RM-IPHONE14-BLACK128GB-US-FJB8``.
Empty parts are omitted; the 4-character hash suffix is always present.
"""

from __future__ import annotations

import math
import re
import struct
import unicodedata
from collections.abc import Mapping
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Segment = str | int | float | None

PRODUCT_CODE_LENGTH = 10
HASH_SIZE = 4
FALLBACK_BODY = "SKU"

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_MASK_32 = 0xFFFFFFFF
_BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")
_SKU_PATTERN = re.compile(r"^[A-Z0-9]+(?:-[A-Z0-9]+)*-[0-9A-Z]{%d}$" % HASH_SIZE)


class GenerateSkuOptions(BaseModel):
    """Inputs for :func:`generate_sku`."""

    model_config = ConfigDict(
        strict=True, frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    product_name: Segment
    brand: Segment = None
    attributes: dict[str, Segment] | None = None
    category: Segment = None
    region: Segment = None


def _float_text(number: float) -> str:
    """ECMAScript Number::toString for a finite float."""
    if number == 0:
        return "0"
    sign = "-" if number < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(number))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0") or "0"
    # position of the decimal point relative to the first digit
    point = len(digit_tuple) + exponent
    k = len(digits)
    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits
    e = point - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"


def _segment_text(segment: str | int | float) -> str:
    """Render a number the way ``String(n)`` does in a browser."""
    if isinstance(segment, str):
        return segment
    if isinstance(segment, int) and not isinstance(segment, bool):
        if abs(segment) <= 2**53:
            return str(segment)
        try:
            segment = float(segment)
        except OverflowError:
            return "Infinity" if segment > 0 else "-Infinity"
    if isinstance(segment, float):
        if math.isnan(segment):
            return "NaN"
        if math.isinf(segment):
            return "Infinity" if segment > 0 else "-Infinity"
        return _float_text(segment)
    return str(segment)


def sanitize_segment(segment: Segment) -> str:
    """Keep only A-Z0-9, uppercased.  Accents are stripped via NFKD.

    Raises TypeError for anything that is not a str, number or None.
    """
    if segment is None:
        return ""
    if not isinstance(segment, (str, int, float)):
        msg = f"SKU segment must be a string or number, got {type(segment).__name__}"
        raise TypeError(msg)
    text = unicodedata.normalize("NFKD", _segment_text(segment))
    return _NON_ALNUM.sub("", text).upper()


def to_acronym(name: Segment, max_len: int = 8) -> str:
    """Make a short code from words: ``"iPhone 14 Pro"`` -> ``"IPHONE14"``."""
    clean = sanitize_segment(name)
    if not clean:
        return ""
    return clean[:max_len]


def _utf16_units(text: str) -> tuple[int, ...]:
    data = text.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(data) // 2}H", data)


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def hash_base36(text: str, size: int = HASH_SIZE) -> str:
    """Non-crypto FNV-1a hash rendered as a fixed-width base-36 suffix.

    Works on UTF-16 code units with 32-bit wraparound so the result matches
    SKUs produced by the storefront.  Not for anything security related.
    """
    h = _FNV_OFFSET
    for unit in _utf16_units(text):
        h ^= unit
        h = (h * _FNV_PRIME) & _MASK_32
    # reinterpret as signed 32-bit before taking the magnitude
    if h & 0x80000000:
        h -= 1 << 32
    return _to_base36(abs(h)).rjust(size, "0")[:size]


def _attribute_code(attributes: Mapping[str, Segment] | None) -> str:
    if not attributes:
        return ""
    parts = []
    for key in sorted(attributes):
        value = sanitize_segment(attributes[key])
        if value:
            parts.append(value)
    return "".join(parts)


def generate_sku(options: GenerateSkuOptions | None = None, **fields: object) -> str:
    """Generate a deterministic SKU.

    Accepts either a :class:`GenerateSkuOptions` or its fields as keyword
    arguments.  Attribute keys are sorted before concatenation, so the
    result does not depend on mapping order.

    Format: BRAND-PRODUCT-ATTRS-REGION|CATEGORY-HASH (empty parts omitted,
    ``SKU`` when everything is empty).
    """
    if options is None:
        options = GenerateSkuOptions(**fields)
    elif fields:
        msg = "pass either an options object or keyword fields, not both"
        raise TypeError(msg)

    brand_code = sanitize_segment(options.brand)
    product_code = to_acronym(options.product_name, PRODUCT_CODE_LENGTH)
    attr_code = _attribute_code(options.attributes)
    region_or_cat = sanitize_segment(options.region) or sanitize_segment(options.category)

    codes = [brand_code, product_code, attr_code, region_or_cat]
    body = "-".join(code for code in codes if code) or FALLBACK_BODY
    suffix = hash_base36("|".join(codes), HASH_SIZE)
    return f"{body}-{suffix}"


def generate_simple_sku(product_name: Segment) -> str:
    """Generate a SKU from the product name alone."""
    return generate_sku(GenerateSkuOptions(product_name=product_name))


def is_valid_sku(value: object) -> bool:
    """Return True if *value* has the shape :func:`generate_sku` produces."""
    if not isinstance(value, str) or not value:
        return False
    return _SKU_PATTERN.fullmatch(value) is not None
