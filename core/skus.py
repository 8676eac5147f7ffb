"""
SKU generation and validation for product variants.

A product declares variant dimensions (e.g. Color: Red, Blue / Size: S, M).
Its SKU set is the Cartesian product of every dimension's options, joined
with "-" in declaration order, with the first dimension varying slowest:

    Color=[Red, Blue], Size=[S, M]  ->  Red-S, Red-M, Blue-S, Blue-M

Clients submit the SKUs they want to create together with price/stock/image;
the submitted values must match the generated set exactly (ignoring case and
surrounding whitespace).
"""
import itertools
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from config.settings import SKU_DEFAULT_IMAGE, SKU_DEFAULT_PRICE, SKU_DEFAULT_STOCK


SKU_SEPARATOR = "-"


@dataclass
class VariantDimension:
    name: str
    options: list[str] = field(default_factory=list)


@dataclass
class SKUCandidate:
    value: str
    price: float = SKU_DEFAULT_PRICE
    stock: int = SKU_DEFAULT_STOCK
    image: str = SKU_DEFAULT_IMAGE


class HasSKUValue(Protocol):
    value: str


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class SKUValidationError(ValueError):
    """Raised with every field error found in a variant/SKU payload."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        super().__init__("; ".join(error.message for error in errors))


def normalize(value: str) -> str:
    return value.strip().lower()


def _duplicates(values: Iterable[str]) -> list[str]:
    counts = Counter(values)
    return [value for value, count in counts.items() if count > 1]


def generate_combinations(dimensions: Sequence[VariantDimension]) -> list[str]:
    """Odometer-ordered Cartesian product of the dimensions' options.

    No dimensions yields a single empty combination ([""]).
    """
    return [
        SKU_SEPARATOR.join(combination)
        for combination in itertools.product(*(d.options for d in dimensions))
    ]


def generate_skus(dimensions: Sequence[VariantDimension]) -> list[SKUCandidate]:
    """Generated SKU candidates with placeholder price, stock and image."""
    return [SKUCandidate(value=value) for value in generate_combinations(dimensions)]


def validate_variant_uniqueness(dimensions: Sequence[VariantDimension]) -> list[FieldError]:
    """Check dimension names and per-dimension options for case-insensitive duplicates."""
    errors: list[FieldError] = []

    names_by_key: dict[str, list[str]] = {}
    for dimension in dimensions:
        names_by_key.setdefault(normalize(dimension.name), []).append(dimension.name)

    for names in names_by_key.values():
        if len(names) > 1:
            collided = ", ".join(f'"{name}"' for name in names)
            errors.append(FieldError(
                field="variants",
                message=f"All variant names must be unique. Duplicate variant names: {collided}.",
            ))

    for dimension in dimensions:
        if not dimension.options:
            errors.append(FieldError(
                field="variants",
                message=f'Variant "{dimension.name}" requires at least one option.',
            ))
            continue

        duplicated = _duplicates(normalize(option) for option in dimension.options)
        if duplicated:
            errors.append(FieldError(
                field="variants",
                message=(
                    f'All options of variant "{dimension.name}" must be unique. '
                    f"Duplicate options: {', '.join(duplicated)}."
                ),
            ))

    return errors


def validate_sku_set(
    skus: Sequence[HasSKUValue],
    dimensions: Sequence[VariantDimension],
) -> list[FieldError]:
    """Compare submitted SKU values with the set generated from dimensions."""
    generated = [normalize(value) for value in generate_combinations(dimensions)]
    submitted = [normalize(sku.value) for sku in skus]
    errors: list[FieldError] = []

    for value in _duplicates(submitted):
        errors.append(FieldError(field="skus", message=f'SKU "{value}" is duplicated.'))

    if len(submitted) != len(generated):
        errors.append(FieldError(
            field="skus",
            message=(
                f"The number of SKUs ({len(submitted)}) does not match the "
                f"{len(generated)} SKUs generated from the variants."
            ),
        ))

    generated_values = set(generated)
    for value in submitted:
        if value not in generated_values:
            errors.append(FieldError(field="skus", message=f'SKU "{value}" is not valid.'))
            break

    return errors


def ensure_valid_product_variants(
    skus: Sequence[HasSKUValue],
    dimensions: Sequence[VariantDimension],
) -> None:
    """Run both checks; raise SKUValidationError with everything found."""
    errors = validate_variant_uniqueness(dimensions)
    if not errors:
        # SKU comparison is meaningless against a malformed variant list
        errors = validate_sku_set(skus, dimensions)

    if errors:
        raise SKUValidationError(errors)
