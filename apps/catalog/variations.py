"""
Variation Generator - Cartesian product of a product's variation attributes

Each variation attribute contributes one dimension whose values are its term
names. Combinations are built by backtracking over the attributes in display
order, then written in a single transaction either as a destructive replace
or as a sync that keeps variations whose combination still exists.
"""
import logging
from typing import Dict, List, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.exceptions import GenerationError, NotFound, ValidationException
from .lookup import CatalogLookup, catalog
from .models import Product, Variation

logger = logging.getLogger(__name__)

STRATEGIES = ('replace', 'sync')

Dimension = Tuple[str, List[str]]


def build_combinations(dimensions: List[Dimension]) -> List[Dict[str, str]]:
    """
    Every ``{attribute: term}`` mapping picking one term per dimension.
    A dimension with no values yields no combinations.
    """
    combinations = []

    def backtrack(current: Dict[str, str], index: int):
        if index == len(dimensions):
            combinations.append(dict(current))
            return

        name, values = dimensions[index]
        for value in values:
            current[name] = value
            backtrack(current, index + 1)
        current.pop(name, None)

    backtrack({}, 0)
    return combinations


def selection_key(selections: Dict[str, str]) -> Tuple:
    return tuple(sorted((str(k), str(v)) for k, v in selections.items()))


def _allowed_terms(product: Product, lookup: CatalogLookup) -> List[Dimension]:
    """
    Each variation attribute with its term names, narrowed to the product's
    own ``values`` list when that list is non-empty.
    """
    attributes = list(product.variation_attributes())
    terms_by_attribute: Dict[str, List[str]] = {}
    for attribute_id, term_name in lookup.get_attribute_terms_for(a.attribute_id for a in attributes):
        terms_by_attribute.setdefault(attribute_id, []).append(term_name)

    allowed = []
    for attribute in attributes:
        terms = terms_by_attribute.get(str(attribute.attribute_id), [])
        if attribute.values:
            narrowed = set(attribute.values)
            terms = [term for term in terms if term in narrowed]
        allowed.append((attribute.name, terms))
    return allowed


def _variation_dimensions(product: Product, lookup: CatalogLookup) -> List[Dimension]:
    allowed = _allowed_terms(product, lookup)
    if not allowed:
        raise GenerationError("No attributes configured for variations")

    dimensions = []
    for name, terms in allowed:
        if not terms:
            logger.warning(f"Skipping attribute '{name}' on product {product.id}: no terms")
            continue
        dimensions.append((name, terms))

    if not dimensions:
        raise GenerationError("None of the variation attributes has any terms")
    return dimensions


def generate_variations(product_id, strategy: str = None, lookup: CatalogLookup = catalog) -> List[Variation]:
    """
    Regenerate the purchasable variations of a variable product.

    ``replace`` deletes every existing variation and creates one per
    combination, seeded from the parent's regular price and stock status.
    ``sync`` keeps variations whose combination still exists, creates the
    missing ones and deletes the orphans.
    """
    strategy = strategy or settings.STORE_CONFIG.get('variation_strategy', 'replace')
    if strategy not in STRATEGIES:
        raise ValidationException(f"Unknown variation strategy: {strategy}", field='strategy')

    product = lookup.get_product(product_id)
    if not product.is_variable:
        raise GenerationError("Product is not a variable product")

    combinations = build_combinations(_variation_dimensions(product, lookup))

    with transaction.atomic():
        # Serialize concurrent regenerations of the same product
        product = Product.objects.select_for_update().get(pk=product.pk)

        if strategy == 'replace':
            deleted, _ = Variation.objects.filter(product=product).delete()
            variations = [_new_variation(product, combination) for combination in combinations]
        else:
            existing = {}
            for variation in product.variations.order_by('created_at'):
                existing.setdefault(selection_key(variation.attribute_selections), variation)
            variations = []
            for combination in combinations:
                kept = existing.get(selection_key(combination))
                variations.append(kept or _new_variation(product, combination))
            # Anything not in the result goes, duplicates of a kept combination included
            deleted, _ = product.variations.exclude(pk__in=[v.pk for v in variations]).delete()

    logger.info(
        f"Generated {len(variations)} variations for product {product.id} "
        f"(strategy={strategy}, removed={deleted})"
    )
    return variations


def _new_variation(product: Product, combination: Dict[str, str]) -> Variation:
    return Variation.objects.create(
        product=product,
        attribute_selections=combination,
        regular_price=product.regular_price,
        stock_status=product.stock_status,
        status='active',
    )


def list_variations(product_id, lookup: CatalogLookup = catalog) -> List[Variation]:
    product = lookup.get_product(product_id)
    if not product.is_variable:
        raise GenerationError("Product is not a variable product")
    return list(product.variations.order_by('-created_at'))


def validate_selections(
    product: Product,
    selections: Dict[str, str],
    lookup: CatalogLookup = catalog,
    exclude=None,
):
    """
    Selections must name variation attributes of the product, pick one of
    each attribute's allowed terms, and not repeat the combination of another
    variation of the product (``exclude`` is the variation being edited).
    """
    allowed = dict(_allowed_terms(product, lookup))
    for name, value in selections.items():
        if name not in allowed:
            raise ValidationException(
                f"'{name}' is not a variation attribute of this product",
                field='attribute_selections'
            )
        if value not in allowed[name]:
            raise ValidationException(
                f"'{value}' is not an allowed value for '{name}'",
                field='attribute_selections'
            )

    key = selection_key(selections)
    others = product.variations.all()
    if exclude is not None:
        others = others.exclude(pk=exclude)
    for attribute_selections in others.values_list('attribute_selections', flat=True):
        if selection_key(attribute_selections or {}) == key:
            raise ValidationException(
                "A variation with these attribute selections already exists",
                field='attribute_selections'
            )


def create_variation(product_id, data: dict, lookup: CatalogLookup = catalog) -> Variation:
    """Manually add one variation to a variable product."""
    product = lookup.get_product(product_id)
    if not product.is_variable:
        raise GenerationError("Product is not a variable product")

    fields = dict(data)
    fields.setdefault('regular_price', product.regular_price)
    fields.setdefault('stock_status', product.stock_status)

    with transaction.atomic():
        product = Product.objects.select_for_update().get(pk=product.pk)
        validate_selections(product, fields.get('attribute_selections') or {}, lookup)
        variation = Variation.objects.create(product=product, **fields)

    logger.info(f"Created variation {variation.id} for product {product.id}")
    return variation


def update_variation(product_id, variation_id, data: dict, lookup: CatalogLookup = catalog) -> Variation:
    """Edit a variation of ``product_id``; changed selections are re-validated."""
    product = lookup.get_product(product_id)

    with transaction.atomic():
        product = Product.objects.select_for_update().get(pk=product.pk)
        try:
            variation = product.variations.get(pk=variation_id)
        except (Variation.DoesNotExist, ValidationError, ValueError):
            raise NotFound("Variation", variation_id)

        if 'attribute_selections' in data:
            validate_selections(product, data['attribute_selections'] or {}, lookup, exclude=variation.pk)

        for field, value in data.items():
            setattr(variation, field, value)
        variation.save()

    logger.info(f"Updated variation {variation.id} of product {product.id}: {sorted(data)}")
    return variation


def delete_variation(product_id, variation_id):
    deleted, _ = Variation.objects.filter(pk=variation_id, product_id=product_id).delete()
    if not deleted:
        raise NotFound("Variation", variation_id)
    logger.info(f"Deleted variation {variation_id} from product {product_id}")
