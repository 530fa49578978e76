"""
Catalog Lookup - read-only access to products, variations and attribute terms

No side effects. "Not found" raises NotFound; availability (status,
visibility) is left to callers.
"""
import logging
from typing import Iterable, List, Tuple

from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFound
from .models import AttributeTerm, Product, Variation

logger = logging.getLogger(__name__)


class CatalogLookup:
    """Lookup contract consumed by pricing, checkout and variation generation."""

    def get_product(self, product_id, line: int = None) -> Product:
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValidationError, ValueError):
            raise NotFound("Product", product_id, line=line)

    def get_variation(self, variation_id, line: int = None) -> Variation:
        try:
            return Variation.objects.select_related('product').get(pk=variation_id)
        except (Variation.DoesNotExist, ValidationError, ValueError):
            raise NotFound("Variation", variation_id, line=line)

    def get_attribute_terms_for(self, attribute_ids: Iterable) -> List[Tuple[str, str]]:
        """
        (attribute_id, term_name) pairs for the given attributes, in term order.
        """
        terms = (
            AttributeTerm.objects
            .filter(attribute_id__in=list(attribute_ids))
            .order_by('sort_order', 'name')
            .values_list('attribute_id', 'name')
        )
        return [(str(attribute_id), name) for attribute_id, name in terms]


catalog = CatalogLookup()
