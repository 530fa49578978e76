"""
Catalog Models - Products, Attributes and Variations
Tables: Categories, Attributes, AttributeTerms, Products, ProductAttributes, Variations
"""
from django.db import models
from django.utils import timezone
from django.utils.text import slugify
from apps.core.models import BaseModel


class StockStatus(models.TextChoices):
    IN_STOCK = 'in_stock', 'In Stock'
    OUT_OF_STOCK = 'out_of_stock', 'Out of Stock'
    BACKORDER = 'backorder', 'On Backorder'


class Category(BaseModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)

    class Meta:
        db_table = 'catalog_categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['name']

    def __str__(self):
        return self.name


class Attribute(BaseModel):
    """
    Global attribute (e.g. Color, Size) whose terms feed variation generation.
    """
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)

    class Meta:
        db_table = 'catalog_attributes'
        verbose_name = 'Attribute'
        verbose_name_plural = 'Attributes'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class AttributeTerm(BaseModel):
    attribute = models.ForeignKey(Attribute, on_delete=models.CASCADE, related_name='terms')
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'catalog_attribute_terms'
        verbose_name = 'Attribute Term'
        verbose_name_plural = 'Attribute Terms'
        ordering = ['sort_order', 'name']
        constraints = [
            models.UniqueConstraint(fields=['attribute', 'slug'], name='unique_term_slug_per_attribute'),
        ]

    def __str__(self):
        return f"{self.attribute.name}: {self.name}"

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class SalePricedMixin:
    """
    Shared price resolution for products and variations.
    """

    def sale_is_active(self, now=None) -> bool:
        if self.sale_price is None:
            return False
        now = now or timezone.now()
        if self.sale_start and now < self.sale_start:
            return False
        if self.sale_end and now > self.sale_end:
            return False
        return True

    def unit_price(self, enforce_sale_window: bool = False, now=None):
        """
        Sale price when present, else regular price. The sale window only
        counts when ``enforce_sale_window`` is set.
        """
        if self.sale_price is None:
            return self.regular_price
        if enforce_sale_window and not self.sale_is_active(now):
            return self.regular_price
        return self.sale_price


class Product(SalePricedMixin, BaseModel):
    """
    Product in the catalog.
    """
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
        ('private', 'Private'),
    ]

    VISIBILITY_CHOICES = [
        ('visible', 'Shop and search results'),
        ('catalog', 'Shop only'),
        ('search', 'Search results only'),
        ('hidden', 'Hidden'),
    ]

    TYPE_CHOICES = [
        ('simple', 'Simple'),
        ('variable', 'Variable'),
    ]

    CUSTOMER_VISIBILITIES = ('visible', 'catalog', 'search')

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft', db_index=True)
    visibility = models.CharField(max_length=20, choices=VISIBILITY_CHOICES, default='visible')
    featured_image = models.CharField(max_length=500, blank=True, null=True)
    regular_price = models.DecimalField(max_digits=12, decimal_places=2)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    sale_start = models.DateTimeField(blank=True, null=True)
    sale_end = models.DateTimeField(blank=True, null=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='simple')
    sku = models.CharField(max_length=64, unique=True, blank=True, null=True)
    manage_stock = models.BooleanField(default=False)
    stock_qty = models.PositiveIntegerField(blank=True, null=True)
    stock_status = models.CharField(max_length=20, choices=StockStatus.choices, default=StockStatus.IN_STOCK)
    categories = models.ManyToManyField(Category, related_name='products', blank=True)

    class Meta:
        db_table = 'catalog_products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        indexes = [
            models.Index(fields=['status', 'visibility'], name='catalog_pro_status_5c1f0e_idx'),
        ]

    def __str__(self):
        return f"{self.title} (${self.regular_price})"

    def save(self, *args, **kwargs):
        # Slug from title, suffixed until unique
        if not self.slug:
            base = slugify(self.title) or 'product'
            candidate = base
            counter = 1
            while Product.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                candidate = f"{base}-{counter}"
                counter += 1
            self.slug = candidate
        super().save(*args, **kwargs)

    @property
    def is_visible_to_customers(self) -> bool:
        return self.status == 'published' and self.visibility in self.CUSTOMER_VISIBILITIES

    @property
    def is_variable(self) -> bool:
        return self.type == 'variable'

    def variation_attributes(self):
        """Attributes flagged for variation generation, in display order."""
        return self.attributes.filter(used_for_variations=True).order_by('position', 'id')


class ProductAttribute(models.Model):
    """
    Attribute definition attached to a product.
    ``values`` narrows the attribute's terms for this product; empty means all.
    """
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='attributes')
    attribute = models.ForeignKey(Attribute, on_delete=models.CASCADE, related_name='product_attributes')
    name = models.CharField(max_length=255)
    values = models.JSONField(default=list, blank=True)
    used_for_variations = models.BooleanField(default=False)
    visible_on_product_page = models.BooleanField(default=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'catalog_product_attributes'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.product.title} / {self.name}"


class Variation(SalePricedMixin, BaseModel):
    """
    Concrete purchasable combination of attribute values for a variable product.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variations')
    sku = models.CharField(max_length=64, unique=True, blank=True, null=True)
    image = models.CharField(max_length=500, blank=True, null=True)
    regular_price = models.DecimalField(max_digits=12, decimal_places=2)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    sale_start = models.DateTimeField(blank=True, null=True)
    sale_end = models.DateTimeField(blank=True, null=True)
    stock_qty = models.PositiveIntegerField(blank=True, null=True)
    stock_status = models.CharField(max_length=20, choices=StockStatus.choices, default=StockStatus.IN_STOCK)
    description = models.TextField(blank=True, null=True)
    attribute_selections = models.JSONField(default=dict)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    class Meta:
        db_table = 'catalog_variations'
        verbose_name = 'Variation'
        verbose_name_plural = 'Variations'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.product.title} - {self.label}"

    @property
    def label(self) -> str:
        return ', '.join(str(value) for value in self.attribute_selections.values())

    @property
    def is_active(self) -> bool:
        return self.status == 'active'
