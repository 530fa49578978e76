from django.contrib import admin

from .models import Attribute, AttributeTerm, Category, Product, ProductAttribute, Variation


class ProductAttributeInline(admin.TabularInline):
    model = ProductAttribute
    extra = 0


class AttributeTermInline(admin.TabularInline):
    model = AttributeTerm
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'status', 'visibility', 'regular_price', 'sale_price', 'stock_qty')
    list_filter = ('status', 'type', 'visibility')
    search_fields = ('title', 'sku')
    inlines = [ProductAttributeInline]


@admin.register(Attribute)
class AttributeAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug')
    inlines = [AttributeTermInline]


@admin.register(Variation)
class VariationAdmin(admin.ModelAdmin):
    list_display = ('product', 'label', 'regular_price', 'stock_qty', 'status')
    list_filter = ('status',)


admin.site.register(Category)
