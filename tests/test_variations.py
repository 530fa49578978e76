"""Tests for variation generation and manual variation management."""

from decimal import Decimal

import pytest

from apps.catalog.models import Attribute, ProductAttribute, Variation
from apps.catalog.variations import (
    build_combinations,
    create_variation,
    delete_variation,
    generate_variations,
    list_variations,
    selection_key,
    update_variation,
)
from apps.core.exceptions import GenerationError, NotFound, ValidationException

pytestmark = pytest.mark.django_db


class TestBuildCombinations:
    def test_cartesian_product_in_attribute_order(self):
        combos = build_combinations([("Color", ["Red", "Blue"]), ("Size", ["S", "M", "L"])])

        assert len(combos) == 6
        assert combos[0] == {"Color": "Red", "Size": "S"}
        assert combos[-1] == {"Color": "Blue", "Size": "L"}
        assert len({selection_key(c) for c in combos}) == 6

    def test_single_dimension(self):
        assert build_combinations([("Size", ["S"])]) == [{"Size": "S"}]

    def test_empty_dimension_yields_nothing(self):
        assert build_combinations([("Color", ["Red"]), ("Size", [])]) == []

    def test_no_dimensions(self):
        assert build_combinations([]) == [{}]


class TestGenerate:
    def test_three_by_three(self, variable_product):
        variations = generate_variations(variable_product.id)

        assert len(variations) == 9
        assert Variation.objects.filter(product=variable_product).count() == 9
        keys = {selection_key(v.attribute_selections) for v in variations}
        assert len(keys) == 9
        assert all(v.regular_price == Decimal("40.00") for v in variations)
        assert all(v.stock_status == "in_stock" and v.status == "active" for v in variations)

    def test_regenerate_replaces(self, variable_product):
        first = {v.id for v in generate_variations(variable_product.id)}
        second = generate_variations(variable_product.id, strategy="replace")

        assert len(second) == 9
        assert Variation.objects.filter(product=variable_product).count() == 9
        assert first.isdisjoint(v.id for v in second)

    def test_sync_keeps_surviving_variations(self, variable_product):
        original = generate_variations(variable_product.id)
        Variation.objects.filter(pk=original[0].pk).update(sku="CUSTOM-SKU")

        synced = generate_variations(variable_product.id, strategy="sync")

        assert {v.id for v in synced} == {v.id for v in original}
        assert Variation.objects.get(pk=original[0].pk).sku == "CUSTOM-SKU"

    def test_sync_adds_and_removes(self, variable_product):
        generate_variations(variable_product.id)
        size = ProductAttribute.objects.get(product=variable_product, name="Size")
        size.values = ["S", "M"]
        size.save()

        synced = generate_variations(variable_product.id, strategy="sync")

        assert len(synced) == 6
        assert Variation.objects.filter(product=variable_product).count() == 6
        assert not Variation.objects.filter(attribute_selections__Size="L").exists()

    def test_sync_removes_duplicate_combinations(self, variable_product):
        generate_variations(variable_product.id, strategy="sync")
        Variation.objects.create(
            product=variable_product,
            regular_price=Decimal("40.00"),
            attribute_selections={"Color": "Red", "Size": "S"},
        )

        synced = generate_variations(variable_product.id, strategy="sync")

        assert len(synced) == 9
        assert Variation.objects.filter(product=variable_product).count() == 9
        assert set(variable_product.variations.values_list("id", flat=True)) == {v.id for v in synced}

    def test_configured_default_strategy(self, variable_product, settings):
        settings.STORE_CONFIG = {**settings.STORE_CONFIG, "variation_strategy": "sync"}
        first = {v.id for v in generate_variations(variable_product.id)}
        assert {v.id for v in generate_variations(variable_product.id)} == first

    def test_values_narrow_terms(self, variable_product):
        color = ProductAttribute.objects.get(product=variable_product, name="Color")
        color.values = ["Red"]
        color.save()

        variations = generate_variations(variable_product.id)
        assert len(variations) == 3
        assert {v.attribute_selections["Color"] for v in variations} == {"Red"}

    def test_attribute_without_terms_is_skipped(self, variable_product):
        empty = Attribute.objects.create(name="Material")
        ProductAttribute.objects.create(
            product=variable_product, attribute=empty, name="Material", used_for_variations=True, position=5
        )

        variations = generate_variations(variable_product.id)
        assert len(variations) == 9
        assert all("Material" not in v.attribute_selections for v in variations)

    def test_descriptive_attributes_ignored(self, variable_product, make_attribute):
        brand = make_attribute("Brand", ["Acme", "Globex"])
        ProductAttribute.objects.create(product=variable_product, attribute=brand, name="Brand", position=9)

        assert len(generate_variations(variable_product.id)) == 9

    def test_variation_product_references(self, variable_product):
        variations = generate_variations(variable_product.id)
        assert set(variable_product.variations.values_list("id", flat=True)) == {v.id for v in variations}


class TestGenerateErrors:
    def test_simple_product(self, product):
        with pytest.raises(GenerationError):
            generate_variations(product.id)

    def test_no_variation_attributes(self, make_product):
        bare = make_product(type="variable")
        with pytest.raises(GenerationError):
            generate_variations(bare.id)

    def test_all_attributes_empty_keeps_existing(self, make_product):
        bare = make_product(type="variable")
        empty = Attribute.objects.create(name="Finish")
        ProductAttribute.objects.create(product=bare, attribute=empty, name="Finish", used_for_variations=True)
        kept = Variation.objects.create(product=bare, regular_price=Decimal("1.00"), attribute_selections={})

        with pytest.raises(GenerationError):
            generate_variations(bare.id)
        assert Variation.objects.filter(pk=kept.pk).exists()

    def test_unknown_strategy(self, variable_product):
        with pytest.raises(ValidationException):
            generate_variations(variable_product.id, strategy="merge")

    def test_unknown_product(self):
        with pytest.raises(NotFound):
            generate_variations("00000000-0000-0000-0000-000000000000")


class TestManualVariations:
    def test_create_inherits_parent_defaults(self, variable_product):
        variation = create_variation(
            variable_product.id,
            {"attribute_selections": {"Color": "Red", "Size": "S"}, "sku": "HOOD-R-S"},
        )
        assert variation.product == variable_product
        assert variation.regular_price == Decimal("40.00")
        assert variation.sku == "HOOD-R-S"

    def test_create_rejects_unknown_attribute(self, variable_product):
        with pytest.raises(ValidationException):
            create_variation(variable_product.id, {"attribute_selections": {"Weight": "1kg"}})

    def test_create_rejects_value_outside_allowed(self, variable_product):
        size = ProductAttribute.objects.get(product=variable_product, name="Size")
        size.values = ["S", "M"]
        size.save()
        with pytest.raises(ValidationException):
            create_variation(variable_product.id, {"attribute_selections": {"Size": "XXL"}})

    def test_create_on_simple_product(self, product):
        with pytest.raises(GenerationError):
            create_variation(product.id, {"attribute_selections": {}})

    def test_list_newest_first(self, variable_product):
        generate_variations(variable_product.id)
        extra = create_variation(variable_product.id, {"attribute_selections": {"Color": "Red"}})
        listed = list_variations(variable_product.id)
        assert len(listed) == 10
        assert listed[0] == extra

    def test_delete(self, variable_product):
        variation = generate_variations(variable_product.id)[0]
        delete_variation(variable_product.id, variation.id)
        assert not Variation.objects.filter(pk=variation.pk).exists()

    def test_delete_scoped_to_product(self, variable_product, make_product):
        variation = generate_variations(variable_product.id)[0]
        other = make_product(type="variable")
        with pytest.raises(NotFound):
            delete_variation(other.id, variation.id)
        assert Variation.objects.filter(pk=variation.pk).exists()

    def test_create_rejects_value_that_is_not_a_term(self, variable_product):
        with pytest.raises(ValidationException):
            create_variation(variable_product.id, {"attribute_selections": {"Color": "Purple", "Size": "XXL"}})
        assert not Variation.objects.filter(product=variable_product).exists()

    def test_create_rejects_existing_combination(self, variable_product):
        generate_variations(variable_product.id)
        with pytest.raises(ValidationException):
            create_variation(variable_product.id, {"attribute_selections": {"Size": "S", "Color": "Red"}})
        red_small = [
            v for v in variable_product.variations.all()
            if v.attribute_selections == {"Color": "Red", "Size": "S"}
        ]
        assert len(red_small) == 1


class TestUpdateVariation:
    @pytest.fixture
    def variations(self, variable_product):
        return generate_variations(variable_product.id)

    def test_update_fields(self, variable_product, variations):
        updated = update_variation(
            variable_product.id, variations[0].id, {"sku": "HOOD-EDIT", "regular_price": Decimal("44.00")}
        )

        stored = Variation.objects.get(pk=variations[0].pk)
        assert updated.sku == stored.sku == "HOOD-EDIT"
        assert stored.regular_price == Decimal("44.00")
        assert stored.attribute_selections == variations[0].attribute_selections

    def test_edits_survive_sync(self, variable_product, variations):
        update_variation(variable_product.id, variations[0].id, {"sku": "HOOD-KEEP"})
        generate_variations(variable_product.id, strategy="sync")
        assert Variation.objects.get(pk=variations[0].pk).sku == "HOOD-KEEP"

    def test_change_selections(self, variable_product):
        variation = create_variation(variable_product.id, {"attribute_selections": {"Color": "Red", "Size": "S"}})
        updated = update_variation(
            variable_product.id, variation.id, {"attribute_selections": {"Color": "Blue", "Size": "S"}}
        )
        assert updated.attribute_selections == {"Color": "Blue", "Size": "S"}

    def test_keeping_own_selections_is_allowed(self, variable_product, variations):
        same = dict(variations[0].attribute_selections)
        updated = update_variation(variable_product.id, variations[0].id, {"attribute_selections": same})
        assert updated.attribute_selections == same

    def test_selections_must_be_terms(self, variable_product, variations):
        with pytest.raises(ValidationException):
            update_variation(variable_product.id, variations[0].id, {"attribute_selections": {"Color": "Purple"}})

    def test_selections_must_not_collide(self, variable_product, variations):
        with pytest.raises(ValidationException):
            update_variation(
                variable_product.id, variations[0].id, {"attribute_selections": variations[1].attribute_selections}
            )
        assert Variation.objects.get(pk=variations[0].pk).attribute_selections == variations[0].attribute_selections

    def test_scoped_to_product(self, variations, make_product):
        other = make_product(type="variable")
        with pytest.raises(NotFound):
            update_variation(other.id, variations[0].id, {"sku": "NOPE"})
