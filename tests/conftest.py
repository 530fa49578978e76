"""Pytest fixtures for Storeroom tests."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from faker import Faker
from rest_framework.test import APIClient

from apps.catalog.models import Attribute, AttributeTerm, Category, Product, ProductAttribute
from apps.core.identity import Identity
from apps.coupons.models import Coupon
from apps.customers.models import Customer

fake = Faker()


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    """Anonymous throttling counts live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_product(db):
    """Factory for published, visible simple products."""
    def _make(**kwargs):
        fields = {
            "title": fake.catch_phrase(),
            "status": "published",
            "visibility": "visible",
            "type": "simple",
            "regular_price": Decimal("30.00"),
        }
        fields.update(kwargs)
        categories = fields.pop("categories", [])
        product = Product.objects.create(**fields)
        if categories:
            product.categories.set(categories)
        return product
    return _make


@pytest.fixture
def product(make_product):
    return make_product(title="Basic Tee", sku="TEE-001", manage_stock=True, stock_qty=5)


@pytest.fixture
def category(db):
    return Category.objects.create(name="Clothing", slug="clothing")


@pytest.fixture
def make_attribute(db):
    """Factory for a global attribute with ordered terms."""
    def _make(name, terms):
        attribute = Attribute.objects.create(name=name)
        for position, term in enumerate(terms):
            AttributeTerm.objects.create(attribute=attribute, name=term, sort_order=position)
        return attribute
    return _make


@pytest.fixture
def variable_product(make_product, make_attribute):
    """Variable product with Color (3 terms) and Size (3 terms) marked for variations."""
    product = make_product(title="Hoodie", type="variable", regular_price=Decimal("40.00"))
    color = make_attribute("Color", ["Red", "Blue", "Green"])
    size = make_attribute("Size", ["S", "M", "L"])
    for position, attribute in enumerate([color, size]):
        ProductAttribute.objects.create(
            product=product,
            attribute=attribute,
            name=attribute.name,
            used_for_variations=True,
            position=position,
        )
    return product


@pytest.fixture
def make_coupon(db):
    def _make(code="SAVE20", type="percent", amount=Decimal("20"), **kwargs):
        return Coupon.objects.create(code=code, type=type, amount=amount, **kwargs)
    return _make


@pytest.fixture
def customer(db):
    return Customer.objects.create(name=fake.name(), email=fake.unique.email())


@pytest.fixture
def customer_identity(customer):
    return Identity(id=str(customer.id), email=customer.email, role="customer")


@pytest.fixture
def admin_customer(db):
    return Customer.objects.create(name="Store Admin", email="admin@example.com", role="admin")


@pytest.fixture
def admin_identity(admin_customer):
    return Identity(id=str(admin_customer.id), email=admin_customer.email, role="admin")


@pytest.fixture
def address():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address1": fake.street_address(),
        "city": fake.city(),
        "postcode": "12345",
        "country": "GB",
        "email": "ada@example.com",
    }


@pytest.fixture
def api_client():
    return APIClient()


def _user_with_profile(role, username):
    User = get_user_model()
    user = User.objects.create_user(username=username, email=f"{username}@example.com", password="secret")
    Customer.objects.create(user=user, name=username.title(), email=user.email, role=role)
    return user


@pytest.fixture
def customer_user(db):
    return _user_with_profile("customer", "shopper")


@pytest.fixture
def admin_user(db):
    return _user_with_profile("admin", "boss")


@pytest.fixture
def manager_user(db):
    return _user_with_profile("shop_manager", "manager")


@pytest.fixture
def customer_client(customer_user):
    client = APIClient()
    client.force_authenticate(user=customer_user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def manager_client(manager_user):
    client = APIClient()
    client.force_authenticate(user=manager_user)
    return client
