"""
Demo Data Seeder for the Storeroom back office

Creates categories, attributes with terms, simple and variable products
(with generated variations), customers, coupons and a handful of orders so
the API can be exercised locally.
"""
import os
import sys
import random
from datetime import timedelta
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from django.utils import timezone
from django.utils.text import slugify
from faker import Faker

from apps.catalog.models import Attribute, AttributeTerm, Category, Product, ProductAttribute, Variation
from apps.catalog.variations import generate_variations
from apps.checkout.services import create_order
from apps.core.identity import Identity
from apps.coupons.models import Coupon, CouponRedemption
from apps.customers.models import Customer
from apps.orders.models import Order

fake = Faker()

CATEGORY_NAMES = ['Clothing', 'Electronics', 'Home', 'Books', 'Sports']

ATTRIBUTE_TERMS = {
    'Color': ['Red', 'Blue', 'Green', 'Black'],
    'Size': ['S', 'M', 'L', 'XL'],
}

SIMPLE_PRODUCTS = [
    ('Wireless Headphones', 'Electronics', 49.99, 199.99),
    ('USB-C Hub', 'Electronics', 19.99, 89.99),
    ('Coffee Maker', 'Home', 29.99, 149.99),
    ('Yoga Mat', 'Sports', 19.99, 59.99),
    ('Programming Book', 'Books', 24.99, 69.99),
    ('Desk Lamp', 'Home', 14.99, 79.99),
]

VARIABLE_PRODUCTS = [
    ('Cotton T-Shirt', 'Clothing', 14.99, 39.99),
    ('Running Jacket', 'Sports', 59.99, 149.99),
    ('Hoodie', 'Clothing', 29.99, 79.99),
]


def _price(low, high):
    return Decimal(str(round(random.uniform(low, high), 2)))


def seed_categories():
    print(f"Generating {len(CATEGORY_NAMES)} categories...")
    categories = {
        name: Category.objects.create(name=name, slug=slugify(name))
        for name in CATEGORY_NAMES
    }
    print(f"Created {len(categories)} categories")
    return categories


def seed_attributes():
    print("Generating attributes...")
    attributes = {}
    for name, terms in ATTRIBUTE_TERMS.items():
        attribute = Attribute.objects.create(name=name)
        for position, term in enumerate(terms):
            AttributeTerm.objects.create(attribute=attribute, name=term, sort_order=position)
        attributes[name] = attribute
    print(f"Created {len(attributes)} attributes")
    return attributes


def seed_products(categories, attributes):
    """Simple products with managed stock, then variable products with variations."""
    print("Generating products...")
    products = []

    for title, category, low, high in SIMPLE_PRODUCTS:
        regular = _price(low, high)
        on_sale = random.random() > 0.6
        product = Product.objects.create(
            title=title,
            status='published',
            visibility='visible',
            type='simple',
            regular_price=regular,
            sale_price=(regular * Decimal('0.8')).quantize(Decimal('0.01')) if on_sale else None,
            sku=f"SKU-{fake.unique.bothify('????-####').upper()}",
            manage_stock=True,
            stock_qty=random.randint(5, 200),
        )
        product.categories.add(categories[category])
        products.append(product)

    for title, category, low, high in VARIABLE_PRODUCTS:
        product = Product.objects.create(
            title=title,
            status='published',
            visibility='visible',
            type='variable',
            regular_price=_price(low, high),
            sku=f"SKU-{fake.unique.bothify('????-####').upper()}",
        )
        product.categories.add(categories[category])
        for position, attribute in enumerate(attributes.values()):
            ProductAttribute.objects.create(
                product=product,
                attribute=attribute,
                name=attribute.name,
                used_for_variations=True,
                position=position,
            )
        generate_variations(product.id)
        products.append(product)

    # A draft that should never be purchasable
    products.append(Product.objects.create(
        title=f"{fake.word().title()} Prototype",
        status='draft',
        regular_price=_price(10, 50),
    ))

    print(f"Created {len(products)} products ({Variation.objects.count()} variations)")
    return products


def seed_customers(count=10):
    print(f"Generating {count} customers...")
    customers = [
        Customer.objects.create(
            name=fake.name(),
            email=fake.unique.email(),
            phone=fake.phone_number()[:20],
        )
        for _ in range(count)
    ]
    customers.append(Customer.objects.create(name='Store Admin', email='admin@example.com', role='admin'))
    print(f"Created {len(customers)} customers")
    return customers


def seed_coupons():
    print("Generating coupons...")
    now = timezone.now()
    coupons = [
        Coupon.objects.create(
            code='SAVE20', type='percent', amount=Decimal('20'), min_spend=Decimal('50'),
            description='20% off orders over 50',
        ),
        Coupon.objects.create(
            code='TENOFF', type='fixed_cart', amount=Decimal('10'), usage_limit=100,
            usage_limit_per_user=1, description='10 off, once per customer',
        ),
        Coupon.objects.create(
            code='EXPIRED', type='percent', amount=Decimal('50'), expiry_date=now - timedelta(days=1),
        ),
    ]
    print(f"Created {len(coupons)} coupons")
    return coupons


def fake_address(customer):
    first, _, last = customer.name.partition(' ')
    return {
        "first_name": first,
        "last_name": last or first,
        "address1": fake.street_address(),
        "city": fake.city(),
        "postcode": fake.postcode(),
        "country": fake.country_code(),
        "email": customer.email,
    }


def seed_orders(customers, products, count=20):
    """Orders go through checkout so stock, coupons and aggregates stay consistent."""
    print(f"Generating {count} orders...")
    buyers = [c for c in customers if c.role == 'customer']
    simple = [p for p in products if p.status == 'published' and not p.is_variable]
    orders = []

    for _ in range(count):
        customer = random.choice(buyers)
        product = random.choice(simple)
        product.refresh_from_db()
        if not product.stock_qty:
            continue
        address = fake_address(customer)
        order = create_order(
            lines=[{"product_id": product.id, "qty": random.randint(1, min(3, product.stock_qty))}],
            billing_address=address,
            shipping_address=address,
            shipping_method_id='flat_rate',
            payment_method_id='cod',
            identity=Identity(id=str(customer.id), email=customer.email),
        )
        orders.append(order)

    print(f"Created {len(orders)} orders")
    return orders


def clear_all_data():
    print("Clearing existing data...")

    CouponRedemption.objects.all().delete()
    Order.objects.all().delete()
    Coupon.objects.all().delete()
    Customer.objects.all().delete()
    Product.objects.all().delete()
    Attribute.objects.all().delete()
    Category.objects.all().delete()

    print("All data cleared")


def main():
    print("\n" + "=" * 60)
    print("Storeroom Demo Data Seeder")
    print("=" * 60 + "\n")

    clear_all_data()

    categories = seed_categories()
    attributes = seed_attributes()
    products = seed_products(categories, attributes)
    customers = seed_customers(10)
    coupons = seed_coupons()
    orders = seed_orders(customers, products, 20)

    print("\n" + "=" * 60)
    print("Seeding Complete!")
    print("=" * 60)
    print("\nSummary:")
    print(f"  - Categories: {len(categories)}")
    print(f"  - Attributes: {len(attributes)}")
    print(f"  - Products: {len(products)}")
    print(f"  - Variations: {Variation.objects.count()}")
    print(f"  - Customers: {len(customers)}")
    print(f"  - Coupons: {len(coupons)}")
    print(f"  - Orders: {len(orders)}")
    print()


if __name__ == '__main__':
    main()
