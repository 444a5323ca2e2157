"""Storefront management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load a small demo catalogue
"""

import argparse
import sys

SEED_CATEGORIES = [
    ("Kitchen", "Cookware and tableware"),
    ("Stationery", "Notebooks, pens and paper"),
]

SEED_PRODUCTS = [
    # (category, name, sku, price, stock)
    ("Kitchen", "Ceramic Mug", "MUG-001", 12.50, 40),
    ("Kitchen", "Cast Iron Skillet", "SKL-010", 39.90, 12),
    ("Stationery", "Dot Grid Notebook", "NTB-A5", 8.75, 100),
    ("Stationery", "Fountain Pen", "PEN-FP1", 24.00, 5),
]


def _init():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _init()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _init()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def seed(admin_username="admin"):
    """Register an administrator and load the demo catalogue."""
    domain = _init()

    from storefront.accounts.registration import RegisterUser
    from storefront.catalogue.management import CreateCategory, CreateProduct

    with domain.domain_context():
        admin_id = domain.process(
            RegisterUser(username=admin_username, email=f"{admin_username}@storefront.local", role="ADMIN"),
            asynchronous=False,
        )
        print(f"Administrator {admin_username!r} registered: {admin_id}")

        category_ids = {}
        for name, description in SEED_CATEGORIES:
            category_ids[name] = domain.process(
                CreateCategory(name=name, description=description),
                asynchronous=False,
            )

        for category, name, sku, price, stock in SEED_PRODUCTS:
            domain.process(
                CreateProduct(
                    name=name,
                    sku=sku,
                    price=price,
                    stock_quantity=stock,
                    category_id=category_ids[category],
                ),
                asynchronous=False,
            )
        print(f"Seeded {len(SEED_CATEGORIES)} categories and {len(SEED_PRODUCTS)} products.")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Load an administrator and a demo catalogue")
    seed_parser.add_argument("--admin", default="admin", help="Username of the administrator to create")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(args.admin)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
