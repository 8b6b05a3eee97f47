"""Storefront administration CLI.

Flips the store settings that gate checkout and lists a customer's orders.
Reuses the same stores the HTTP API uses. Settings only outlive the command
when the ordering domain is configured with a SQL database provider.

Usage:
    python src/manage.py setup-db                  # Create order and settings tables
    python src/manage.py drop-db                   # Drop them
    python src/manage.py settings                  # Show current settings
    python src/manage.py accepting-orders on       # Open the store for orders
    python src/manage.py maintenance off           # Leave maintenance mode
    python src/manage.py orders --user user-001    # List a user's orders
"""

import argparse
import sys


def _init():
    from ordering.domain import ordering

    ordering.init()
    return ordering


def setup_database():
    """Create database tables for the ordering domain."""
    from ordering.utils.db import setup_db

    ordering = _init()
    print("Creating ordering database schema...")
    prepared = setup_db(ordering)
    if not prepared:
        print("  No SQL database configured; nothing to create.")
    for name in prepared:
        print(f"  {name} schema ready.")
    print("Done.")


def drop_database():
    """Drop database tables for the ordering domain."""
    from ordering.utils.db import drop_db

    ordering = _init()
    print("Dropping ordering database schema...")
    for name in drop_db(ordering):
        print(f"  {name} schema dropped.")
    print("Done.")


def show_settings():
    """Print the store settings, creating the default record if absent."""
    from ordering.settings.gate import SettingsStore

    ordering = _init()
    with ordering.domain_context():
        view = SettingsStore().get().to_view()

    for key, value in view.items():
        print(f"  {key}: {value}")


def update_settings(accepting_orders=None, maintenance_mode=None):
    """Update one store setting and print the result."""
    from ordering.settings.gate import SettingsStore

    ordering = _init()
    with ordering.domain_context():
        settings = SettingsStore().set(
            accepting_orders=accepting_orders,
            maintenance_mode=maintenance_mode,
        )

    print("Settings updated.")
    for key, value in settings.to_view().items():
        print(f"  {key}: {value}")


def list_orders(user_id, status=None, search=None):
    """Print a user's orders, newest first."""
    from ordering.views.history import order_history

    ordering = _init()
    with ordering.domain_context():
        orders = order_history(user_id, status=status, search=search)

    if not orders:
        print(f"No orders found for {user_id}.")
        return

    for order in orders:
        print(f"  {order.order_number}  {order.status:<10}  {order.payment_method:<6}  ₹{order.total}")
    print(f"{len(orders)} order(s).")


def _on_off(value: str) -> bool:
    return value == "on"


def main():
    parser = argparse.ArgumentParser(description="Storefront administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create order and settings tables")
    subparsers.add_parser("drop-db", help="Drop order and settings tables")
    subparsers.add_parser("settings", help="Show store settings")

    accepting_parser = subparsers.add_parser("accepting-orders", help="Open or close the store for orders")
    accepting_parser.add_argument("value", choices=["on", "off"])

    maintenance_parser = subparsers.add_parser("maintenance", help="Toggle maintenance mode")
    maintenance_parser.add_argument("value", choices=["on", "off"])

    orders_parser = subparsers.add_parser("orders", help="List a user's orders")
    orders_parser.add_argument("--user", required=True, help="User id whose orders to list")
    orders_parser.add_argument("--status", default=None, help="Only orders in this status")
    orders_parser.add_argument("--search", default=None, help="Match order number or product name")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "settings":
        show_settings()
    elif args.command == "accepting-orders":
        update_settings(accepting_orders=_on_off(args.value))
    elif args.command == "maintenance":
        update_settings(maintenance_mode=_on_off(args.value))
    elif args.command == "orders":
        list_orders(args.user, status=args.status, search=args.search)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
