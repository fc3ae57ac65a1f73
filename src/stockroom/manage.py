"""Stockroom database management CLI.

Usage:
    python -m stockroom.manage setup-db   # Create all tables
    python -m stockroom.manage drop-db    # Drop all tables
    python -m stockroom.manage seed       # Replace the catalogue with the demo items
    python -m stockroom.manage serve      # Run the API (uvicorn)
"""

import argparse
import sys

from rich.console import Console
from rich.table import Table

console = Console()


def setup_database():
    from stockroom.domain import initialize
    from stockroom.utils.db import setup_db

    console.print("Initializing stockroom...")
    stockroom = initialize()
    console.print("Creating database schema...")
    setup_db(stockroom)
    console.print("  schema ready.")


def drop_database():
    from stockroom.domain import initialize
    from stockroom.utils.db import drop_db

    console.print("Initializing stockroom...")
    stockroom = initialize()
    console.print("Dropping database schema...")
    drop_db(stockroom)
    console.print("  schema dropped.")


def seed_database():
    from stockroom.domain import initialize
    from stockroom.ledger.seed import seed_catalogue
    from stockroom.utils.db import setup_db

    stockroom = initialize()
    setup_db(stockroom)
    with stockroom.domain_context():
        skus = seed_catalogue()

    table = Table(title="Seeded catalogue")
    for column in ("Code", "Name", "Category", "Price", "Stock"):
        table.add_column(column)
    for sku in skus:
        table.add_row(sku.external_code or "-", sku.name, sku.category, str(sku.price), str(sku.stock))
    console.print(table)


def serve(host: str, port: int, reload: bool):
    import uvicorn

    console.print(f"Serving stockroom on http://{host}:{port}")
    uvicorn.run("stockroom.app:app", host=host, port=port, reload=reload)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Stockroom database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Replace every SKU with the demo catalogue")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_database()
    elif args.command == "serve":
        serve(args.host, args.port, args.reload)
        return
    else:
        parser.print_help()
        sys.exit(1)

    console.print("Done.")


if __name__ == "__main__":
    main()
