"""Storefront management CLI.

Rate commands are meant to be invoked by an external scheduler (cron) as
well as by operators.

Usage:
    python src/manage.py setup-db            # Create all tables
    python src/manage.py drop-db             # Drop all tables
    python src/manage.py refresh-rate        # Fetch and record the silver rate
    python src/manage.py record-rate 158.5   # Record a manual rate
    python src/manage.py rate-history --limit 7
"""

import argparse
import sys


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    print("Creating storefront database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    print("Dropping storefront database schema...")
    drop_db(_domain())
    print("Done.")


def refresh_rate() -> int:
    from storefront.errors import ExternalDependencyError
    from storefront.pricing.rate import CommodityRate
    from storefront.pricing.refresh import RefreshCommodityRate

    domain = _domain()
    with domain.domain_context():
        try:
            rate_id = domain.process(RefreshCommodityRate(), asynchronous=False)
        except ExternalDependencyError as exc:
            print(f"Rate refresh failed: {exc.message}", file=sys.stderr)
            return 1
        rate = domain.repository_for(CommodityRate).get(rate_id)
        print(f"Recorded {rate.price_per_gram:.2f} {rate.currency}/g ({rate.source})")
    return 0


def record_rate(price_per_gram: float) -> int:
    from protean.exceptions import ValidationError

    from storefront.pricing.recording import RecordCommodityRate

    domain = _domain()
    with domain.domain_context():
        try:
            domain.process(RecordCommodityRate(price_per_gram=price_per_gram), asynchronous=False)
        except ValidationError as exc:
            print(f"Rate rejected: {exc.messages}", file=sys.stderr)
            return 1
    print(f"Recorded {price_per_gram:.2f}/g (manual)")
    return 0


def rate_history(limit: int) -> int:
    from storefront.pricing.rate import CommodityRate

    domain = _domain()
    with domain.domain_context():
        for rate in domain.repository_for(CommodityRate).history(limit=limit):
            print(f"{rate.captured_at:%Y-%m-%d %H:%M}  {rate.price_per_gram:>10.2f} {rate.currency}  {rate.source}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("refresh-rate", help="Fetch the silver rate from the provider and record it")

    record_parser = subparsers.add_parser("record-rate", help="Record a manual silver rate")
    record_parser.add_argument("price_per_gram", type=float)

    history_parser = subparsers.add_parser("rate-history", help="Show recent silver rates")
    history_parser.add_argument("--limit", type=int, default=30)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "refresh-rate":
        sys.exit(refresh_rate())
    elif args.command == "record-rate":
        sys.exit(record_rate(args.price_per_gram))
    elif args.command == "rate-history":
        sys.exit(rate_history(args.limit))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
