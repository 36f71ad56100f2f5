"""Storefront maintenance CLI.

Usage:
    python -m storefront.manage reconcile [--older-than-minutes N]
    python -m storefront.manage purge-promocodes
"""

import argparse
import sys
from datetime import timedelta


def reconcile(older_than_minutes=15):
    """Resume checkouts that were charged but never reached DONE."""
    from storefront.services import get_checkout_reconciler

    summary = get_checkout_reconciler().reconcile_stalled(older_than=timedelta(minutes=older_than_minutes))
    print(
        f"Reconciled {summary.total} checkout(s): "
        f"{summary.completed} completed, {summary.compensated} compensated, {summary.failed} failed."
    )
    return 1 if summary.failed else 0


def purge_promocodes():
    """Delete promo codes past their retention period."""
    from storefront.services import get_promo_ledger

    purged = get_promo_ledger().purge_expired()
    print(f"Purged {purged} expired promo code(s).")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile_parser = subparsers.add_parser("reconcile", help="Resume stalled checkouts")
    reconcile_parser.add_argument(
        "--older-than-minutes",
        type=int,
        default=15,
        help="Only touch checkouts idle for at least this long (default: 15)",
    )
    subparsers.add_parser("purge-promocodes", help="Delete expired promo codes")

    args = parser.parse_args(argv)

    from storefront.domain import storefront

    storefront.init()
    with storefront.domain_context():
        if args.command == "reconcile":
            return reconcile(args.older_than_minutes)
        if args.command == "purge-promocodes":
            return purge_promocodes()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
