#!/usr/bin/env python3
"""
Statement import CLI

Imports bank statements (CSV, PDF or extracted text), categorizes them and
prints the review queue, the monthly cash-flow report and KPIs.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from founder_finance.core.errors import FinanceError
from founder_finance.core.export import monthly_frame
from founder_finance.core.kpi import KpiSnapshot
from founder_finance.core.session import FinanceSession
from founder_finance.utils.config import load_settings
from founder_finance.utils.logging_setup import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Import bank statements and report cash-flow KPIs')
    parser.add_argument('files', nargs='+', help='Statement files (.csv, .pdf, .txt)')
    parser.add_argument('--customers', type=int, help='New customers in the period (for CAC)')
    parser.add_argument('--custom-categories', type=Path, help='JSON file of custom categories')
    parser.add_argument('--approve-all', action='store_true',
                        help='Approve every pending transaction after import')
    parser.add_argument('--export', nargs='?', const='', default=None,
                        help='Write all transactions to CSV (no value: FOUNDER_FINANCE_EXPORT_PATH)')
    parser.add_argument('--log-level', help='Logging level (default: from .env or INFO)')
    return parser


def format_money(value) -> str:
    return f"${value:,.2f}"


def print_kpis(kpis: KpiSnapshot):
    runway = 'infinite' if kpis.runway_is_infinite else f"{kpis.runway:.1f} months"
    print(f"  Gross burn:        {format_money(kpis.gross_burn)}/mo")
    print(f"  Net burn:          {format_money(kpis.net_burn)}/mo")
    print(f"  Cash balance:      {format_money(kpis.current_balance)}")
    print(f"  Runway:            {runway}")
    print(f"  Gross margin:      {kpis.gross_margin:.1f}%")
    print(f"  Operating margin:  {kpis.operating_margin:.1f}%")
    print(f"  Marketing spend:   {format_money(kpis.marketing_spend)}")
    print(f"  CAC:               {format_money(kpis.cac)}")
    print(f"  Total funding:     {format_money(kpis.total_funding)}")


def print_review_queue(session: FinanceSession, limit: int = 10):
    groups = session.store.merchant_groups()
    if not groups:
        print("\n✅ Nothing left to review")
        return

    print(f"\n⚠️  {len(session.store.pending)} transactions pending review:")
    for merchant, members in groups[:limit]:
        total = sum(abs(t.amount) for t in members)
        label = merchant or '(unknown)'
        print(f"   • {label:<30} {len(members):>3} txns  {format_money(total):>12}  → {members[0].category}")
    if len(groups) > limit:
        print(f"   ... and {len(groups) - limit} more merchants")


def main(argv: Optional[List[str]] = None) -> int:
    """Main import function"""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 1
    configure_logging(args.log_level or settings.log_level)

    customers = args.customers if args.customers is not None else settings.new_customers
    categories_path = args.custom_categories or settings.custom_categories_path

    print("=" * 80)
    print("📥 STATEMENT IMPORT")
    print("=" * 80)
    print(f"Files:      {len(args.files)}")
    print(f"Customers:  {customers}")
    print("=" * 80)

    session = FinanceSession()

    if categories_path:
        try:
            added = session.taxonomy.load_custom_categories(categories_path)
        except (OSError, ValueError, FinanceError) as e:
            print(f"❌ Could not load custom categories: {e}")
            return 1
        print(f"\n📚 Loaded {added} custom categories")

    result = session.import_files(args.files)
    status = "✅" if not result.failed else ("⚠️ " if result.succeeded else "❌")
    print(f"\n{status} {result.summary}")
    if not result.succeeded:
        return 1

    stats = session.orchestrator.stats
    if stats['total']:
        print(f"\n🏷️  Categorized {stats['total']} transactions "
              f"({stats['high_confidence']} high confidence, {stats['learned_rule']} from learned rules)")

    if args.approve_all:
        approved = session.store.approve_all_pending()
        print(f"\n✅ Approved {len(approved)} transactions")

    print_review_queue(session)

    months = session.monthly_aggregates()
    print("\n" + "=" * 80)
    print("📊 MONTHLY CASH FLOW")
    print("=" * 80)
    if months:
        print(monthly_frame(months).to_string(index=False))
    else:
        print("No approved transactions yet")

    print("\n" + "=" * 80)
    print("📈 KPIs")
    print("=" * 80)
    print_kpis(session.kpis(customers))

    if args.export is not None:
        export_path = Path(args.export) if args.export else settings.export_path
        rows = session.export(export_path)
        print(f"\n💾 Exported {rows} transactions to {export_path}")

    print("\n" + "=" * 80)
    print("✅ Import complete!")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
