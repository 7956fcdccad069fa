"""
Print a salon financial report to the terminal.

Reads sales, commissions and appointments from Supabase (SUPABASE_URL and
SUPABASE_KEY must be set) and prints the dashboard figures.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence
from uuid import UUID

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.period import PeriodToken, custom_period, resolve_period
from domain.summary import CategoryShare, FinancialReport
from repositories.record_source import SupabaseRecordSource
from services.config import load_settings
from services.report_service import NoSalonAvailableError, ReportService


def _print_shares(title: str, shares: Sequence[CategoryShare], currency: str) -> None:
    print(f"\n{title}:")
    print("-" * 60)
    if not shares:
        print("  (none)")
        return
    for share in shares:
        print(f"  {share.label:<30} {share.amount:>14,.0f} {currency}  {share.percentage:>3}%")


def print_report(report: FinancialReport, title: str = "Custom Range") -> None:
    currency = report.currency
    print("=" * 60)
    print(f"FINANCIAL REPORT: {title.upper()}")
    print("=" * 60)
    print(f"Salon:            {report.salon_id}")
    print(f"Period:           {report.period.start_date} to {report.period.end_date} ({report.period.days} days)")
    print(f"Compared with:    {report.previous_period.start_date} to {report.previous_period.end_date}")
    print()

    for name, metric in report.metrics.items():
        label = name.replace("_", " ").capitalize()
        print(f"{label + ':':<18}{metric.value:>14,.0f}   ({metric.change_percent:+.1f}%)")

    print(f"{'Profit margin:':<18}{report.current.profit_margin:>13.1f}%")
    print(f"{'Result:':<18}{'Profit' if report.current.is_profit else 'Loss':>14}")

    stats = report.commission_stats
    print(f"\nCommissions paid:   {stats.paid:,.0f} {currency} ({stats.paid_count})")
    print(f"Commissions unpaid: {stats.unpaid:,.0f} {currency} ({stats.unpaid_count})")

    _print_shares("Payment methods", report.payment_methods, currency)
    _print_shares("Employee expenses", report.employee_expenses, currency)
    _print_shares("Top services", report.top_services, currency)
    _print_shares("Top products", report.top_products, currency)

    print(f"\nRevenue trend ({report.trend.granularity.value}):")
    print("-" * 60)
    for bucket in report.trend.buckets:
        print(f"  {bucket.label:<12} {bucket.value:>14,.0f}")

    appointments = report.appointment_stats
    print(f"\nAppointments:     {appointments.total} (completion {appointments.completion_rate:.1f}%)")

    if report.is_degraded:
        print("\nWARNING: report built on partial data")
        for warning in report.warnings:
            print(f"  {warning.source}: {warning.message}")
    print("=" * 60)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Print a salon financial report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Last 30 days for a salon
  python print_financial_report.py --salon-id <uuid> --period month

  # This year for the first salon of an owner
  python print_financial_report.py --owner-id <uuid> --period thisYear

  # Custom range
  python print_financial_report.py --salon-id <uuid> --start 2025-01-01 --end 2025-03-31
        """
    )

    parser.add_argument("--salon-id", help="Salon to report on")
    parser.add_argument("--owner-id", help="Use this owner's first salon when --salon-id is absent")
    parser.add_argument(
        "--period",
        "-p",
        choices=[t.value for t in PeriodToken],
        default=PeriodToken.MONTH.value,
        help="Named period (default: month)"
    )
    parser.add_argument("--start", help="Custom range start date (YYYY-MM-DD)")
    parser.add_argument("--end", help="Custom range end date (YYYY-MM-DD)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log fetch details")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        settings = load_settings()

        if args.start or args.end:
            if not (args.start and args.end):
                print("ERROR: --start and --end must be given together", file=sys.stderr)
                return 2
            period = custom_period(args.start, args.end)
            title = "Custom Range"
        else:
            period = resolve_period(args.period, tz=settings.timezone)
            title = PeriodToken(args.period).label

        service = ReportService(
            SupabaseRecordSource(tz=settings.timezone),
            tz=settings.timezone,
            max_workers=settings.fetch_workers,
            currency=settings.currency,
        )

        report = service.build_financial_report(
            period,
            salon_id=UUID(args.salon_id) if args.salon_id else None,
            owner_id=UUID(args.owner_id) if args.owner_id else None,
        )
        print_report(report, title)
        return 0

    except NoSalonAvailableError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        print("\n\nReport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
