"""
Report CLI Utility

Command-line access to the dashboard reports. No UI required - designed
for scripting and for checking report output against exported data.

Usage Examples:
    # Purchase list from an exported JSON file of sale records (no database)
    python -m shop_dashboard.utils.report_cli purchase-list --input sales.json \\
        --from 2024-01-01 --to 2024-01-31

    # Purchase list for a store in the application database
    python -m shop_dashboard.utils.report_cli purchase-list --store-id 1 \\
        --from 2024-01-01 --to 2024-01-31 --json

    # Sales summary for the last 30 days, rolled up by month
    python -m shop_dashboard.utils.report_cli sales-summary --store-id 1 --monthly

Input file format (purchase-list --input): a JSON list of records such as
    {"productId": 1, "quantity": 2, "soldAt": "2024-01-05T10:00:00Z",
     "product": {"name": "唐揚げ弁当", "recipe": "[{\\"name\\": \\"鶏もも肉\\", ...}]"}}
or an object with that list under "records".
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from shop_dashboard.services.database import initialize_app_database
from shop_dashboard.services.exceptions import ServiceError
from shop_dashboard.services.material_usage_service import DailyMaterialUsage, SaleRecord
from shop_dashboard.services.purchase_list_service import build_purchase_list, get_purchase_list
from shop_dashboard.services.sales_summary_service import (
    default_period,
    get_daily_summary,
    summarize,
    summarize_monthly,
)
from shop_dashboard.utils.constants import (
    EXAMPLE_PRODUCT_SEPARATOR,
    SUMMARY_MODE_CUSTOM,
)
from shop_dashboard.utils.datetime_utils import parse_date


def load_sale_records(input_file: str) -> List[SaleRecord]:
    """Read sale records from a JSON file.

    Raises:
        ValueError: If the file is not a JSON list of records
    """
    with open(input_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("records")
    if not isinstance(data, list):
        raise ValueError("input must be a JSON list of sale records")

    return [SaleRecord.from_dict(item) for item in data if isinstance(item, dict)]


def format_purchase_list(items: List[DailyMaterialUsage]) -> str:
    """Render a purchase list as aligned text lines."""
    if not items:
        return "No materials used in this period."

    lines = []
    for item in items:
        examples = EXAMPLE_PRODUCT_SEPARATOR.join(item.example_products)
        suffix = f"  ({examples})" if examples else ""
        lines.append(f"{item.material_name}\t{item.display_amount}/日{suffix}")
    return "\n".join(lines)


def purchase_list_cmd(
    period_from: str,
    period_to: str,
    input_file: Optional[str] = None,
    store_id: Optional[int] = None,
    as_json: bool = False,
) -> int:
    """Print the per-day purchase list from a file or from the database."""
    start = parse_date(period_from)
    end = parse_date(period_to)
    if start is None or end is None:
        print("ERROR: dates must be YYYY-MM-DD")
        return 1

    try:
        if input_file:
            items = build_purchase_list(load_sale_records(input_file), start, end)
        else:
            print("Initializing database...", file=sys.stderr)
            initialize_app_database()
            items = get_purchase_list(store_id, start, end)
    except (OSError, ValueError, ServiceError) as e:
        print(f"ERROR: {e}")
        return 1

    if as_json:
        print(json.dumps([item.to_dict() for item in items], ensure_ascii=False, indent=2))
    else:
        print(f"Purchase list {period_from} - {period_to}")
        print(format_purchase_list(items))
    return 0


def sales_summary_cmd(
    store_id: int,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    monthly: bool = False,
) -> int:
    """Print sales and profit totals, per day or per month."""
    default_from, default_to = default_period()
    start = parse_date(date_from) if date_from else default_from
    end = parse_date(date_to) if date_to else default_to
    if start is None or end is None:
        print("ERROR: dates must be YYYY-MM-DD")
        return 1

    try:
        print("Initializing database...", file=sys.stderr)
        initialize_app_database()
        daily = get_daily_summary(store_id, start, end)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    summary = summarize(daily, SUMMARY_MODE_CUSTOM, range_from=start, range_to=end)
    print(summary.label)
    print(f"  売上: ¥{summary.sales_total:,.0f}")
    print(f"  利益: ¥{summary.profit_total:,.0f}")
    print()

    if monthly:
        for row in summarize_monthly(daily):
            print(f"{row.month}\t¥{row.sales:,.0f}\t¥{row.profit:,.0f}")
    else:
        for row in daily:
            print(f"{row.date.isoformat()}\t¥{row.sales:,.0f}\t¥{row.profit:,.0f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Report utility for Shop Dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Purchase list from a JSON export:
    python -m shop_dashboard.utils.report_cli purchase-list -i sales.json --from 2024-01-01 --to 2024-01-31

  Purchase list from the database:
    python -m shop_dashboard.utils.report_cli purchase-list -s 1 --from 2024-01-01 --to 2024-01-31

  Monthly sales summary:
    python -m shop_dashboard.utils.report_cli sales-summary -s 1 --monthly
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    purchase_parser = subparsers.add_parser(
        "purchase-list",
        help="Per-day material purchase list"
    )
    source = purchase_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-i", "--input",
        dest="input_file",
        help="JSON file of sale records (no database access)"
    )
    source.add_argument(
        "-s", "--store-id",
        dest="store_id",
        type=int,
        help="Store to report on"
    )
    purchase_parser.add_argument("--from", dest="period_from", required=True, help="First day (YYYY-MM-DD)")
    purchase_parser.add_argument("--to", dest="period_to", required=True, help="Last day (YYYY-MM-DD)")
    purchase_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print JSON instead of text"
    )

    summary_parser = subparsers.add_parser(
        "sales-summary",
        help="Sales and profit totals"
    )
    summary_parser.add_argument("-s", "--store-id", dest="store_id", type=int, required=True)
    summary_parser.add_argument("--from", dest="date_from", help="First day (default: 29 days ago)")
    summary_parser.add_argument("--to", dest="date_to", help="Last day (default: today)")
    summary_parser.add_argument(
        "--monthly",
        action="store_true",
        help="Roll rows up by month"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "purchase-list":
        if args.input_file and not Path(args.input_file).exists():
            print(f"ERROR: File not found: {args.input_file}")
            return 1
        return purchase_list_cmd(
            args.period_from,
            args.period_to,
            input_file=args.input_file,
            store_id=args.store_id,
            as_json=args.as_json,
        )
    elif args.command == "sales-summary":
        return sales_summary_cmd(args.store_id, args.date_from, args.date_to, args.monthly)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
