#!/usr/bin/env python
"""
Ledger Export Script

Fetches the FIFO-reconciled ledger of one vendor from the Wire Ledger API,
prints a short summary and writes the rows to CSV.

Usage:
    python export_ledger.py "Acme Works"
    python export_ledger.py "Acme Works" --wire 22mm
    python export_ledger.py "Acme Works" --output acme.csv
    python export_ledger.py "Acme Works" --url http://localhost:8000
"""
import argparse
import csv
import sys
from datetime import date
from pathlib import Path
from typing import List, Dict, Any, Optional

import httpx

STORE_UNAVAILABLE = "Data store is unavailable; please try again later"

CSV_COLUMNS = [
    "Sr.No",
    "Date",
    "Wire",
    "Design",
    "Wire ID",
    "Qty Out",
    "Qty In",
    "Labour Charges",
    "Remaining Weight",
    "Status",
]

STATUS_SYMBOLS = {
    "completed": "✅",
    "partial": "🟡",
    "pending": "⏳",
}


class LedgerExporter:
    """Client that turns a reconciled vendor ledger into CSV rows."""

    def __init__(self, api_url: str = "http://localhost:8000"):
        """
        Initialize exporter.

        Args:
            api_url: Base URL of the Wire Ledger API
        """
        self.api_url = api_url

    def fetch_ledger(self, vendor: str, wire: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch a vendor's reconciled ledger.

        Args:
            vendor: Vendor name
            wire: Optional wire name filter

        Returns:
            API response dictionary
        """
        endpoint = f"{self.api_url}/ledger/{vendor}"
        params = {}
        if wire:
            params["wire"] = wire

        with httpx.Client(timeout=60) as client:
            response = client.get(endpoint, params=params)
            response.raise_for_status()
            return response.json()

    @staticmethod
    def format_date(value: str) -> str:
        """ISO date to DD/MM/YYYY."""
        return date.fromisoformat(value).strftime("%d/%m/%Y")

    def to_csv_rows(self, ledger: Dict[str, Any]) -> List[List[str]]:
        """
        Convert ledger rows to CSV rows in CSV_COLUMNS order.

        Weights are written with 3 decimals and amounts with 2; zero
        quantities on the opposite side of a row are left blank.
        """
        rows = []
        for row in ledger.get("rows", []):
            is_out = row["type"] == "OUT"
            rows.append([
                str(row["serial_no"]),
                self.format_date(row["transaction_date"]),
                row["wire"],
                row.get("design") or "",
                row.get("lot_id") or "",
                f"{row['qty_out']:.3f}" if is_out else "",
                "" if is_out else f"{row['qty_in']:.3f}",
                "" if is_out else f"{row['labour_charges']:.2f}",
                f"{row['running_balance']:.3f}",
                row["lot_status"],
            ])
        return rows

    def generate_report(self, ledger: Dict[str, Any]) -> str:
        """
        Generate a short text summary of the ledger.

        Args:
            ledger: Ledger data from API

        Returns:
            Formatted report string
        """
        rows = ledger.get("rows", [])
        if not rows:
            return f"❌ No transactions on record for {ledger.get('vendor')}."

        report = []
        report.append("=" * 60)
        report.append(f"LEDGER: {ledger['vendor']}")
        if ledger.get("wire"):
            report.append(f"Wire filter: {ledger['wire']}")
        report.append(f"Ordering: {ledger['sort_rule']}")
        report.append("=" * 60)
        report.append(f"Transactions: {len(rows)}")
        report.append(f"Total OUT: {ledger['total_out']:.3f} kg")
        report.append(f"Total IN:  {ledger['total_in']:.3f} kg")
        report.append(f"Balance:   {ledger['final_balance']:.3f} kg")
        report.append("")

        open_lots = [lot for lot in ledger.get("lots", []) if lot["status"] != "completed"]
        report.append(f"📦 OPEN LOTS ({len(open_lots)})")
        report.append("-" * 60)
        for lot in open_lots:
            symbol = STATUS_SYMBOLS.get(lot["status"], "")
            report.append(
                f"{symbol} {lot['lot_id']}  {lot['wire']:<10} "
                f"{lot['remaining_qty']:.3f} of {lot['qty']:.3f} kg  "
                f"(out {self.format_date(lot['out_date'])})"
            )
        report.append("=" * 60)
        return "\n".join(report)

    def write_csv(self, ledger: Dict[str, Any], output: Path) -> int:
        """Write the ledger to ``output``. Returns the number of data rows."""
        rows = self.to_csv_rows(ledger)
        with open(output, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_COLUMNS)
            writer.writerows(rows)
        return len(rows)


def default_output(vendor: str) -> Path:
    safe_vendor = "".join(c if c.isalnum() else "_" for c in vendor).strip("_")
    return Path(f"{safe_vendor}_Ledger_{date.today().isoformat()}.csv")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Export a vendor's reconciled wire ledger to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "vendor",
        type=str,
        help="Vendor name"
    )

    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8000",
        help="Base API URL (default: http://localhost:8000)"
    )

    parser.add_argument(
        "--wire",
        type=str,
        help="Only export wires whose name contains this text"
    )

    parser.add_argument(
        "--output",
        type=Path,
        help="CSV file to write (default: <vendor>_Ledger_<date>.csv)"
    )

    args = parser.parse_args()

    exporter = LedgerExporter(api_url=args.url)

    print(f"🔍 Loading ledger of {args.vendor}...")

    try:
        ledger = exporter.fetch_ledger(args.vendor, wire=args.wire)
    except httpx.ConnectError:
        print(f"❌ {STORE_UNAVAILABLE}", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"❌ Error loading ledger: {e}", file=sys.stderr)
        sys.exit(1)

    print(exporter.generate_report(ledger))

    output = args.output or default_output(args.vendor)
    count = exporter.write_csv(ledger, output)
    print(f"\n💾 {count} row(s) saved to: {output}")


if __name__ == "__main__":
    main()
