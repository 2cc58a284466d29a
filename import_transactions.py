#!/usr/bin/env python
"""
CSV Transaction Import Script

Imports wire OUT/IN entries from a ledger CSV into the Wire Ledger API.

Expected columns: Type,Vendor,Wire,PayalType,Weight,Price,Date
(PayalType and Price may be empty for OUT rows; an empty Price on an IN
row is computed from the vendor's rate.)

Usage:
    python import_transactions.py data/ledger.csv
    python import_transactions.py data/ledger.csv --batch-size 100
    python import_transactions.py data/ledger.csv --url http://localhost:8000
    python import_transactions.py data/ledger.csv --create-missing
"""
import argparse
import csv
import sys
from datetime import datetime
from decimal import Decimal, InvalidOperation
from io import StringIO
from pathlib import Path
from typing import List, Dict, Any, Optional

import httpx

STORE_UNAVAILABLE = "Data store is unavailable; please try again later"
DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y")


def parse_date(date_str: str) -> Optional[str]:
    """
    Parse a CSV date to ISO format.

    Args:
        date_str: Date as YYYY-MM-DD, DD/MM/YYYY or DD-MM-YYYY; may be empty

    Returns:
        ISO date string, or None when the cell is empty
    """
    date_str = (date_str or "").strip()
    if not date_str:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date().isoformat()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date {date_str!r}")


def parse_weight(weight_str: str) -> str:
    """Parse a positive weight in kg, keeping gram precision."""
    try:
        weight = Decimal(weight_str.strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"Invalid weight {weight_str!r}")
    if weight <= 0:
        raise ValueError(f"Weight must be positive, got {weight}")
    return str(weight.quantize(Decimal("0.001")))


def csv_row_to_transaction(row: Dict[str, str], create_missing: bool = False) -> Dict[str, Any]:
    """
    Convert a CSV row to a transaction payload.

    Args:
        row: Dictionary with CSV column headers as keys
        create_missing: Ask the API to create unknown vendors and wires

    Returns:
        Transaction dictionary ready for the API
    """
    txn_type = (row.get("Type") or "").strip().upper()
    if txn_type not in ("OUT", "IN"):
        raise ValueError(f"Type must be OUT or IN, got {txn_type!r}")

    transaction = {
        "type": txn_type,
        "vendor": (row.get("Vendor") or "").strip()[:128],
        "item": (row.get("Wire") or "").strip()[:64],
        "weight": parse_weight(row.get("Weight", "")),
        "transaction_date": parse_date(row.get("Date", "")),
        "create_missing": create_missing,
    }
    if txn_type == "IN":
        transaction["payal_type"] = (row.get("PayalType") or "").strip()[:64]
        price = (row.get("Price") or "").strip()
        if price:
            transaction["price"] = str(Decimal(price).quantize(Decimal("0.01")))
    return transaction


def read_csv_transactions(
    file_path: Path,
    limit: Optional[int] = None,
    create_missing: bool = False,
) -> List[Dict[str, Any]]:
    """
    Read transactions from a CSV file.

    Args:
        file_path: Path to CSV file
        limit: Optional limit on number of rows to read
        create_missing: Forwarded to every transaction payload

    Returns:
        List of transaction dictionaries
    """
    transactions = []

    encodings = ['utf-8-sig', 'latin-1', 'cp1252']
    file_content = None

    for encoding in encodings:
        try:
            with open(file_path, "r", encoding=encoding) as f:
                file_content = f.read()
                break
        except UnicodeDecodeError:
            continue

    if file_content is None:
        raise ValueError(f"Could not decode file with any of the supported encodings: {encodings}")

    reader = csv.DictReader(StringIO(file_content))

    for i, row in enumerate(reader):
        if limit and i >= limit:
            break
        try:
            transactions.append(csv_row_to_transaction(row, create_missing))
        except (ValueError, KeyError, InvalidOperation) as e:
            print(f"⚠️  Skipping row {i+2}: {e}", file=sys.stderr)
            continue

    return transactions


def send_batch(
    transactions: List[Dict[str, Any]],
    api_url: str,
    timeout: int = 30
) -> Dict[str, Any]:
    """
    Send a batch of transactions to the API.

    The API stores the whole batch or none of it.

    Raises:
        httpx.HTTPError: If API request fails
    """
    endpoint = f"{api_url}/transactions/batch"
    payload = {"transactions": transactions}

    with httpx.Client(timeout=timeout) as client:
        response = client.post(endpoint, json=payload)
        response.raise_for_status()
        return response.json()


def main():
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(
        description="Import wire ledger entries from CSV to the Wire Ledger API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/ledger.csv
  %(prog)s data/ledger.csv --batch-size 500
  %(prog)s data/ledger.csv --limit 1000 --url http://localhost:8000
  %(prog)s data/ledger.csv --create-missing
        """
    )

    parser.add_argument(
        "csv_file",
        type=Path,
        help="Path to CSV file with ledger entries"
    )

    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8000",
        help="Base API URL (default: http://localhost:8000)"
    )

    parser.add_argument(
        "--batch-size",
        type=int,
        default=500,
        help="Number of transactions per batch request (default: 500)"
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of rows to import (default: all)"
    )

    parser.add_argument(
        "--timeout",
        type=int,
        default=30,
        help="Request timeout in seconds (default: 30)"
    )

    parser.add_argument(
        "--create-missing",
        action="store_true",
        help="Create vendors and wires that are not in the catalogue yet"
    )

    args = parser.parse_args()

    if not args.csv_file.is_file():
        print(f"❌ Error: File not found: {args.csv_file}", file=sys.stderr)
        sys.exit(1)

    print(f"📂 Reading transactions from {args.csv_file}")

    try:
        transactions = read_csv_transactions(args.csv_file, args.limit, args.create_missing)
    except (OSError, ValueError) as e:
        print(f"❌ Error reading CSV: {e}", file=sys.stderr)
        sys.exit(1)

    if not transactions:
        print("⚠️  No valid transactions found in CSV", file=sys.stderr)
        sys.exit(1)

    print(f"✅ Loaded {len(transactions)} transaction(s)")

    # Rows stay in file order so IN entries follow the OUT entries they return
    total_created = 0
    batch_size = args.batch_size
    num_batches = (len(transactions) + batch_size - 1) // batch_size

    print(f"📤 Sending {num_batches} batch(es) to {args.url}")

    for i in range(0, len(transactions), batch_size):
        batch = transactions[i:i + batch_size]
        batch_num = (i // batch_size) + 1

        try:
            print(f"   Batch {batch_num}/{num_batches}: {len(batch)} transactions...", end=" ")
            response = send_batch(batch, args.url, args.timeout)
            created = response.get("created", 0)
            total_created += created
            print(f"✅ {created} created")
        except httpx.ConnectError:
            print("❌ Failed", file=sys.stderr)
            print(f"   {STORE_UNAVAILABLE}", file=sys.stderr)
            sys.exit(1)
        except httpx.HTTPError as e:
            print("❌ Failed", file=sys.stderr)
            print(f"   Error: {e}", file=sys.stderr)
            if hasattr(e, "response") and e.response is not None:
                try:
                    error_detail = e.response.json()
                    print(f"   API Response: {error_detail}", file=sys.stderr)
                except ValueError:
                    print(f"   API Response: {e.response.text}", file=sys.stderr)
            print(f"   Batch {batch_num} was not stored; {total_created} created before it",
                  file=sys.stderr)
            sys.exit(1)

    print(f"\n🎉 Import complete! Created {total_created} transaction(s)")


if __name__ == "__main__":
    main()
