#!/usr/bin/env python3
"""Quick live check of the Airtable pagination flow.

Run:
  poetry run python scripts/check_airtable_live.py            # leads table
  poetry run python scripts/check_airtable_live.py Departments
"""

import sys

from lead_metrics.config import Settings
from lead_metrics.connectors.airtable import AirtableConnector


def main() -> None:
    settings = Settings.load().validate_required()
    table = sys.argv[1] if len(sys.argv) > 1 else settings.tables.leads
    print(f"Fetching all records from {table}...")

    with AirtableConnector(settings) as connector:
        records = connector.fetch_all(table)
    print(f"Got {len(records)} records")
    for i, r in enumerate(records[:5], 1):
        print(f"  {i}. {r.id} ({len(r.fields)} fields)")
    if records:
        print("\n✅ Pagination flow succeeded.")
    else:
        print("\n⚠️ No records returned. Check table name and token scopes.")


if __name__ == "__main__":
    main()
