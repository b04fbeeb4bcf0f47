#!/usr/bin/env python3
"""
Remove Duplicate Variants Script
Deletes variant rows that repeat (product, name, image) of an earlier row
"""

import sys

from storefront.services.cleanup_service import CleanupService
from storefront.core.exceptions import AppException
from storefront.store import RemoteStore


def remove_duplicates():
    """Purge duplicate variants from the configured store"""
    try:
        report = CleanupService(RemoteStore()).remove_duplicate_variants()
    except AppException as e:
        print(f"❌ ERROR: {e.message}")
        print("\nMake sure:")
        print("1. DATABASE_URL points at the catalog store")
        print("2. The store is reachable")
        sys.exit(1)

    print(f"Scanned variants:   {report.scanned}")
    print(f"Duplicates found:   {report.duplicates_found}")
    print(f"Deleted:            {report.deleted}")

    if report.failed:
        print(f"❌ {len(report.failed)} duplicate(s) could not be deleted:")
        for variant_id in report.failed:
            print(f"   - {variant_id}")
        sys.exit(1)

    print("✅ SUCCESS: No duplicate variants left")


if __name__ == "__main__":
    print("=" * 60)
    print("REMOVE DUPLICATE VARIANTS")
    print("=" * 60)
    print()
    remove_duplicates()
    print()
    print("=" * 60)
