"""
Order Collection Verification Script

Reads the live order collection from a running server and reports on
its integrity: duplicate ids, orders missing required fields, status
breakdown and revenue.

Run from project root: python scripts/verify.py [--url http://localhost:3000]
"""

import argparse
import sys
from collections import Counter
from datetime import datetime

import httpx

API_BASE_URL = "http://localhost:3000"
REQUIRED_FIELDS = ["id", "items", "total", "status", "createdAt"]


def verify_orders(base_url: str = API_BASE_URL) -> bool:
    """Verify the order collection served by the API."""

    print("=" * 60)
    print("🔍 ORDER COLLECTION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🎯 Server: {base_url}")
    print("=" * 60)

    try:
        response = httpx.get(f"{base_url}/api/orders", timeout=10.0)
        response.raise_for_status()
        orders = response.json()
    except httpx.HTTPError as e:
        print(f"\n❌ Could not fetch orders: {e}")
        return False

    print(f"\n📊 STATISTICS:")
    print(f"   Total Orders: {len(orders)}")

    # Required fields
    incomplete = [o.get("id") for o in orders if any(f not in o for f in REQUIRED_FIELDS)]
    if incomplete:
        print(f"\n⚠️ {len(incomplete)} orders missing required fields: {incomplete[:10]}")
    else:
        print(f"\n✅ All orders carry {', '.join(REQUIRED_FIELDS)}")

    # Duplicate ids
    duplicates = [order_id for order_id, n in Counter(o.get("id") for o in orders).items() if n > 1]
    if duplicates:
        print(f"⚠️ {len(duplicates)} duplicate order IDs found: {duplicates[:10]}")
    else:
        print(f"✅ No duplicate order IDs")

    # Status breakdown
    statuses = Counter(o.get("status") or "<none>" for o in orders)
    print(f"\n🍳 STATUS:")
    for status, count in statuses.most_common():
        print(f"   {status:<12} {count}")

    # Revenue
    totals = [o["total"] for o in orders if isinstance(o.get("total"), (int, float))]
    if totals:
        print(f"\n💰 REVENUE:")
        print(f"   Total: ${sum(totals):.2f}")
        print(f"   Average: ${sum(totals) / len(totals):.2f}")

    # Most recent
    print(f"\n📋 RECENT ORDERS:")
    print("-" * 60)
    for order in orders[-5:]:
        print(
            f"   #{order.get('id')}  {order.get('customerName') or '':<12} "
            f"{order.get('status') or '':<10} ${order.get('total', 0)}"
        )

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE")
    print("=" * 60)

    return not duplicates and not incomplete


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order collection verification")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    sys.exit(0 if verify_orders(args.url) else 1)
