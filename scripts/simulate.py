"""
Lunch Rush Simulation Script

Fires concurrent customer orders and kitchen status changes at a running
server, then checks how many of them actually survived in the collection.
Whole-collection stores (memory, Vercel KV) can drop writes under
concurrency; keyed stores (Redis, SQL) should not.

Run from project root: python scripts/simulate.py --orders 30
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_ORDERS = 30

# Sample data for random orders
FIRST_NAMES = ["Ana", "Luis", "Maya", "Sam", "Priya", "Omar", "Kim", "Leo", "Zoe", "Ravi"]
MENU_ITEMS = [
    {"name": "Taco al Pastor", "price": 3.5},
    {"name": "Carnitas Taco", "price": 3.75},
    {"name": "Veggie Burrito", "price": 9.0},
    {"name": "Quesadilla", "price": 7.5},
    {"name": "Elote", "price": 4.0},
    {"name": "Churros", "price": 5.0},
    {"name": "Horchata", "price": 3.0},
    {"name": "Jarritos", "price": 2.5},
]
KITCHEN_STATUSES = ["preparing", "ready", "completed"]


def generate_random_items() -> list[dict]:
    """Generate random line items."""
    items = []
    for item in random.sample(MENU_ITEMS, random.randint(1, 4)):
        items.append({**item, "qty": random.randint(1, 3)})
    return items


def generate_order_payload() -> dict[str, Any]:
    """Generate the body the customer page would POST."""
    items = generate_random_items()
    now = datetime.now()

    return {
        "items": items,
        "total": round(sum(i["price"] * i["qty"] for i in items), 2),
        "type": random.choice(["eat", "togo"]),
        "customerName": random.choice(FIRST_NAMES),
        "customerPhone": f"555-{random.randint(1000, 9999)}",
        "timestamp": now.strftime("%I:%M %p"),
        "date": now.strftime("%m/%d/%Y"),
    }


async def place_order(client: httpx.AsyncClient, order_num: int) -> dict[str, Any]:
    """POST one order and time it."""
    start_time = time.time()

    try:
        response = await client.post("/api/orders", json=generate_order_payload())
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data["id"],
                "total": data.get("total", 0),
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }


async def advance_order(client: httpx.AsyncClient, order_id: int) -> dict[str, Any]:
    """PATCH one order to a random kitchen status."""
    status = random.choice(KITCHEN_STATUSES)

    try:
        response = await client.patch(f"/api/orders/{order_id}", json={"status": status})
        return {"order_id": order_id, "status": status, "success": response.status_code == 200}
    except httpx.HTTPError:
        return {"order_id": order_id, "status": status, "success": False}


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS, base_url: str = API_BASE_URL) -> dict[str, Any]:
    """
    Run the lunch rush.

    Args:
        num_orders: Number of concurrent customer orders
        base_url: Server to target
    """
    print("=" * 70)
    print("🌮 LUNCH RUSH SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {base_url}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        health = await client.get("/api/health")
        health.raise_for_status()
        print(f"\n💾 Storage: {health.json().get('storage')}")

        print("\n🚀 Customers ordering...\n")
        results = await asyncio.gather(*(place_order(client, i + 1) for i in range(num_orders)))
        successful = [r for r in results if r["success"]]

        print("👩‍🍳 Kitchen updating statuses...\n")
        updates = await asyncio.gather(*(advance_order(client, r["order_id"]) for r in successful))

        stored = (await client.get("/api/orders")).json()

    total_time = round(time.time() - start_time, 2)
    stored_by_id = {o["id"]: o for o in stored}

    lost_orders = [r["order_id"] for r in successful if r["order_id"] not in stored_by_id]
    lost_updates = [
        u for u in updates
        if u["success"]
        and u["order_id"] in stored_by_id
        and stored_by_id[u["order_id"]].get("status") != u["status"]
    ]

    print("=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Accepted Orders: {len(successful)}/{num_orders}")
    print(f"❌ Rejected Orders: {num_orders - len(successful)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum(r["total"] for r in successful)
        print(f"\n📈 Average Response: {avg_time}s")
        print(f"   💰 Revenue: ${revenue:.2f}")

    print(f"\n🔍 Orders missing from collection: {len(lost_orders)}")
    print(f"🔍 Status changes overwritten: {len(lost_updates)}")
    if lost_orders or lost_updates:
        print("   ⚠️ Concurrent writers overwrote each other (whole-collection store)")

    print("\n" + "=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "lost_orders": lost_orders,
        "lost_updates": lost_updates,
        "total_time": total_time,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Lunch Rush Simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    try:
        asyncio.run(run_simulation(num_orders=args.orders, base_url=args.url))
    except httpx.HTTPError as e:
        print(f"\n❌ Server not reachable: {e}")
        sys.exit(1)
