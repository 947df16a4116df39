import asyncio
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from strata import ChronologicalCursor, FunctionAggregator, from_collection, map_items, project_with, requery

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)

ORDERS = [
    {"at": T0 + timedelta(minutes=i), "customer": c, "amount": a}
    for i, (c, a) in enumerate([("ada", 30), ("bob", 12), ("ada", 8), ("cy", 50), ("bob", 5)])
]


class Totals(ChronologicalCursor):
    """Per-customer totals that remember how far they have read."""

    def __init__(self) -> None:
        super().__init__(key=lambda order: order["at"])
        self.by_customer: dict[str, int] = defaultdict(int)


def fold(totals, batch):
    for order in batch:
        totals.by_customer[order["customer"]] += order["amount"]
    return totals


async def main():
    orders = from_collection(ORDERS, id="orders")

    totals = Totals()
    while True:
        before = totals.position
        totals = await project_with(orders, FunctionAggregator(fold), totals, batch_size=2)
        print(f"{before} -> {totals.position}  {dict(totals.by_customer)}")
        if totals.position == before:
            break

    # One stream of amounts per customer, derived from a customer index
    customers = from_collection(sorted({o["customer"] for o in ORDERS}), id="customers")
    per_customer = requery(
        customers,
        lambda name: map_items(
            from_collection([o for o in ORDERS if o["customer"] == name], id=name),
            lambda order: order["amount"],
        ),
    )
    for stream in await per_customer.create_query().next_batch():
        print(stream.id, (await stream.create_query().next_batch()).items)


asyncio.run(main())
