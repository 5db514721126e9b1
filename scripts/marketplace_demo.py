"""Demo: walk one order through the whole marketplace flow.

Registers an admin, a customer and a few merchants, lists their teff,
places a two-merchant order, routes it to the merchants and completes it,
printing the merchant breakdown, the assignment flags and the stock left
after each step.

Usage:
    python scripts/marketplace_demo.py
    python scripts/marketplace_demo.py --method both --merchants 3
"""

import argparse
import json
import sys

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")


def main():
    parser = argparse.ArgumentParser(description="Walk one order through the marketplace")
    parser.add_argument(
        "--method",
        choices=["phone", "dashboard", "both"],
        default="dashboard",
        help="How merchants are told about the order (default: dashboard)",
    )
    parser.add_argument("--merchants", type=int, default=2, help="Number of merchants to register (default: 2)")
    parser.add_argument("--quantity", type=float, default=2.0, help="Kilos bought from each merchant (default: 2)")
    args = parser.parse_args()

    from teffmarket.account.registration import RegisterAccount
    from teffmarket.domain import teffmarket
    from teffmarket.order.assignment import AssignOrder
    from teffmarket.order.completion import CompleteOrder
    from teffmarket.order.order import Order
    from teffmarket.order.placement import PlaceOrder
    from teffmarket.product.listing import ListProduct
    from teffmarket.product.product import Product, TeffVariety

    teffmarket.init()

    varieties = [v.value for v in TeffVariety]

    with teffmarket.domain_context():
        admin_id = teffmarket.process(RegisterAccount(name="Admin", email="admin@teffmarket.example", role="admin"))
        customer_id = teffmarket.process(RegisterAccount(name="Almaz", email="almaz@teffmarket.example"))

        merchant_ids = []
        product_ids = []
        for i in range(args.merchants):
            merchant_id = teffmarket.process(
                RegisterAccount(
                    name=f"Merchant {i + 1}",
                    email=f"merchant{i + 1}@teffmarket.example",
                    phone=f"+25191100000{i}",
                    role="merchant",
                )
            )
            merchant_ids.append(merchant_id)
            product_ids.append(
                teffmarket.process(
                    ListProduct(
                        merchant_id=merchant_id,
                        variety=varieties[i % len(varieties)],
                        price_per_kilo=100.0 + 10 * i,
                        stock_available=25.0,
                    )
                )
            )

        order_id = teffmarket.process(
            PlaceOrder(
                customer=json.dumps(
                    {"name": "Almaz", "phone": "+251911000000", "address": "Bole Road", "kebele": "03"}
                ),
                items=json.dumps([{"product_id": pid, "quantity": args.quantity} for pid in product_ids]),
                created_by=customer_id,
            )
        )

        order_repo = teffmarket.repository_for(Order)
        order = order_repo.get_order(order_id)

        print(f"\n{'=' * 60}")
        print("  TeffMarket Demo: order fan-out")
        print(f"{'=' * 60}")
        print(f"  Order:        {order_id}")
        print(f"  Total:        {order.total_amount:.2f} ETB")
        for share in order.breakdown:
            print(f"    {share.merchant_name:<14} {share.amount:>10.2f} ETB")

        message = teffmarket.process(
            AssignOrder(
                order_id=order_id,
                merchant_ids=json.dumps(merchant_ids),
                notification_method=args.method,
                assigned_by=admin_id,
            )
        )
        order = order_repo.get_order(order_id)
        print(f"\n  {message}")
        for assignment in order.assignments:
            print(
                f"    {assignment.merchant_id[:8]}  status={assignment.status:<9} "
                f"phone_called={assignment.phone_called} message_sent={assignment.message_sent}"
            )

        teffmarket.process(CompleteOrder(order_id=order_id, completed_by=admin_id))
        order = order_repo.get_order(order_id)
        print(f"\n  Order status: {order.status}")

        product_repo = teffmarket.repository_for(Product)
        for product_id in product_ids:
            product = product_repo.get(product_id)
            print(f"    {product.variety:<6} stock left: {product.stock_available:g} kg")
        print(f"{'=' * 60}\n")


if __name__ == "__main__":
    main()
