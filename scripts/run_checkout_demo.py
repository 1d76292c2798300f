#!/usr/bin/env python3
"""
Run a full checkout (cart -> validation -> M-Pesa initiation -> redirect) and
print each stage to the terminal.

By default the mock gateway is used. With --live the checkout talks to the
backend at CHECKOUT_API_BASE_URL (e.g. `uvicorn src.api.main:app`).

Usage (from repo root):
  python scripts/run_checkout_demo.py
  python scripts/run_checkout_demo.py --method cash
  python scripts/run_checkout_demo.py --live --token demo-token
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.checkout.cart import CartItem
from src.checkout.errors import UnsupportedMethodError
from src.checkout.orchestrator import CheckoutOrchestrator
from src.integrations.clients.mocks.ui import LoggingNotifier, RecordingNavigator
from src.integrations.factory import build_session_stores, select_payment_gateway
from src.utils.config_loader import load_checkout_config


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


def parse_args():
    parser = argparse.ArgumentParser(description="Run a demo checkout")
    parser.add_argument("--live", action="store_true", help="Call the backend at CHECKOUT_API_BASE_URL")
    parser.add_argument("--token", default=None, help="Access token sent as a bearer credential")
    parser.add_argument("--session", default="demo", help="Session id used for the cart/token keys in Redis")
    parser.add_argument("--phone", default="0712345678")
    parser.add_argument("--method", default="mpesa", choices=["mpesa", "cash", "card"])
    return parser.parse_args()


async def main():
    args = parse_args()
    setup_logging()

    config = load_checkout_config()
    if args.live:
        config = config.model_copy(update={"integrations_mode": "real"})
    elif config.integrations_mode == "auto":
        config = config.model_copy(update={"integrations_mode": "mock"})

    cart_store, token_store = build_session_stores(config, args.session, token=args.token)
    cart_store.save_cart(
        [
            CartItem(product_id=1, product_name="Maize flour 2kg", quantity=2, unit_price=100),
            CartItem(product_id=7, product_name="Cooking oil 1L", quantity=1, unit_price=350),
        ]
    )
    navigator = RecordingNavigator()
    notifier = LoggingNotifier()
    gateway = select_payment_gateway(config, token_store)

    checkout = CheckoutOrchestrator(cart_store, gateway, navigator, notifier, currency=config.currency)

    checkout.mount()
    summary = checkout.summary
    print_stage("ORDER SUMMARY", {"lines": [asdict(line) for line in summary.lines], "total": summary.formatted_total})

    for name, value in {
        "customer_name": "Jane Wanjiku",
        "customer_phone": args.phone,
        "delivery_address": "Moi Avenue, Nairobi",
    }.items():
        checkout.update_field(name, value)

    try:
        checkout.select_payment_method(args.method)
    except UnsupportedMethodError as exc:
        print_stage("METHOD SELECTION REJECTED (selection guard)", exc.message)
        # Bypass the selection guard to show the submit-time rejection too
        checkout.update_field("payment_method", args.method)

    print_stage("SUBMIT", checkout.submit_label)
    snapshot = await checkout.submit()

    print_stage(
        "RESULT",
        {
            "state": snapshot.state.value,
            "loading": snapshot.loading,
            "error": snapshot.error_message,
            "sale_id": snapshot.sale_id,
            "redirects": navigator.paths,
            "notifications": [m for m, _ in notifier.messages],
            "cart_after": [item.to_dict() for item in cart_store.get_cart()],
        },
    )


if __name__ == "__main__":
    asyncio.run(main())
