#!/usr/bin/env python
"""
Print the GST breakdown, summary rows and trace for a cart.

Usage:
    python scripts/debug_pricing.py                     # built-in sample cart
    python scripts/debug_pricing.py cart.json           # backend cart JSON
    python scripts/debug_pricing.py cart.json 10        # with a 10% coupon
    python scripts/debug_pricing.py --quote 1000        # lump-sum quote price
"""
import json
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from storefront_pricing.config.logging import setup_logging
from storefront_pricing.engine import PricingEngine, PricingError, summary_rows

SAMPLE_CART = {
    "items": [
        {"product": {"_id": "p1", "name": "Laptop Bag", "price": 500}, "quantity": 2},
        {"product": {"_id": "p2", "name": "Wireless Mouse", "price": 300}, "quantity": 1},
    ]
}


def debug(args: list[str]):
    setup_logging("DEBUG")
    engine = PricingEngine()

    try:
        if args and args[0] == '--quote':
            print(f"Pricing lump-sum quote of {args[1]}")
            breakdown = engine.compute_from_base_amount(args[1], args[2] if len(args) > 2 else None)
        else:
            cart = SAMPLE_CART
            if args:
                with open(args[0], 'r', encoding='utf-8') as f:
                    cart = json.load(f)
            cart = cart.get('cart', cart)
            discount = args[1] if len(args) > 1 else None
            print(f"Pricing {len(cart.get('items') or [])} cart line(s), discount {discount or 'none'}")
            breakdown = engine.compute_from_line_items(cart.get('items') or [], discount)
    except PricingError as e:
        print(f"\n❌ {type(e).__name__}: {e}")
        sys.exit(1)

    print("\nBreakdown (unrounded):")
    for name, value in breakdown.amounts().items():
        print(f"  {name:<16} {value}")

    print("\nOrder Summary:")
    for label, value in summary_rows(breakdown, engine.gst_rate):
        print(f"  {label:<28} {value:>14}")

    print("\nTrace:")
    print(breakdown.get_trace_text())


if __name__ == "__main__":
    debug(sys.argv[1:])
