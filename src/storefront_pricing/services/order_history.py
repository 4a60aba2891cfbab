"""
Order history reporting with pandas.

Turns the backend's order list into a DataFrame whose totals come from the
shared PricingEngine, flagging orders whose server pricing disagrees.
"""
import logging
from pathlib import Path

import pandas as pd

from ..engine import PricingEngine, PricingError
from .documents import build_order_invoice, Party

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = [
    'order_id', 'created_at', 'status', 'item_count',
    'grand_total', 'server_grand_total', 'consistent',
]


def orders_frame(orders: list[dict], engine: PricingEngine) -> pd.DataFrame:
    """
    One row per order.

    grand_total is the engine's figure (rounded to 2 dp); it is NaN, and
    item_count is <NA>, when the order could not be priced. consistent is
    False when the backend's order.pricing disagrees with the engine or the
    order could not be priced.
    """
    # seller details never reach the frame
    seller = Party(name="", address="")
    rows = []

    for order in orders:
        row = {
            'order_id': str(order.get('_id', '')),
            'created_at': order.get('createdAt'),
            'status': order.get('status') or 'UNKNOWN',
            'item_count': None,
            'grand_total': float('nan'),
            'server_grand_total': (order.get('pricing') or {}).get('grandTotal'),
            'consistent': False,
        }
        try:
            invoice = build_order_invoice(order, engine, seller)
        except PricingError as e:
            logger.error("Order %s could not be priced: %s", row['order_id'], e)
        else:
            row['item_count'] = sum(line.quantity for line in invoice.lines)
            row['grand_total'] = float(invoice.pricing.rounded().grand_total)
            row['consistent'] = not invoice.warnings
        rows.append(row)

    frame = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    frame['created_at'] = pd.to_datetime(frame['created_at'], utc=True, errors='coerce', format='ISO8601')
    frame['item_count'] = frame['item_count'].astype('Int64')
    frame['server_grand_total'] = pd.to_numeric(frame['server_grand_total'], errors='coerce')
    frame['consistent'] = frame['consistent'].astype(bool)
    if not frame.empty:
        frame = frame.sort_values('created_at', ascending=False, na_position='last').reset_index(drop=True)
    return frame


def history_summary(frame: pd.DataFrame) -> dict:
    """Order count, total spend and spend per status (cancelled orders excluded from spend)."""
    if frame.empty:
        return {'orders': 0, 'total_spend': 0.0, 'by_status': {}, 'inconsistent': 0}

    spend = frame[frame['status'].str.upper() != 'CANCELLED']
    by_status = frame.groupby('status')['grand_total'].sum().round(2).to_dict()

    return {
        'orders': int(len(frame)),
        'total_spend': round(float(spend['grand_total'].sum()), 2),
        'by_status': {str(k): float(v) for k, v in by_status.items()},
        'inconsistent': int((~frame['consistent']).sum()),
    }


def export_history_csv(frame: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    logger.info("Order history exported to %s (%d rows)", path, len(frame))
    return path
