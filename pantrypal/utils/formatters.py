"""
JSON formatting helpers for API responses.
Money goes out as numbers, dates and times as ISO strings.
"""
from decimal import Decimal
from datetime import date, datetime, time
from typing import Union, Optional

from pantrypal.models import Batch, Product, CustomerItem, SaleItem, RetailerProfile


def money(value: Union[int, float, Decimal, None]) -> Optional[float]:
    """
    Amount as a JSON number rounded to cents.

    Examples:
        money(Decimal('166.00')) -> 166.0
        money(None) -> None
    """
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(Decimal('0.01')))


def iso(value: Union[date, datetime, time, None]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def product_to_dict(product: Product) -> dict:
    return {
        'id': product.id,
        'barcode': product.barcode,
        'product_name': product.name,
        'brand': product.brand,
        'category': product.category,
        'unit': product.unit,
    }


def batch_to_dict(batch: Batch) -> dict:
    return {
        'id': batch.id,
        'product_id': batch.product_id,
        'retailer_id': batch.retailer_id,
        'mfd_date': iso(batch.mfd_date),
        'expiry_date': iso(batch.expiry_date),
        'quantity_total': batch.quantity_total,
        'quantity_available': batch.quantity_available,
        'purchase_price': money(batch.purchase_price),
        'selling_price': money(batch.selling_price),
    }


def inventory_row_to_dict(batch: Batch, product: Product) -> dict:
    row = batch_to_dict(batch)
    row['product_name'] = product.name
    row['barcode'] = product.barcode
    return row


def customer_item_to_dict(item: CustomerItem, sale_item: SaleItem,
                          product: Product, retailer: RetailerProfile) -> dict:
    return {
        'customer_item_id': item.id,
        'status': item.status.value,
        'reminder_date': iso(item.reminder_date),
        'reminder_time': iso(item.reminder_time),
        'quantity': sale_item.quantity,
        'price_per_unit': money(sale_item.price_per_unit),
        'total_price': money(sale_item.total_price),
        'mfd_date': iso(sale_item.mfd_date),
        'expiry_date': iso(sale_item.expiry_date),
        'product_name': product.name,
        'shop_name': retailer.shop_name,
    }
