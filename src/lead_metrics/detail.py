"""Product detail projection: raw record to presentation-ready fields."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from lead_metrics.config import Settings
from lead_metrics.connectors.base import BaseConnector
from lead_metrics.errors import ConfigurationError
from lead_metrics.models.product import ImageRef, ProductDetail, to_money
from lead_metrics.models.record import Record

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _money(record: Record, label: str, value: Decimal) -> Optional[Decimal]:
    """Value in cents, or None when it has too many digits to quantize."""
    try:
        return to_money(value)
    except InvalidOperation:
        logger.warning("Record %s has out-of-range %s (%s); ignoring it", record.id, label, value)
        return None


def _price(record: Record, label: str) -> Decimal:
    """Non-negative price; absent, non-numeric, negative or out-of-range values become 0."""
    value = record.get_number(label)
    if value is None:
        return to_money(ZERO)
    if value < 0:
        logger.warning("Record %s has negative %s (%s); using 0", record.id, label, value)
        return to_money(ZERO)
    money = _money(record, label, value)
    return money if money is not None else to_money(ZERO)


def _images(record: Record, label: str) -> list[ImageRef]:
    images: list[ImageRef] = []
    for attachment in record.get_attachments(label):
        url = attachment.get("url")
        if isinstance(url, str) and url:
            filename = attachment.get("filename")
            images.append(ImageRef(url=url, filename=filename if isinstance(filename, str) else None))
    return images


def project(record: Record, settings: Settings) -> ProductDetail:
    """Build a ProductDetail from a product record."""
    labels = settings.fields
    cost = _price(record, labels.cost_price)
    selling = _price(record, labels.selling_price)

    stored_profit = record.get_number(labels.profit_per_sale)
    profit = None
    if stored_profit is not None:
        profit = _money(record, labels.profit_per_sale, stored_profit)
    if profit is None:
        profit = selling - cost

    return ProductDetail(
        record_id=record.id,
        name=record.get_text(labels.product_name, "N/A"),
        description=record.get_text(labels.description),
        cost_price=cost,
        selling_price=selling,
        profit_per_sale=profit,
        images=_images(record, labels.images),
    )


def fetch_product(connector: BaseConnector, settings: Settings, record_id: str) -> ProductDetail:
    """Fetch one product by id and project it."""
    if not record_id or not record_id.strip():
        raise ConfigurationError("record_id")
    record = connector.fetch_record(settings.tables.products, record_id.strip())
    return project(record, settings)
