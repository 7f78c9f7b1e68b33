"""
Shipment notice for the shippable part of a checkout.

The manifest is the ordered list of (product, quantity) pairs whose
products carry shipping data.  Formatting is pure; the
:class:`ShippingService` only writes the formatted lines to its stream.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence, TextIO

from pos_checkout.products import Product

logger = logging.getLogger(__name__)

NAME_WIDTH = 10


def format_amount(value: float, places: int = 0) -> str:
    """Format ``value`` with ``places`` decimals, rounding halves away from zero."""
    exponent = Decimal(1).scaleb(-places)
    return str(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ManifestEntry:
    product: Product
    quantity: int

    @property
    def weight(self) -> float:
        """Line weight in kilograms."""
        return self.product.weight * self.quantity


def total_weight(manifest: Sequence[ManifestEntry]) -> float:
    return sum(entry.weight for entry in manifest)


def format_shipment_notice(manifest: Sequence[ManifestEntry]) -> List[str]:
    lines = ["** Shipment notice **"]
    for entry in manifest:
        lines.append(f"{entry.quantity}x {entry.product.name:<{NAME_WIDTH}} {format_amount(entry.weight * 1000)}g")
    lines.append(f"Total package weight {format_amount(total_weight(manifest), 1)}kg")
    return lines


class ShippingService:
    """Hands shippable items over for dispatch by printing a shipment notice."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out

    def ship(self, manifest: Sequence[ManifestEntry]) -> List[str]:
        lines = format_shipment_notice(manifest)
        out = self.out or sys.stdout
        for line in lines:
            print(line, file=out)
        print(file=out)
        logger.info(
            "Shipment created",
            extra={"extra": {"items": len(manifest), "weight_kg": round(total_weight(manifest), 3)}},
        )
        return lines
