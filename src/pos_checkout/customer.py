from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Customer:
    """A shopper with a spendable balance."""
    name: str
    balance: float

    def deduct(self, amount: float) -> None:
        # Only called by checkout settlement after the funds check
        self.balance -= amount
