"""Accepted payment types for settling an order."""

from __future__ import annotations

from enum import Enum


class PaymentType(str, Enum):
    UPI = "UPI"
    CASH = "Cash"
    BANK = "Bank"
    CARD = "Card"

    @classmethod
    def parse(cls, raw: object) -> "PaymentType | None":
        """Return the member matching ``raw`` exactly, else ``None``."""

        for member in cls:
            if member.value == raw:
                return member
        return None
