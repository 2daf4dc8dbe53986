"""
Payment detail tagged union.

An order carries at most one payment reference, and its meaning depends on
the kind: a card number, a UPI transaction id, a cheque number, a gateway
transaction id or a bank reference number. References are opaque strings;
nothing here talks to a payment gateway.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

CARD = "card"
UPI = "upi"
CHEQUE = "cheque"
GATEWAY = "gateway"
BANK_REF = "bank_ref"

# Flat payload field accepted for each kind
PAYLOAD_FIELDS = {
    "card_number": CARD,
    "upi_transaction_id": UPI,
    "cheque_number": CHEQUE,
    "gateway_transaction_id": GATEWAY,
    "bank_reference_number": BANK_REF,
}

VALID_KINDS = set(PAYLOAD_FIELDS.values())

MAX_REFERENCE_LENGTH = 128


@dataclass(frozen=True)
class PaymentDetail:
    kind: str
    reference: str

    def __post_init__(self):
        if self.kind not in VALID_KINDS:
            raise ValueError(f"payment detail kind must be one of: {', '.join(sorted(VALID_KINDS))}")
        if not self.reference:
            raise ValueError("payment detail reference is required")
        if len(self.reference) > MAX_REFERENCE_LENGTH:
            raise ValueError(f"payment detail reference exceeds max length {MAX_REFERENCE_LENGTH}")

    @classmethod
    def from_payload(cls, payload: dict) -> Optional["PaymentDetail"]:
        """
        Build the detail from a request payload.

        Accepts either an explicit {"payment_detail": {"kind", "reference"}}
        object or one of the flat fields in PAYLOAD_FIELDS. Supplying more
        than one reference raises ValueError.
        """
        found: list[PaymentDetail] = []

        explicit = payload.get("payment_detail")
        if explicit is not None:
            if not isinstance(explicit, dict):
                raise ValueError("payment_detail must be an object")
            found.append(cls(
                kind=str(explicit.get("kind") or "").strip(),
                reference=str(explicit.get("reference") or "").strip(),
            ))

        for field, kind in PAYLOAD_FIELDS.items():
            value = payload.get(field)
            if value is None or str(value).strip() == "":
                continue
            found.append(cls(kind=kind, reference=str(value).strip()))

        if len(found) > 1:
            raise ValueError("only one payment detail may be supplied")
        return found[0] if found else None

    @classmethod
    def from_columns(cls, kind: str | None, reference: str | None) -> Optional["PaymentDetail"]:
        if not kind:
            return None
        return cls(kind=kind, reference=reference or "")

    def to_dict(self) -> dict:
        return {"kind": self.kind, "reference": self.reference}
