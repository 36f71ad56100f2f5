"""Payment gateway port.

Amounts cross this boundary in minor currency units (cents).  A refused
charge raises ``PaymentDeclined`` carrying the processor's code and message;
a charge with an unknown outcome raises ``PaymentGatewayUnavailable`` and
may be retried with the same idempotency key.  A refused refund raises
``RefundFailed``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    id: str
    status: str
    amount_charged: int
    currency: str


@dataclass(frozen=True)
class RefundResult:
    id: str
    status: str
    charge_id: str


class PaymentGateway(ABC):
    @abstractmethod
    def charge(
        self,
        amount_minor_units: int,
        currency: str,
        description: str,
        source: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Charge ``source`` once per ``idempotency_key``."""
        ...

    @abstractmethod
    def refund(self, charge_id: str, reason: str, idempotency_key: str | None = None) -> RefundResult:
        """Refund a previous charge in full."""
        ...
