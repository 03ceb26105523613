from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
import uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeResult:
    """What a gateway reports back for one charge attempt."""

    status: str
    reference: str = ""


class PaymentGateway(ABC):
    """
    The Abstract Base Class for a payment gateway.

    A gateway only reports; recording the outcome on the order is the
    caller's job.
    """

    @abstractmethod
    def charge(self, amount_cents: int, method: str) -> ChargeResult:
        pass


class ManualPaymentGateway(PaymentGateway):
    """
    Cash, UPI and bank transfers settled outside the system.

    Nothing is collected online: the charge is left pending with a local
    reference the seller can match against the money they receive.
    """

    def charge(self, amount_cents: int, method: str) -> ChargeResult:
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents < 0:
            raise ValueError(f"Charge amount must be non-negative integer minor units, got {amount_cents!r}")

        reference = f"{method.upper()}-{uuid.uuid4().hex[:12].upper()}"
        logger.info(f"Manual {method} charge of {amount_cents} awaiting settlement ({reference})")
        return ChargeResult(status="pending", reference=reference)
