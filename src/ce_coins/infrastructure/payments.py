"""Payment processor collaborator for coin purchases.

Real card processing is out of scope; the simulated gateway approves every
charge and hands back a reference that is stored on the PURCHASE row.
"""

import logging
from typing import Protocol

from src.ce_common.id_generator import generate_id
from src.ce_common.money import cents_to_display

logger = logging.getLogger(__name__)


class PaymentGatewayProtocol(Protocol):
    async def charge(
        self, user_id: str, amount_cents: int, payment_method_id: str
    ) -> str: ...


class SimulatedPaymentGateway:
    async def charge(
        self, user_id: str, amount_cents: int, payment_method_id: str
    ) -> str:
        reference = generate_id("pay")
        logger.info(
            "Simulated charge %s for user %s via %s -> %s",
            cents_to_display(amount_cents),
            user_id,
            payment_method_id,
            reference,
        )
        return reference
