from business.models import BusinessSettings
from .exceptions import PaymentGatewayUnavailable
from .strategies import ManualPaymentGateway, PaymentGateway


class PaymentGatewayFactory:
    """
    A factory for creating payment gateway instances.
    """

    _gateways = {
        BusinessSettings.PaymentMethod.CASH: ManualPaymentGateway,
        BusinessSettings.PaymentMethod.BANK_TRANSFER: ManualPaymentGateway,
        BusinessSettings.PaymentMethod.UPI: ManualPaymentGateway,
        BusinessSettings.PaymentMethod.OTHER: ManualPaymentGateway,
    }

    @staticmethod
    def get_gateway(method: str) -> PaymentGateway:
        """
        Returns the gateway that collects payments for ``method``.

        Card payments need an online provider, which is not wired in.
        """
        gateway_class = PaymentGatewayFactory._gateways.get(method)
        if gateway_class is None:
            raise PaymentGatewayUnavailable(details={"payment_method": method})
        return gateway_class()
