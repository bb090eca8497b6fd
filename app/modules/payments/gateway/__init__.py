# -*- coding: utf-8 -*-
"""
app/modules/payments/gateway/__init__.py

Gateway de pagos: contrato (Protocol) e implementación Stripe.
"""

from .base import GatewayEvent, GatewayIntent, GatewayRefund, PaymentGateway
from .stripe_gateway import StripeGateway, get_payment_gateway, to_gateway_intent

__all__ = [
    "GatewayEvent",
    "GatewayIntent",
    "GatewayRefund",
    "PaymentGateway",
    "StripeGateway",
    "get_payment_gateway",
    "to_gateway_intent",
]

# Fin del archivo app/modules/payments/gateway/__init__.py
