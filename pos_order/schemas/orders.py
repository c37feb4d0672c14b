"""
schemas/orders.py
-----------------

Request bodies accepted by the order routes.  Fields are optional on
purpose: the order client performs the validation so HTTP callers get
the same messages as library callers.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union
from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class PaymentType(str, Enum):
    card_purchase = "card_purchase"
    pay_with_phone = "pay_with_phone"
    ussd = "ussd"


class CreateOrderRequest(BaseModel):
    # unknown keys are forwarded to the API as given
    model_config = ConfigDict(extra="allow")

    amount: Optional[Union[Decimal, str]] = None
    type: Optional[str] = None
    terminal_id: Optional[str] = None
    order_number: Optional[str] = None
    callback_url: Optional[str] = None


class TypedOrderRequest(BaseModel):
    amount: Optional[Union[Decimal, str]] = None
    terminal_id: Optional[str] = None  # falls back to the default terminal
    order_number: Optional[str] = None
    callback_url: Optional[str] = None
