from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional
from django.db import models
import uuid

# Nothing here is persisted: the transaction and user services are the
# system of record, these are the shapes their JSON is decoded into.


class TransactionInfoStatus(models.TextChoices):
    NEGOTIATING_DELIVERY = 'NEGOTIATING_DELIVERY', 'Negotiating delivery'
    PAYMENT_PENDING = 'PAYMENT_PENDING', 'Payment pending'
    PAYMENT_SUBMITTED = 'PAYMENT_SUBMITTED', 'Payment submitted'
    PAYMENT_CONFIRMED = 'PAYMENT_CONFIRMED', 'Payment confirmed'
    ITEM_DISPATCHED = 'ITEM_DISPATCHED', 'Item dispatched'
    ITEM_RECEIVED = 'ITEM_RECEIVED', 'Item received'
    CANCELLED = 'CANCELLED', 'Cancelled'

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup, raises ValueError for unknown names."""
        return cls(value.upper())

    @property
    def param(self):
        return self.value.lower()


class Currency(Enum):
    USD = 'USD'
    CHF = 'CHF'
    EUR = 'EUR'
    GBP = 'GBP'

    @property
    def decimals(self):
        # Prices travel as integers in minor units
        return 2

    @classmethod
    def of(cls, currency_id):
        try:
            return cls[currency_id]
        except KeyError:
            raise ValueError(f"Unknown currency: {currency_id}") from None

    def to_price_units(self, amount):
        return (Decimal(amount) / (10 ** self.decimals)).quantize(Decimal(1).scaleb(-self.decimals))

    def format(self, amount):
        return f"{self.to_price_units(amount)} {self.name}"


@dataclass(frozen=True)
class User:
    id: uuid.UUID
    name: str

    def __str__(self): return self.name


@dataclass(frozen=True)
class Nav:
    users: list
    current_user: Optional[uuid.UUID] = None

    def find_user(self, user_id):
        for u in self.users:
            if u.id == user_id:
                return u
        return None

    @property
    def current_user_name(self):
        user = self.find_user(self.current_user)
        return user.name if user else None


@dataclass(frozen=True)
class ItemData:
    title: str
    description: str
    currency_id: str
    increment: int
    reserve_price: int
    duration: int = 0
    category_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class DeliveryInfo:
    address_line1: str
    address_line2: str
    city: str
    state: str
    postal_code: str
    country: str


@dataclass(frozen=True)
class TransactionInfo:
    item_id: uuid.UUID
    creator: uuid.UUID
    winner: uuid.UUID
    item_data: ItemData
    item_price: int
    status: TransactionInfoStatus
    delivery_info: Optional[DeliveryInfo] = None
    delivery_price: Optional[int] = None


@dataclass(frozen=True)
class TransactionSummary:
    item_id: uuid.UUID
    creator_id: uuid.UUID
    winner_id: uuid.UUID
    item_title: str
    currency_id: str
    item_price: int
    status: TransactionInfoStatus


@dataclass(frozen=True)
class PaginatedSequence:
    items: list = field(default_factory=list)
    page: int = 0
    page_size: int = 0
    count: int = 0

    @property
    def is_empty(self): return not self.items

    @property
    def is_first(self): return self.page == 0

    @property
    def is_last(self):
        if self.page_size <= 0:
            return True
        return self.count <= (self.page + 1) * self.page_size

    @property
    def page_count(self):
        if self.page_size <= 0:
            return 0
        return -(-self.count // self.page_size)
