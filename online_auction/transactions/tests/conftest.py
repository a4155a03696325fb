"""Shared fixtures for the transactions views.

The remote services are replaced by in-memory fakes that record every call,
so tests can assert both on what was rendered and on what was (not) sent.
"""

import uuid
from dataclasses import replace
from importlib import import_module

import pytest
from django.conf import settings

from transactions import services
from transactions.errors import ExceptionMessage, RemoteCallError, TransportException
from transactions.models import (
    DeliveryInfo,
    ItemData,
    PaginatedSequence,
    TransactionInfo,
    TransactionInfoStatus,
    User,
)

SELLER = User(id=uuid.UUID("11111111-1111-1111-1111-111111111111"), name="Alice Seller")
BUYER = User(id=uuid.UUID("22222222-2222-2222-2222-222222222222"), name="Bob Buyer")
ITEM_ID = uuid.UUID("33333333-3333-3333-3333-333333333333")


def remote_rejection(detail, code=403):
    return RemoteCallError(
        f"rejected with {code}",
        cause=TransportException(code, ExceptionMessage("Forbidden", detail)),
    )


def make_transaction(creator=SELLER.id, winner=BUYER.id, delivery_info=None,
                     status=TransactionInfoStatus.NEGOTIATING_DELIVERY):
    return TransactionInfo(
        item_id=ITEM_ID,
        creator=creator,
        winner=winner,
        item_data=ItemData(
            title="Signed cricket bat",
            description="Used once",
            currency_id="EUR",
            increment=50,
            reserve_price=1000,
        ),
        item_price=2500,
        status=status,
        delivery_info=delivery_info,
    )


class FakeTransactionService:

    def __init__(self):
        self.calls = []
        self.transactions = {}
        self.page = PaginatedSequence()
        self.error = None

    def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def get_transactions_for_user(self, status, page, page_size, headers=None):
        self._record("list", status, page, page_size, headers)
        return self.page

    async def get_transaction(self, item_id, headers=None):
        self._record("get", item_id, headers)
        return self.transactions[item_id]

    async def submit_delivery_details(self, item_id, delivery_info, headers=None):
        self._record("submit", item_id, delivery_info, headers)
        self.transactions[item_id] = replace(self.transactions[item_id], delivery_info=delivery_info)


class FakeUserService:

    def __init__(self, users):
        self.users = users
        self.calls = []

    async def get_users(self, headers=None):
        self.calls.append(headers)
        return list(self.users)


@pytest.fixture
def transaction_service(monkeypatch):
    fake = FakeTransactionService()
    fake.transactions[ITEM_ID] = make_transaction()
    monkeypatch.setattr(services, "transaction_service", lambda: fake)
    return fake


@pytest.fixture
def user_service(monkeypatch):
    fake = FakeUserService([SELLER, BUYER])
    monkeypatch.setattr(services, "user_service", lambda: fake)
    return fake


def login(client, user_id):
    engine = import_module(settings.SESSION_ENGINE)
    session = engine.SessionStore()
    session["user"] = str(user_id)
    session.save()
    client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
    return client


@pytest.fixture
def buyer_client(client, transaction_service, user_service):
    return login(client, BUYER.id)


@pytest.fixture
def seller_client(client, transaction_service, user_service):
    return login(client, SELLER.id)


@pytest.fixture
def delivery_info():
    return DeliveryInfo(
        address_line1="1 Main Street",
        address_line2="Flat 2",
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="USA",
    )
