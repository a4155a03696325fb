"""Clients for the remote transaction and user services.

Usage:
    service = transaction_service()
    page = await service.get_transactions_for_user(
        TransactionInfoStatus.NEGOTIATING_DELIVERY, 0, 15, headers=authenticate(user_id))
"""

import logging
import uuid

import httpx
from django.conf import settings

from .errors import RemoteCallError, TransportException
from .models import (
    DeliveryInfo,
    ItemData,
    PaginatedSequence,
    TransactionInfo,
    TransactionInfoStatus,
    TransactionSummary,
    User,
)

logger = logging.getLogger(__name__)


class RemoteService:
    """Base for the JSON-over-HTTP service clients. Every call is single-shot."""

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _call(self, method: str, path: str, headers: dict | None = None, **kwargs):
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RemoteCallError(f"{method} {url} failed: {exc}", cause=exc) from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            transport_exc = TransportException.from_response(response.status_code, body)
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise RemoteCallError(
                f"{method} {url} returned {response.status_code}",
                cause=transport_exc,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteCallError(f"{method} {url} returned a non-JSON body", cause=exc) from exc


class TransactionService(RemoteService):

    async def get_transactions_for_user(self, status, page, page_size, headers=None) -> PaginatedSequence:
        data = await self._call(
            "GET",
            "/api/transaction",
            headers=headers,
            params={"status": status.value, "pageNo": page, "pageSize": page_size},
        )
        return decode_page(data, decode_transaction_summary)

    async def get_transaction(self, item_id, headers=None) -> TransactionInfo:
        data = await self._call("GET", f"/api/transaction/{item_id}", headers=headers)
        return decode_transaction_info(data)

    async def submit_delivery_details(self, item_id, delivery_info: DeliveryInfo, headers=None):
        await self._call(
            "POST",
            f"/api/transaction/{item_id}/deliverydetails",
            headers=headers,
            json=encode_delivery_info(delivery_info),
        )


class UserService(RemoteService):

    async def get_users(self, headers=None) -> list:
        data = await self._call("GET", "/api/user", headers=headers)
        # Paginated in newer user services, a bare list in older ones
        if isinstance(data, dict):
            data = data.get("items", [])
        return [User(id=uuid.UUID(u["id"]), name=u["name"]) for u in data or []]


def transaction_service() -> TransactionService:
    return TransactionService(settings.TRANSACTION_SERVICE_URL, timeout=settings.REMOTE_CALL_TIMEOUT)


def user_service() -> UserService:
    return UserService(settings.USER_SERVICE_URL, timeout=settings.REMOTE_CALL_TIMEOUT)


# --- JSON MAPPING (the services speak camelCase) ---

def _uuid(value):
    return uuid.UUID(value) if value else None


def encode_delivery_info(info: DeliveryInfo) -> dict:
    return {
        "addressLine1": info.address_line1,
        "addressLine2": info.address_line2,
        "city": info.city,
        "state": info.state,
        "postalCode": info.postal_code,
        "country": info.country,
    }


def decode_delivery_info(data) -> DeliveryInfo | None:
    if not data:
        return None
    return DeliveryInfo(
        address_line1=data.get("addressLine1") or "",
        address_line2=data.get("addressLine2") or "",
        city=data.get("city") or "",
        state=data.get("state") or "",
        postal_code=data.get("postalCode") or "",
        country=data.get("country") or "",
    )


def decode_item_data(data) -> ItemData:
    return ItemData(
        title=data["title"],
        description=data.get("description") or "",
        currency_id=data["currencyId"],
        increment=data.get("increment", 0),
        reserve_price=data.get("reservePrice", 0),
        duration=data.get("duration", 0),
        category_id=_uuid(data.get("categoryId")),
    )


def decode_transaction_info(data) -> TransactionInfo:
    return TransactionInfo(
        item_id=uuid.UUID(data["itemId"]),
        creator=uuid.UUID(data["creator"]),
        winner=uuid.UUID(data["winner"]),
        item_data=decode_item_data(data["itemData"]),
        item_price=data["itemPrice"],
        status=TransactionInfoStatus(data["status"]),
        delivery_info=decode_delivery_info(data.get("deliveryInfo")),
        delivery_price=data.get("deliveryPrice"),
    )


def decode_transaction_summary(data) -> TransactionSummary:
    return TransactionSummary(
        item_id=uuid.UUID(data["itemId"]),
        creator_id=uuid.UUID(data["creatorId"]),
        winner_id=uuid.UUID(data["winnerId"]),
        item_title=data["itemTitle"],
        currency_id=data["currencyId"],
        item_price=data["itemPrice"],
        status=TransactionInfoStatus(data["status"]),
    )


def decode_page(data, decode_item) -> PaginatedSequence:
    return PaginatedSequence(
        items=[decode_item(i) for i in data.get("items", [])],
        page=data.get("page", 0),
        page_size=data.get("pageSize", 0),
        count=data.get("count", 0),
    )
