import asyncio
import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.http import Http404, HttpResponseBadRequest, HttpResponseNotAllowed
from django.shortcuts import render, redirect
from django.urls import reverse

from . import services
from .errors import REMOTE_ERROR_FALLBACK, RemoteCallError, extract_message
from .forms import DeliveryDetailsForm, delivery_info_from_form, form_from_delivery_info
from .models import Currency, PaginatedSequence, TransactionInfoStatus
from .navigation import load_nav
from .security import authenticate, require_user

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 15


def transactions_page(status, page=DEFAULT_PAGE, page_size=DEFAULT_PAGE_SIZE):
    url = reverse('my_transactions', args=[status.param])
    return f"{url}?{urlencode({'page': page, 'pageSize': page_size})}"


def error_message(error):
    return extract_message(error) or REMOTE_ERROR_FALLBACK


async def gather_or_cancel(*calls):
    """Like asyncio.gather, but a failure cancels the calls still running."""
    tasks = [asyncio.ensure_future(c) for c in calls]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def attempt(call):
    """Await *call*, returning ``(result, None)`` or ``(None, message)``."""
    try:
        return await call, None
    except RemoteCallError as e:
        logger.warning("Remote call failed: %s", e)
        return None, error_message(e)


def _parse_status(value):
    try:
        return TransactionInfoStatus.parse(value)
    except ValueError:
        raise Http404(f"Unknown transaction status: {value}")


def _parse_bool(value):
    if value is None:
        return None
    value = value.strip().lower()
    if value in ('true', '1'):
        return True
    if value in ('false', '0'):
        return False
    return None


# --- TRANSACTION LIST ---
@require_user
async def my_transactions(request, user_id, status):
    status = _parse_status(status)
    try:
        page = int(request.GET.get('page', DEFAULT_PAGE))
        page_size = int(request.GET.get('pageSize', DEFAULT_PAGE_SIZE))
    except ValueError:
        return HttpResponseBadRequest("page and pageSize must be integers")

    service = services.transaction_service()
    nav, (items, error) = await gather_or_cancel(
        load_nav(user_id),
        attempt(service.get_transactions_for_user(status, page, page_size, headers=authenticate(user_id))),
    )
    if items is None:
        items = PaginatedSequence(page=page, page_size=page_size)

    return render(request, 'transactions/my_transactions.html', {
        'show_inline_instruction': settings.SHOW_INLINE_INSTRUCTION,
        'status': status,
        'items': items,
        'previous_page': transactions_page(status, page - 1, page_size) if not items.is_first else None,
        'next_page': transactions_page(status, page + 1, page_size) if not items.is_last else None,
        'error': error,
        'nav': nav,
    })


# --- TRANSACTION DETAIL ---
@require_user
async def get_transaction(request, user_id, item_id):
    service = services.transaction_service()
    nav, (transaction, error) = await gather_or_cancel(
        load_nav(user_id),
        attempt(service.get_transaction(item_id, headers=authenticate(user_id))),
    )

    seller = winner = currency = price = None
    if transaction is not None:
        for u in nav.users:
            if transaction.creator == u.id:
                seller = u
            if transaction.winner == u.id:
                winner = u
        currency = Currency.of(transaction.item_data.currency_id)
        price = currency.format(transaction.item_price)

    return render(request, 'transactions/transaction.html', {
        'show_inline_instruction': settings.SHOW_INLINE_INSTRUCTION,
        'transaction': transaction,
        'seller': seller,
        'winner': winner,
        'currency': currency,
        'price': price,
        'error': error,
        'nav': nav,
    })


# --- DELIVERY DETAILS ---
def _render_delivery_details(request, is_buyer, item_id, form, status, error, nav):
    submit_url = reverse('delivery_details', kwargs={'item_id': item_id})
    submit_url += '?' + urlencode({'status': status.value, 'isBuyer': 'true' if is_buyer else 'false'})
    return render(request, 'transactions/delivery_details.html', {
        'show_inline_instruction': settings.SHOW_INLINE_INSTRUCTION,
        'is_buyer': is_buyer,
        'item_id': item_id,
        'form': form,
        'status': status,
        'submit_url': submit_url,
        'error': error,
        'nav': nav,
    })


async def delivery_details(request, item_id):
    if request.method == 'POST':
        return await submit_delivery_details(request, item_id)
    if request.method in ('GET', 'HEAD'):
        return await submit_delivery_details_form(request, item_id)
    return HttpResponseNotAllowed(['GET', 'POST'])


@require_user
async def submit_delivery_details_form(request, user_id, item_id):
    nav = await load_nav(user_id)
    # The form is prefilled from the fetched transaction, so this one waits
    transaction, error = await attempt(
        services.transaction_service().get_transaction(item_id, headers=authenticate(user_id))
    )
    if transaction is None:
        return _render_delivery_details(
            request, False, item_id, DeliveryDetailsForm(),
            TransactionInfoStatus.NEGOTIATING_DELIVERY, error, nav,
        )

    form = DeliveryDetailsForm(initial=form_from_delivery_info(transaction.delivery_info))
    is_buyer = transaction.creator != user_id
    return _render_delivery_details(request, is_buyer, item_id, form, transaction.status, None, nav)


@require_user
async def submit_delivery_details(request, user_id, item_id):
    is_buyer = _parse_bool(request.GET.get('isBuyer'))
    if is_buyer is None:
        return HttpResponseBadRequest("isBuyer must be true or false")
    try:
        status = TransactionInfoStatus(request.GET.get('status', ''))
    except ValueError:
        return HttpResponseBadRequest("Unknown transaction status")

    form = DeliveryDetailsForm(request.POST)
    if not form.is_valid():
        nav = await load_nav(user_id)
        return _render_delivery_details(request, is_buyer, item_id, form, status, None, nav)

    _, error = await attempt(
        services.transaction_service().submit_delivery_details(
            item_id, delivery_info_from_form(form.cleaned_data), headers=authenticate(user_id),
        )
    )
    if error is None:
        messages.success(request, "Delivery details saved.")
        return redirect('get_transaction', item_id=item_id)

    nav = await load_nav(user_id)
    return _render_delivery_details(request, is_buyer, item_id, form, status, error, nav)
