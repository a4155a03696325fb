import uuid
from decimal import Decimal

import pytest

from transactions.errors import ExceptionMessage, RemoteCallError, TransportException, extract_message
from transactions.forms import DeliveryDetailsForm, delivery_info_from_form, form_from_delivery_info
from transactions.models import Currency, Nav, PaginatedSequence, TransactionInfoStatus, User


def test_form_values_from_delivery_info(delivery_info):
    assert form_from_delivery_info(delivery_info) == {
        'address_line1': '1 Main Street',
        'address_line2': 'Flat 2',
        'city': 'Springfield',
        'state': 'IL',
        'postal_code': '62701',
        'country': 'USA',
    }
    assert form_from_delivery_info(None) == {}


def test_bound_form_maps_back_to_delivery_info(delivery_info):
    form = DeliveryDetailsForm(form_from_delivery_info(delivery_info))

    assert form.is_valid()
    assert delivery_info_from_form(form.cleaned_data) == delivery_info


def test_second_address_line_is_optional():
    form = DeliveryDetailsForm({
        'address_line1': '1 Main Street',
        'city': 'Springfield',
        'state': 'IL',
        'postal_code': '62701',
        'country': 'USA',
    })

    assert form.is_valid()
    assert delivery_info_from_form(form.cleaned_data).address_line2 == ''


def test_status_parsing():
    assert TransactionInfoStatus.parse('item_received') is TransactionInfoStatus.ITEM_RECEIVED
    assert TransactionInfoStatus.CANCELLED.param == 'cancelled'
    with pytest.raises(ValueError):
        TransactionInfoStatus.parse('lost')


def test_currency_formatting():
    assert Currency.of('CHF') is Currency.CHF
    assert Currency.EUR.to_price_units(2505) == Decimal('25.05')
    assert Currency.GBP.format(100) == '1.00 GBP'
    with pytest.raises(ValueError):
        Currency.of('XYZ')


def test_nav_current_user_name():
    alice = User(uuid.uuid4(), 'Alice')
    nav = Nav(users=[alice], current_user=alice.id)

    assert nav.current_user_name == 'Alice'
    assert Nav(users=[alice], current_user=uuid.uuid4()).current_user_name is None


def test_page_boundaries():
    page = PaginatedSequence(items=['a'], page=0, page_size=15, count=31)

    assert page.is_first and not page.is_last
    assert page.page_count == 3
    assert PaginatedSequence().page_count == 0


def test_extract_message_from_cause_chain():
    transport = TransportException(400, ExceptionMessage('BadRequest', 'Wrong state'))

    assert extract_message(RemoteCallError('failed', cause=transport)) == 'Wrong state'
    assert extract_message(RemoteCallError('failed')) is None

    try:
        raise RuntimeError('wrapped') from transport
    except RuntimeError as e:
        assert extract_message(e) == 'Wrong state'


def test_transport_exception_requires_detail():
    assert TransportException.from_response(500, {'name': 'Boom'}) is None
    assert TransportException.from_response(500, None) is None
    exc = TransportException.from_response(409, {'name': 'Conflict', 'detail': 'Already set'})
    assert (exc.error_code, exc.exception_message.detail) == (409, 'Already set')


@pytest.mark.parametrize('field', ['address_line1', 'city', 'state', 'postal_code', 'country'])
def test_whitespace_only_required_field_is_missing(delivery_info, field):
    form = DeliveryDetailsForm(dict(form_from_delivery_info(delivery_info), **{field: '   '}))

    assert not form.is_valid()
    assert form.errors[field] == ['This field is required.']


def test_entered_whitespace_is_kept():
    data = {
        'address_line1': ' 1 Main Street',
        'address_line2': '  ',
        'city': 'Springfield ',
        'state': 'IL',
        'postal_code': '62701',
        'country': 'USA',
    }
    form = DeliveryDetailsForm(data)

    assert form.is_valid()
    assert form.cleaned_data == data


def test_page_without_size_is_last():
    page = PaginatedSequence(items=['a'], page=0, page_size=0, count=5)

    assert page.is_last
    assert page.page_count == 0
