from django import template

from ..models import Currency

register = template.Library()


@register.filter
def price(amount, currency_id):
    """``{{ t.item_price|price:t.currency_id }}`` renders ``25.00 EUR``."""
    return Currency.of(currency_id).format(amount)
