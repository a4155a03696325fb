from django import forms

from .models import DeliveryInfo


class AddressField(forms.CharField):
    """Keeps the value exactly as entered, but a blank required value is still missing."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 255)
        super().__init__(strip=False, **kwargs)

    def validate(self, value):
        super().validate(value)
        if self.required and not value.strip():
            raise forms.ValidationError(self.error_messages['required'], code='required')


class DeliveryDetailsForm(forms.Form):
    address_line1 = AddressField(label='Address line 1')
    address_line2 = AddressField(label='Address line 2', required=False)
    city = AddressField()
    state = AddressField()
    postal_code = AddressField(label='Postal code')
    country = AddressField()


def form_from_delivery_info(info):
    """Initial form values for *info*; empty when nothing was submitted yet."""
    if info is None:
        return {}
    return {
        'address_line1': info.address_line1,
        'address_line2': info.address_line2,
        'city': info.city,
        'state': info.state,
        'postal_code': info.postal_code,
        'country': info.country,
    }


def delivery_info_from_form(cleaned_data):
    return DeliveryInfo(
        address_line1=cleaned_data['address_line1'],
        address_line2=cleaned_data.get('address_line2', ''),
        city=cleaned_data['city'],
        state=cleaned_data['state'],
        postal_code=cleaned_data['postal_code'],
        country=cleaned_data['country'],
    )
