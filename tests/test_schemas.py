import pydantic
import pytest

from customer_records_api.app.schemas.address import AddressUpdate
from customer_records_api.app.schemas.customer import CustomerCreate, CustomerFilter, CustomerUpdate


def test_customer_text_must_be_utf8(ann_payload):
    with pytest.raises(pydantic.ValidationError):
        CustomerCreate(**dict(ann_payload, City="Re\ud800no"))
    with pytest.raises(pydantic.ValidationError):
        CustomerUpdate(FirstName="\udfff", LastName="Lee", PhoneNumber="555-0100")
    with pytest.raises(pydantic.ValidationError):
        CustomerFilter(State="\ud800")


def test_address_text_must_be_utf8():
    with pytest.raises(pydantic.ValidationError):
        AddressUpdate(AddressLine="1 Main \ud800", City="Reno", State="NV", PinCode="89501")


def test_non_ascii_text_is_accepted(ann_payload):
    customer = CustomerCreate(**dict(ann_payload, City="São Paulo", FirstName="Zoë"))
    assert customer.city == "São Paulo"
    assert CustomerFilter(City=None).city is None
