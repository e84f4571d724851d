import datetime
from decimal import Decimal
from unittest.mock import Mock

import pytest
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from apps.accounting.client import LexofficeClient
from apps.core.models import UserRole
from apps.orders.models import CateringOrder, EventBooking


@pytest.fixture
def make_user(db):
    def _make_user(username, role=None):
        user = get_user_model().objects.create_user(
            username=username, email=f"{username}@events-storia.de", password="pw-123456"
        )
        if role:
            UserRole.objects.create(user=user, role=role)
        return user

    return _make_user


@pytest.fixture
def customer(make_user):
    return make_user("customer")


@pytest.fixture
def staff_user(make_user):
    return make_user("staff", UserRole.STAFF)


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", UserRole.ADMIN)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for(api_client):
    def _client_for(user):
        token, _ = Token.objects.get_or_create(user=user)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
        return api_client

    return _client_for


@pytest.fixture
def make_catering_order(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "order_number": f"CAT-15-03-2025-{counter['n']:03d}",
            "customer_name": "Maria Rossi",
            "customer_email": "maria@example.com",
            "customer_phone": "+49 89 123456",
            "total_amount": Decimal("219.00"),
            "items": [
                {"name": "Lasagne al forno", "quantity": 2, "price": 42.80},
                {"name": "Tiramisu", "quantity": 4, "price": 6.50},
            ],
            "delivery_street": "Marienplatz 1",
            "delivery_zip": "80331",
            "delivery_city": "München",
            "delivery_floor": "3",
            "has_elevator": True,
            "delivery_cost": Decimal("119.00"),
            "calculated_distance_km": Decimal("4.2"),
            "desired_date": datetime.date(2025, 3, 20),
            "desired_time": "12:30",
        }
        data.update(overrides)
        return CateringOrder.objects.create(**data)

    return _make


@pytest.fixture
def catering_order(make_catering_order):
    return make_catering_order()


@pytest.fixture
def event_booking(db):
    return EventBooking.objects.create(
        order_number="EVT-2025-0007",
        customer_name="Jonas Weber",
        customer_email="jonas@example.com",
        company_name="Weber GmbH",
        total_amount=Decimal("1200.00"),
        package_name="Business Dinner",
        guest_count=20,
        event_date=datetime.date(2025, 6, 1),
        event_time="19:00",
    )


@pytest.fixture
def lexoffice():
    """Lexoffice client double with the happy-path responses."""
    client = Mock(spec=LexofficeClient)
    client.configured = True
    client.create_contact.return_value = {"id": "contact-123"}
    client.create_document.return_value = {"id": "doc-456"}
    client.get_document.return_value = {"voucherStatus": "open"}
    return client
