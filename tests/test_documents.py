import datetime
from decimal import Decimal

from apps.accounting import documents

VOUCHER_DATE = datetime.date(2025, 3, 15)


def test_net_from_gross():
    assert documents.net_from_gross(Decimal("42.80"), 7) == Decimal("40.00")
    assert documents.net_from_gross(Decimal("119.00"), 19) == Decimal("100.00")
    assert documents.net_from_gross(10, 7) == Decimal("9.35")


def test_split_name():
    assert documents.split_name("Maria Rossi") == ("Maria", "Rossi")
    assert documents.split_name("Anna Maria de Luca") == ("Anna", "Maria de Luca")
    assert documents.split_name("Cher") == ("Cher", "")
    assert documents.split_name("") == ("", "")


def test_line_items_for_catering_order(catering_order):
    catering_order.minimum_order_surcharge = Decimal("10.70")
    items = documents.build_line_items(catering_order)

    assert [item["name"] for item in items] == [
        "Lasagne al forno",
        "Tiramisu",
        "Mindestbestellwert-Aufschlag",
        "Lieferung (4.2 km)",
    ]
    lasagne, tiramisu, surcharge, delivery = items
    assert lasagne["quantity"] == 2
    assert lasagne["unitPrice"] == {
        "currency": "EUR",
        "netAmount": 40.0,
        "taxRatePercentage": 7,
    }
    assert tiramisu["unitPrice"]["netAmount"] == 6.07
    assert surcharge["unitPrice"]["netAmount"] == 10.0
    assert delivery["unitPrice"]["netAmount"] == 100.0
    assert delivery["unitPrice"]["taxRatePercentage"] == 19


def test_pickup_order_has_no_delivery_line(make_catering_order):
    order = make_catering_order(is_pickup=True, delivery_cost=Decimal("0"))
    names = [item["name"] for item in documents.build_line_items(order)]

    assert not any(name.startswith("Lieferung") for name in names)
    assert "Abholung im Restaurant" in documents.build_introduction(order, "quotation")


def test_event_booking_is_one_package_line(event_booking):
    (line,) = documents.build_line_items(event_booking)

    assert line["name"] == "Event-Paket: Business Dinner"
    assert line["quantity"] == 20
    # 60.00 gross per guest at 7 %
    assert line["unitPrice"]["netAmount"] == 56.07


def test_introduction_lists_delivery_details(catering_order):
    intro = documents.build_introduction(catering_order, "quotation")

    assert intro.startswith("Vielen Dank für Ihre Anfrage")
    assert "Lieferung an: Marienplatz 1, 80331 München" in intro
    assert "Etage: 3" in intro
    assert "Aufzug vorhanden: Ja" in intro
    assert "Wunschtermin: 20.03.2025 um 12:30 Uhr" in intro
    assert "Zahlungsart: Zahlung auf Rechnung" in intro
    assert "Rechnungsadresse: Maria Rossi, Marienplatz 1, 80331 München" in intro


def test_billing_address_overrides_delivery_address(make_catering_order):
    order = make_catering_order(
        billing_name="Rossi Consulting",
        billing_street="Sendlinger Str. 5",
        billing_zip="80331",
        billing_city="München",
    )
    address = documents.billing_address(order)

    assert address == {
        "name": "Rossi Consulting",
        "street": "Sendlinger Str. 5",
        "zip": "80331",
        "city": "München",
        "countryCode": "DE",
    }


def test_contact_payload_for_private_customer(catering_order):
    payload = documents.build_contact_payload(catering_order)

    assert payload["person"] == {"firstName": "Maria", "lastName": "Rossi"}
    assert "company" not in payload
    assert payload["emailAddresses"] == {"business": ["maria@example.com"]}
    assert payload["phoneNumbers"] == {"business": ["+49 89 123456"]}


def test_contact_payload_for_company(event_booking):
    payload = documents.build_contact_payload(event_booking)

    assert payload["company"]["name"] == "Weber GmbH"
    assert payload["company"]["contactPersons"][0]["lastName"] == "Weber"
    assert "person" not in payload
    assert "phoneNumbers" not in payload


def test_quotation_payload(catering_order):
    payload = documents.build_document_payload(
        catering_order, "quotation", "contact-1", VOUCHER_DATE
    )

    assert payload["title"] == "Catering-Angebot"
    assert payload["voucherDate"] == "2025-03-15"
    assert payload["address"] == {"contactId": "contact-1"}
    assert payload["taxConditions"] == {"taxType": "net"}
    assert f"Bestellnummer: {catering_order.order_number}" in payload["remark"]
    assert "14 Tage gültig" in payload["remark"]


def test_paid_invoice_payload_without_contact(event_booking):
    event_booking.payment_status = "paid"
    payload = documents.build_document_payload(event_booking, "invoice", None, VOUCHER_DATE)

    assert payload["title"] == "Event-Rechnung"
    assert payload["address"]["name"] == "Weber GmbH"
    assert payload["paymentConditions"]["paymentTermDuration"] == 0
    assert "bereits bezahlt" in payload["remark"]


def test_credit_note_copies_invoice(catering_order):
    invoice = {
        "address": {"contactId": "contact-1"},
        "lineItems": [{"name": "Lasagne al forno"}],
        "totalPrice": {"currency": "EUR"},
        "taxConditions": {"taxType": "net"},
    }
    payload = documents.build_credit_note_payload(
        catering_order, invoice, "Kunde hat storniert", VOUCHER_DATE
    )

    assert payload["address"] == {"contactId": "contact-1"}
    assert payload["lineItems"] == [{"name": "Lasagne al forno"}]
    assert payload["title"] == f"Gutschrift zu {catering_order.order_number}"
    assert "Grund: Kunde hat storniert" in payload["introduction"]
