"""
Builds Lexoffice payloads from an order row, or from the free-form
documents staff write by hand.

Order payloads are pure functions of the order so the text a customer reads
on the quotation or invoice always matches the stored order.
"""
from datetime import timedelta
from decimal import Decimal

from apps.core.utils import round_currency, to_decimal

from .constants import (
    COUNTRY_CODES,
    DELIVERY_VAT_RATE,
    DOCUMENT_LABELS,
    FOOD_VAT_RATE,
    QUOTATION_VALIDITY_DAYS,
)

PAYMENT_METHOD_LABELS = {
    "invoice": "Zahlung auf Rechnung",
    "stripe": "Online-Zahlung (Kreditkarte/Stripe)",
}


def split_name(full_name):
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def net_from_gross(gross, vat_rate):
    divisor = Decimal(100 + vat_rate) / Decimal(100)
    return round_currency(to_decimal(gross) / divisor)


def billing_address(order):
    """Billing address, falling back to the delivery address for catering orders."""
    street = order.billing_street or getattr(order, "delivery_street", None) or ""
    zip_code = order.billing_zip or getattr(order, "delivery_zip", None) or ""
    city = order.billing_city or getattr(order, "delivery_city", None) or ""
    return {
        "name": order.billing_name or order.company_name or order.customer_name,
        "street": street,
        "zip": zip_code,
        "city": city,
        "countryCode": order.billing_country or "DE",
    }


def build_contact_payload(order):
    first_name, last_name = split_name(order.customer_name)
    address = billing_address(order)
    payload = {
        "version": 0,
        "roles": {"customer": {}},
        "addresses": {
            "billing": [
                {
                    "street": address["street"],
                    "zip": address["zip"],
                    "city": address["city"],
                    "countryCode": address["countryCode"],
                }
            ]
        },
        "emailAddresses": {"business": [order.customer_email]},
    }
    if order.customer_phone:
        payload["phoneNumbers"] = {"business": [order.customer_phone]}

    if order.company_name:
        payload["company"] = {
            "name": order.company_name,
            "contactPersons": [
                {
                    "firstName": first_name or order.customer_name,
                    "lastName": last_name,
                    "emailAddress": order.customer_email,
                    "phoneNumber": order.customer_phone,
                }
            ],
        }
    else:
        payload["person"] = {
            "firstName": first_name or order.customer_name,
            "lastName": last_name or order.customer_name,
        }
    return payload


def _line_item(name, quantity, gross_unit_price, vat_rate, description=None):
    item = {
        "type": "custom",
        "name": name,
        "quantity": quantity,
        "unitName": "Stück",
        "unitPrice": {
            "currency": "EUR",
            "netAmount": float(net_from_gross(gross_unit_price, vat_rate)),
            "taxRatePercentage": vat_rate,
        },
    }
    if description:
        item["description"] = description
    return item


def build_line_items(order):
    line_items = [
        _line_item(item["name"], item["quantity"], item["price"], FOOD_VAT_RATE)
        for item in order.billable_items()
    ]

    surcharge = to_decimal(getattr(order, "minimum_order_surcharge", 0) or 0)
    if surcharge > 0:
        line_items.append(
            _line_item("Mindestbestellwert-Aufschlag", 1, surcharge, FOOD_VAT_RATE)
        )

    delivery_cost = to_decimal(getattr(order, "delivery_cost", 0) or 0)
    if delivery_cost > 0:
        distance = getattr(order, "calculated_distance_km", None)
        name = f"Lieferung ({distance:.1f} km)" if distance else "Lieferung"
        line_items.append(_line_item(name, 1, delivery_cost, DELIVERY_VAT_RATE))

    return line_items


def _schedule_line(order):
    date, time = order.scheduled_for()
    if not date:
        return None
    line = f"Wunschtermin: {date:%d.%m.%Y}"
    if time:
        line += f" um {time} Uhr"
    return line


def _delivery_lines(order):
    if not hasattr(order, "is_pickup"):
        return ["Veranstaltung im STORIA"]
    if order.is_pickup:
        return ["Abholung im Restaurant (Karlstraße 47a, 80333 München)"]

    street = order.delivery_street or order.delivery_address or ""
    place = " ".join(part for part in (order.delivery_zip, order.delivery_city) if part)
    lines = ["Lieferung an: " + ", ".join(part for part in (street, place) if part)]
    if order.delivery_floor:
        lines.append(f"Etage: {order.delivery_floor}")
    if order.has_elevator is not None:
        lines.append(f"Aufzug vorhanden: {'Ja' if order.has_elevator else 'Nein'}")
    return lines


def build_details_block(order):
    lines = list(_delivery_lines(order))
    schedule = _schedule_line(order)
    if schedule:
        lines.append(schedule)
    lines.append(
        "Zahlungsart: "
        + PAYMENT_METHOD_LABELS.get(order.payment_method, order.payment_method)
    )
    if order.notes:
        lines.append(f"Anmerkungen: {order.notes}")

    address = billing_address(order)
    place = " ".join(part for part in (address["zip"], address["city"]) if part)
    billing = ", ".join(part for part in (address["name"], address["street"], place) if part)
    lines.append(f"Rechnungsadresse: {billing}")
    return "\n".join(lines)


def build_introduction(order, document_type):
    if document_type == "invoice":
        greeting = "Vielen Dank für Ihre Bestellung und Zahlung bei STORIA Events!"
    else:
        greeting = (
            "Vielen Dank für Ihre Anfrage bei STORIA Events! "
            "Nachfolgend finden Sie unser Angebot."
        )
    return f"{greeting}\n\n{build_details_block(order)}"


def build_remark(order, document_type):
    if document_type == "invoice" and order.is_paid:
        closing = "Diese Rechnung wurde bereits bezahlt."
    elif document_type == "invoice":
        closing = "Bitte überweisen Sie den Betrag innerhalb von 14 Tagen."
    else:
        closing = f"Dieses Angebot ist {QUOTATION_VALIDITY_DAYS} Tage gültig."
    return f"Bestellnummer: {order.order_number}\n\n{closing}"


def payment_conditions(order, document_type):
    if document_type == "invoice" and order.is_paid:
        return {"paymentTermLabel": "Bereits bezahlt - Vielen Dank!", "paymentTermDuration": 0}
    return {
        "paymentTermLabel": "Zahlbar innerhalb von 14 Tagen nach Rechnungseingang",
        "paymentTermDuration": 14,
    }


def build_document_payload(order, document_type, contact_id, voucher_date):
    prefix = "Event" if order.ENTITY_TYPE == "event_booking" else "Catering"
    title = f"{prefix}-Rechnung" if document_type == "invoice" else f"{prefix}-Angebot"

    payload = {
        "voucherDate": voucher_date.isoformat(),
        "lineItems": build_line_items(order),
        "totalPrice": {"currency": "EUR"},
        "taxConditions": {"taxType": "net"},
        "title": title,
        "introduction": build_introduction(order, document_type),
        "remark": build_remark(order, document_type),
        "paymentConditions": payment_conditions(order, document_type),
    }

    if contact_id:
        payload["address"] = {"contactId": contact_id}
    else:
        payload["address"] = billing_address(order)
    return payload


def build_credit_note_payload(order, invoice, reason, voucher_date):
    introduction = f"Stornierung der Bestellung {order.order_number}"
    if reason:
        introduction += f"\nGrund: {reason}"
    return {
        "voucherDate": voucher_date.isoformat(),
        "address": invoice.get("address"),
        "lineItems": invoice.get("lineItems", []),
        "totalPrice": invoice.get("totalPrice", {"currency": "EUR"}),
        "taxConditions": invoice.get("taxConditions", {"taxType": "net"}),
        "title": f"Gutschrift zu {order.order_number}",
        "introduction": introduction,
        "remark": f"Bezug: Rechnung {order.order_number}",
    }


def country_code(country):
    return COUNTRY_CODES.get((country or "").strip(), "DE")


def build_manual_contact_payload(data):
    first_name, last_name = split_name(data["contactName"])
    first_name = first_name or data["contactName"]
    payload = {
        "version": 0,
        "roles": {"customer": {}},
        "emailAddresses": {"business": [data["email"]]},
    }

    if data.get("companyName"):
        payload["company"] = {
            "name": data["companyName"],
            "contactPersons": [
                {
                    "firstName": first_name,
                    "lastName": last_name or first_name,
                    "emailAddress": data["email"],
                    "phoneNumber": data.get("phone") or None,
                }
            ],
        }
    else:
        payload["person"] = {"firstName": first_name, "lastName": last_name or first_name}

    address = data.get("address") or {}
    if address.get("street"):
        payload["addresses"] = {
            "billing": [
                {
                    "street": address["street"],
                    "zip": address.get("zip") or "",
                    "city": address.get("city") or "",
                    "countryCode": country_code(address.get("country")),
                }
            ]
        }
    if data.get("phone"):
        payload["phoneNumbers"] = {"business": [data["phone"]]}
    return payload


def build_manual_document_payload(data, contact_id, voucher_date):
    """Quotation or invoice from staff-entered lines priced gross."""
    document_type = data["documentType"]
    is_invoice = document_type == "invoice"
    wording = "unsere Rechnung" if is_invoice else "unser Angebot"

    payload = {
        "voucherDate": voucher_date.isoformat(),
        "lineItems": [
            _line_item(
                item["name"],
                item["quantity"],
                item["unitPrice"],
                item["taxRate"],
                description=item.get("description"),
            )
            for item in data["items"]
        ],
        "totalPrice": {"currency": "EUR"},
        "taxConditions": {"taxType": "net"},
        "title": DOCUMENT_LABELS[document_type],
        "introduction": data.get("introduction")
        or (
            "Sehr geehrte Damen und Herren,\n\n"
            f"vielen Dank für Ihre Anfrage. Anbei erhalten Sie {wording}."
        ),
    }

    if is_invoice:
        payload["remark"] = data.get("remark") or (
            "Zahlbar innerhalb von 14 Tagen nach Rechnungseingang.\n\n"
            "Vielen Dank für Ihr Vertrauen!"
        )
        payload["paymentConditions"] = {
            "paymentTermLabel": "Zahlbar innerhalb von 14 Tagen",
            "paymentTermDuration": 14,
        }
        payload["shippingConditions"] = {
            "shippingType": "service",
            "shippingDate": voucher_date.isoformat(),
        }
    else:
        payload["remark"] = data.get("remark") or (
            f"Dieses Angebot ist {QUOTATION_VALIDITY_DAYS} Tage gültig.\n\n"
            "Bei Fragen stehen wir Ihnen gerne zur Verfügung."
        )
        payload["paymentConditions"] = {
            "paymentTermLabel": "Bei Auftragserteilung",
            "paymentTermDuration": 14,
        }
        payload["expirationDate"] = (
            voucher_date + timedelta(days=QUOTATION_VALIDITY_DAYS)
        ).isoformat()

    if contact_id:
        payload["address"] = {"contactId": contact_id}
    else:
        address = data.get("address") or {}
        payload["address"] = {
            "name": data.get("companyName") or data["contactName"],
            "street": address.get("street") or "",
            "zip": address.get("zip") or "",
            "city": address.get("city") or "",
            "countryCode": country_code(address.get("country")),
        }
    return payload
