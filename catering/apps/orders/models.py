from decimal import Decimal

from apps.core.models import TimeStampedUUIDModel
from django.db import models


class BillableOrder(TimeStampedUUIDModel):
    """Fields shared by catering orders and event bookings.

    Both kinds carry customer data, a payment state and a pointer to the
    quotation/invoice that lives in the accounting system.
    """

    PAYMENT_METHOD_CHOICES = [
        ("invoice", "Invoice"),
        ("stripe", "Stripe"),
    ]
    PAYMENT_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("paid", "Paid"),
        ("failed", "Failed"),
        ("refunded", "Refunded"),
    ]
    DOCUMENT_TYPE_CHOICES = [
        ("quotation", "Quotation"),
        ("invoice", "Invoice"),
    ]

    order_number = models.CharField(max_length=100, unique=True)
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField(max_length=254)
    customer_phone = models.CharField(max_length=50, blank=True, default="")
    company_name = models.CharField(max_length=200, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    total_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )

    payment_method = models.CharField(
        max_length=20, choices=PAYMENT_METHOD_CHOICES, default="invoice"
    )
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_CHOICES, default="pending"
    )
    cancellation_reason = models.TextField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    billing_name = models.CharField(max_length=200, null=True, blank=True)
    billing_street = models.CharField(max_length=255, null=True, blank=True)
    billing_zip = models.CharField(max_length=20, null=True, blank=True)
    billing_city = models.CharField(max_length=100, null=True, blank=True)
    billing_country = models.CharField(max_length=2, default="DE")

    lexoffice_invoice_id = models.CharField(max_length=64, null=True, blank=True)
    lexoffice_document_type = models.CharField(
        max_length=20, choices=DOCUMENT_TYPE_CHOICES, null=True, blank=True
    )
    lexoffice_contact_id = models.CharField(max_length=64, null=True, blank=True)
    lexoffice_credit_note_id = models.CharField(max_length=64, null=True, blank=True)

    # Set on concrete models; used for order numbers and activity logs
    ORDER_KIND = None
    ENTITY_TYPE = None

    class Meta:
        abstract = True

    @property
    def is_paid(self):
        return self.payment_status == "paid"

    @property
    def is_linked(self):
        return bool(self.lexoffice_invoice_id)


class CateringOrder(BillableOrder):
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("confirmed", "Confirmed"),
        ("in_preparation", "In Preparation"),
        ("delivered", "Delivered"),
        ("cancelled", "Cancelled"),
    ]
    ORDER_KIND = "catering"
    ENTITY_TYPE = "catering_order"

    status = models.CharField(max_length=50, choices=STATUS_CHOICES, default="pending")
    is_pickup = models.BooleanField(default=False)
    delivery_address = models.CharField(max_length=255, null=True, blank=True)
    delivery_street = models.CharField(max_length=255, null=True, blank=True)
    delivery_zip = models.CharField(max_length=20, null=True, blank=True)
    delivery_city = models.CharField(max_length=100, null=True, blank=True)
    delivery_floor = models.CharField(max_length=50, null=True, blank=True)
    has_elevator = models.BooleanField(null=True, blank=True)
    calculated_distance_km = models.DecimalField(
        max_digits=8, decimal_places=1, null=True, blank=True
    )
    items = models.JSONField(default=list, blank=True)
    delivery_cost = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    minimum_order_surcharge = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    desired_date = models.DateField(null=True, blank=True)
    desired_time = models.CharField(max_length=20, null=True, blank=True)
    internal_notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "catering_orders"
        indexes = [
            models.Index(fields=["status"], name="catering_or_status_idx"),
            models.Index(fields=["payment_status"], name="catering_or_payment_idx"),
            models.Index(fields=["customer_email"], name="catering_or_email_idx"),
            models.Index(fields=["created_at"], name="catering_or_created_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"Order #{self.order_number} - {self.status}"

    def billable_items(self):
        return [
            {
                "name": item.get("name", ""),
                "quantity": item.get("quantity", 1),
                "price": item.get("price", 0),
            }
            for item in self.items or []
        ]

    def scheduled_for(self):
        return self.desired_date, self.desired_time


class EventBooking(BillableOrder):
    STATUS_CHOICES = [
        ("menu_pending", "Menu Pending"),
        ("confirmed", "Confirmed"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
    ]
    ORDER_KIND = "booking"
    ENTITY_TYPE = "event_booking"

    status = models.CharField(
        max_length=50, choices=STATUS_CHOICES, default="menu_pending"
    )
    package_name = models.CharField(max_length=200)
    guest_count = models.PositiveIntegerField(default=1)
    event_date = models.DateField(null=True, blank=True)
    event_time = models.CharField(max_length=20, null=True, blank=True)
    menu_selection = models.JSONField(default=dict, blank=True)
    menu_confirmed = models.BooleanField(default=False)

    class Meta:
        db_table = "event_bookings"
        indexes = [
            models.Index(fields=["status"], name="event_booki_status_idx"),
            models.Index(fields=["payment_status"], name="event_booki_payment_idx"),
            models.Index(fields=["event_date"], name="event_booki_date_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"Booking #{self.order_number} - {self.status}"

    def billable_items(self):
        guests = self.guest_count or 1
        return [
            {
                "name": f"Event-Paket: {self.package_name}",
                "quantity": guests,
                "price": self.total_amount / guests,
            }
        ]

    def scheduled_for(self):
        return self.event_date, self.event_time


class OrderNumberSequence(models.Model):
    """Per-prefix-per-year counter behind canonical order numbers."""

    prefix = models.CharField(max_length=20)
    year = models.PositiveIntegerField()
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "order_number_sequences"
        constraints = [
            models.UniqueConstraint(
                fields=["prefix", "year"], name="unique_order_number_sequence"
            ),
        ]

    def __str__(self):
        return f"{self.prefix}-{self.year}: {self.last_value}"
