DOCUMENT_ENDPOINTS = {
    "invoice": "invoices",
    "quotation": "quotations",
    "creditnote": "credit-notes",
}

DOCUMENT_LABELS = {
    "invoice": "Rechnung",
    "quotation": "Angebot",
    "creditnote": "Gutschrift",
}

# Every sales voucher type the voucherlist endpoint accepts
ALL_VOUCHER_TYPES = (
    "salesinvoice,salescreditnote,purchaseinvoice,purchasecreditnote,"
    "invoice,creditnote,orderconfirmation,quotation"
)

FOOD_VAT_RATE = 7
DELIVERY_VAT_RATE = 19

QUOTATION_VALIDITY_DAYS = 14

# Rates staff may pick for free-form document lines
MANUAL_VAT_RATES = (FOOD_VAT_RATE, DELIVERY_VAT_RATE)

COUNTRY_CODES = {
    "Deutschland": "DE",
    "Österreich": "AT",
    "Schweiz": "CH",
}
