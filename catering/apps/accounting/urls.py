from django.urls import path

from .views import (
    CreateDocumentView,
    DocumentPdfView,
    ManualDocumentView,
    SyncPaymentStatusView,
    VoucherListView,
)

app_name = "accounting"

urlpatterns = [
    path("documents/", CreateDocumentView.as_view(), name="create-document"),
    path("documents/pdf/", DocumentPdfView.as_view(), name="document-pdf"),
    path("documents/manual/", ManualDocumentView.as_view(), name="manual-document"),
    path("sync-payments/", SyncPaymentStatusView.as_view(), name="sync-payments"),
    path("vouchers/", VoucherListView.as_view(), name="voucher-list"),
]
