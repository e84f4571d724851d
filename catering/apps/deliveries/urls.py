from django.urls import path

from .views import DeliveryQuoteView

app_name = "deliveries"

urlpatterns = [
    path("quote/", DeliveryQuoteView.as_view(), name="delivery-quote"),
]
