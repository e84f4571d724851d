from django.urls import include, path

# app_name = 'api_v1'

urlpatterns = [
    path("deliveries/", include("apps.deliveries.urls")),
    path("accounting/", include("apps.accounting.urls")),
    path("orders/", include("apps.orders.urls")),
]
