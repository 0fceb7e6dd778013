from django.urls import path

from authentication.api.views import CurrentIdentityView

app_name = "authentication"

urlpatterns = [
    path("me/", CurrentIdentityView.as_view(), name="me"),
]
