from django.urls import path

from .views import TicketVerifyView

urlpatterns = [
    path("verify/<str:token>/", TicketVerifyView.as_view(), name="ticket-verify"),
]
