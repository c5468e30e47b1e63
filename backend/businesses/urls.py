# backend/businesses/urls.py
from django.urls import path
from .views import BusinessListView, BusinessCreateView, BusinessDetailView

urlpatterns = [
    path("businesses", BusinessListView.as_view(), name="business-list"),
    path("businesses/new", BusinessCreateView.as_view(), name="business-new"),
    path("businesses/<uuid:pk>", BusinessDetailView.as_view(), name="business-detail"),
]
