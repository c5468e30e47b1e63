from django.urls import path
from .views import CategoryListView, CategoryCreateView, CategoryDetailView

urlpatterns = [
    path("categories", CategoryListView.as_view(), name="category-list"),
    path("categories/new", CategoryCreateView.as_view(), name="category-new"),
    path("categories/<uuid:pk>", CategoryDetailView.as_view(), name="category-detail"),
]
