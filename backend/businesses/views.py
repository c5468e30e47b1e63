# backend/businesses/views.py
import uuid
from collections import Counter

from django.db import DatabaseError
from django.db.models import Count
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
import logging

from categories.models import Category
from categories.serializers import CategoryOptionSerializer
from config.constants import BUSINESSES_URL
from users.permissions import IsAdministrator
from users.serializers import AdminSerializer
from utils.pagination import DashboardPagination
from .models import Business
from .schemas import (
    business_create_schema, business_delete_schema, business_detail_schema, business_list_schema,
    business_new_schema, business_update_schema, dashboard_schema,
)
from .serializers import BusinessFormSerializer, BusinessSerializer

logger = logging.getLogger(__name__)

EMPTY_BUSINESS_FORM = {
    "name": "",
    "category_id": "",
    "description": "",
    "city": "",
    "address": "",
    "phone": "",
    "rating": "",
    "latitude": "",
    "longitude": "",
    "features": "",
    "images": "",
}


def category_options():
    return CategoryOptionSerializer(Category.objects.order_by("name_ar"), many=True).data


class DashboardView(APIView):
    """Metrics overview for the dashboard landing page."""
    permission_classes = [IsAdministrator]

    @extend_schema(**dashboard_schema)
    def get(self, request):
        city_counts = Counter()
        for row in Business.objects.values("city").annotate(total=Count("id")).order_by():
            city_counts[row["city"] or "Unknown"] += row["total"]

        return Response({
            "admin": AdminSerializer(request.admin).data,
            "total_businesses": Business.objects.count(),
            "total_categories": Category.objects.count(),
            "cities_tracked": len(city_counts),
            "businesses_by_city": dict(sorted(city_counts.items())),
        })


class BusinessListView(generics.ListAPIView):
    """
    Businesses ordered by name, 20 per page.

    Query parameters:
    - city: case-insensitive substring of the city
    - category: category id (equality)
    - search: case-insensitive substring of the name
    - page: 1-based page number
    - generation: echoed back untouched
    """
    permission_classes = [IsAdministrator]
    serializer_class = BusinessSerializer
    pagination_class = DashboardPagination

    def get_queryset(self):
        queryset = Business.objects.select_related("category").order_by("name")
        params = self.request.query_params

        city = params.get("city")
        if city:
            queryset = queryset.filter(city__icontains=city)

        category = params.get("category")
        if category:
            try:
                queryset = queryset.filter(category_id=uuid.UUID(category))
            except ValueError:
                return queryset.none()

        search = params.get("search")
        if search:
            queryset = queryset.filter(name__icontains=search)

        return queryset

    @extend_schema(**business_list_schema)
    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        response.data["categories"] = category_options()
        return response


class BusinessCreateView(APIView):
    """Form defaults and insert for a new business."""
    permission_classes = [IsAdministrator]

    @extend_schema(**business_new_schema)
    def get(self, request):
        return Response({"business": EMPTY_BUSINESS_FORM, "categories": category_options()})

    @extend_schema(**business_create_schema)
    def post(self, request):
        serializer = BusinessFormSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"errors": serializer.errors, "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        try:
            business = serializer.save()
        except DatabaseError as e:
            logger.exception("Failed to create business")
            return Response({"error": str(e), "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Business {business.id} created by {request.admin.email}")
        return Response({
            "message": "Business created.",
            "redirect": BUSINESSES_URL,
            "business": BusinessFormSerializer(business).data,
        }, status=status.HTTP_201_CREATED)


class BusinessDetailView(APIView):
    """
    API view for retrieving, updating and deleting one business.
    GET: current values in form shape plus the category options.
    PUT/PATCH: update keyed by id.
    DELETE: remove the business.
    """
    permission_classes = [IsAdministrator]

    def get_business(self, pk):
        business = Business.objects.filter(pk=pk).first()
        if not business:
            return None, Response({"error": "Business not found"}, status=status.HTTP_404_NOT_FOUND)
        return business, None

    @extend_schema(**business_detail_schema)
    def get(self, request, pk):
        business, error_response = self.get_business(pk)
        if error_response:
            return error_response

        return Response({
            "business": BusinessFormSerializer(business).data,
            "categories": category_options(),
        })

    @extend_schema(**business_update_schema)
    def put(self, request, pk):
        """Update business details fully."""
        return self._update_business(request, pk)

    @extend_schema(**business_update_schema)
    def patch(self, request, pk):
        """Update business details partially."""
        return self._update_business(request, pk, partial=True)

    def _update_business(self, request, pk, partial=False):
        """Helper method for update operations."""
        business, error_response = self.get_business(pk)
        if error_response:
            return error_response

        serializer = BusinessFormSerializer(business, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response({"errors": serializer.errors, "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        try:
            serializer.save()
        except DatabaseError as e:
            logger.exception(f"Failed to update business {pk}")
            return Response({"error": str(e), "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "message": "Business updated.",
            "redirect": BUSINESSES_URL,
            "business": serializer.data,
        })

    @extend_schema(**business_delete_schema)
    def delete(self, request, pk):
        business, error_response = self.get_business(pk)
        if error_response:
            return error_response

        business.delete()
        logger.info(f"Business {pk} deleted by {request.admin.email}")
        return Response({"message": "Business deleted successfully"}, status=status.HTTP_200_OK)
