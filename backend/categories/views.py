# categories/views.py
from django.db import DatabaseError
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
import logging

from config.constants import CATEGORIES_URL, CATEGORY_LIST_LIMIT
from users.permissions import IsAdministrator
from utils.pagination import request_generation
from .models import Category
from .schemas import (
    category_create_schema, category_delete_schema, category_detail_schema,
    category_list_schema, category_new_schema, category_update_schema,
)
from .serializers import CategorySerializer

logger = logging.getLogger(__name__)


class CategoryListView(generics.ListAPIView):
    """
    Categories ordered by Arabic name.
    A single page of at most CATEGORY_LIST_LIMIT rows; there is no further paging.
    """
    permission_classes = [IsAdministrator]
    serializer_class = CategorySerializer
    pagination_class = None

    def get_queryset(self):
        return Category.objects.order_by("name_ar")

    @extend_schema(**category_list_schema)
    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        serializer = self.get_serializer(queryset[:CATEGORY_LIST_LIMIT], many=True)
        return Response({
            "count": queryset.count(),
            "generation": request_generation(request),
            "results": serializer.data,
        })


class CategoryCreateView(APIView):
    """Form defaults and insert for a new category."""
    permission_classes = [IsAdministrator]

    @extend_schema(**category_new_schema)
    def get(self, request):
        return Response({"category": {"name_ar": "", "name_en": "", "icon": ""}})

    @extend_schema(**category_create_schema)
    def post(self, request):
        serializer = CategorySerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"errors": serializer.errors, "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        try:
            category = serializer.save()
        except DatabaseError as e:
            logger.exception("Failed to create category")
            return Response({"error": str(e), "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Category {category.id} created by {request.admin.email}")
        return Response({
            "message": "Category created successfully.",
            "redirect": CATEGORIES_URL,
            "category": CategorySerializer(category).data,
        }, status=status.HTTP_201_CREATED)


class CategoryDetailView(APIView):
    """
    API view for one category.
    GET: current values for the edit form.
    PUT/PATCH: update keyed by id.
    DELETE: remove the category. Businesses pointing at it keep their stored category_id.
    """
    permission_classes = [IsAdministrator]

    def get_category(self, pk):
        category = Category.objects.filter(pk=pk).first()
        if not category:
            return None, Response({"error": "Category not found"}, status=status.HTTP_404_NOT_FOUND)
        return category, None

    @extend_schema(**category_detail_schema)
    def get(self, request, pk):
        category, error_response = self.get_category(pk)
        if error_response:
            return error_response
        return Response({"category": CategorySerializer(category).data})

    @extend_schema(**category_update_schema)
    def put(self, request, pk):
        return self._update_category(request, pk)

    @extend_schema(**category_update_schema)
    def patch(self, request, pk):
        return self._update_category(request, pk, partial=True)

    def _update_category(self, request, pk, partial=False):
        category, error_response = self.get_category(pk)
        if error_response:
            return error_response

        serializer = CategorySerializer(category, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response({"errors": serializer.errors, "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        try:
            serializer.save()
        except DatabaseError as e:
            logger.exception(f"Failed to update category {pk}")
            return Response({"error": str(e), "values": request.data}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "message": "Category updated successfully.",
            "redirect": CATEGORIES_URL,
            "category": serializer.data,
        })

    @extend_schema(**category_delete_schema)
    def delete(self, request, pk):
        category, error_response = self.get_category(pk)
        if error_response:
            return error_response

        category.delete()
        logger.info(f"Category {pk} deleted by {request.admin.email}")
        return Response({"message": "Category deleted successfully"}, status=status.HTTP_200_OK)
