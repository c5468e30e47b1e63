# businesses/schemas.py
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, inline_serializer
from rest_framework import serializers

from categories.serializers import CategoryOptionSerializer
from .serializers import BusinessFormSerializer, BusinessSerializer

_not_found = OpenApiResponse(
    response=inline_serializer(
        name="BusinessNotFound",
        fields={"error": serializers.CharField(default="Business not found")},
    ),
    description="No business with this id"
)

_form_error = OpenApiResponse(
    response=inline_serializer(
        name="BusinessFormError",
        fields={
            "errors": serializers.DictField(required=False),
            "error": serializers.CharField(required=False),
            "values": serializers.DictField(),
        }
    ),
    description="Validation or data store error. The submitted values are echoed back so the form keeps them."
)

_saved = inline_serializer(
    name="BusinessSaved",
    fields={
        "message": serializers.CharField(),
        "redirect": serializers.CharField(default="/dashboard/businesses"),
        "business": BusinessFormSerializer(),
    }
)

_form_example = OpenApiExample(
    "Business Form",
    value={
        "name": "Cafe Baghdad",
        "category_id": "",
        "description": "",
        "city": "Baghdad",
        "address": "Al-Mutanabbi St",
        "phone": "0770...",
        "rating": "4.5",
        "latitude": "33.3128",
        "longitude": "44.3615",
        "features": "wifi, parking",
        "images": "https://example.com/a.jpg",
    },
    request_only=True,
)

dashboard_schema = {
    'operation_id': 'Dashboard Overview',
    'description': """
    Metrics overview for the signed-in administrator.

    Businesses without a city are counted under "Unknown".
    """,
    'responses': {
        200: inline_serializer(
            name="DashboardOverview",
            fields={
                "admin": inline_serializer(
                    name="DashboardAdmin",
                    fields={
                        "id": serializers.UUIDField(),
                        "email": serializers.EmailField(),
                        "role": serializers.CharField(),
                        "created_at": serializers.DateTimeField(allow_null=True),
                    }
                ),
                "total_businesses": serializers.IntegerField(),
                "total_categories": serializers.IntegerField(),
                "cities_tracked": serializers.IntegerField(),
                "businesses_by_city": serializers.DictField(child=serializers.IntegerField()),
            }
        ),
    },
}

business_list_schema = {
    'operation_id': 'List Businesses',
    'description': """
    Businesses ordered by name, 20 per page.

    Filters combine: `city` and `search` are case-insensitive substring matches
    on city and name, `category` is an exact category id. `total_pages` is
    computed from the total row count. `generation` echoes the query parameter
    of the same name so clients can drop responses to superseded requests.
    """,
    'parameters': [
        OpenApiParameter(name='city', type=str, required=False, description="City substring"),
        OpenApiParameter(name='category', type=str, required=False, description="Category id"),
        OpenApiParameter(name='search', type=str, required=False, description="Name substring"),
        OpenApiParameter(name='page', type=int, required=False, description="1-based page number"),
        OpenApiParameter(name='generation', type=str, required=False, description="Opaque request tag, echoed back"),
    ],
    'responses': {
        200: inline_serializer(
            name="BusinessList",
            fields={
                "count": serializers.IntegerField(),
                "page": serializers.IntegerField(),
                "total_pages": serializers.IntegerField(),
                "generation": serializers.CharField(allow_null=True),
                "results": BusinessSerializer(many=True),
                "categories": CategoryOptionSerializer(many=True),
            }
        ),
    },
}

business_new_schema = {
    'operation_id': 'New Business Form',
    'description': "Empty defaults for the business creation form and the category options.",
    'responses': {
        200: inline_serializer(
            name="BusinessFormDefaults",
            fields={"business": serializers.DictField(), "categories": CategoryOptionSerializer(many=True)},
        ),
    },
}

business_create_schema = {
    'operation_id': 'Create Business',
    'request': BusinessFormSerializer,
    'responses': {201: _saved, 400: _form_error},
    'examples': [_form_example],
}

business_detail_schema = {
    'operation_id': 'Get Business',
    'responses': {
        200: inline_serializer(
            name="BusinessDetail",
            fields={"business": BusinessFormSerializer(), "categories": CategoryOptionSerializer(many=True)},
        ),
        404: _not_found,
    },
}

business_update_schema = {
    'request': BusinessFormSerializer,
    'responses': {200: _saved, 400: _form_error, 404: _not_found},
    'examples': [_form_example],
}

business_delete_schema = {
    'operation_id': 'Delete Business',
    'responses': {
        200: inline_serializer(name="BusinessDeleted", fields={"message": serializers.CharField()}),
        404: _not_found,
    },
}
