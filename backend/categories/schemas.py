# categories/schemas.py
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, inline_serializer
from rest_framework import serializers

from .serializers import CategorySerializer

_not_found = OpenApiResponse(
    response=inline_serializer(
        name="CategoryNotFound",
        fields={"error": serializers.CharField(default="Category not found")},
    ),
    description="No category with this id"
)

_form_error = OpenApiResponse(
    response=inline_serializer(
        name="CategoryFormError",
        fields={
            "errors": serializers.DictField(required=False),
            "error": serializers.CharField(required=False),
            "values": serializers.DictField(),
        }
    ),
    description="Validation or data store error. The submitted values are echoed back."
)

_saved = inline_serializer(
    name="CategorySaved",
    fields={
        "message": serializers.CharField(),
        "redirect": serializers.CharField(default="/dashboard/categories"),
        "category": CategorySerializer(),
    }
)

category_list_schema = {
    'operation_id': 'List Categories',
    'description': """
    Categories ordered by Arabic name, at most 50 rows.

    `count` is the total number of categories. `generation` echoes the query
    parameter of the same name so clients can drop responses to superseded requests.
    """,
    'parameters': [
        OpenApiParameter(name='generation', type=str, required=False, description="Opaque request tag, echoed back"),
    ],
    'responses': {
        200: inline_serializer(
            name="CategoryList",
            fields={
                "count": serializers.IntegerField(),
                "generation": serializers.CharField(allow_null=True),
                "results": CategorySerializer(many=True),
            }
        ),
    },
}

category_new_schema = {
    'operation_id': 'New Category Form',
    'description': "Empty defaults for the category creation form.",
    'responses': {200: inline_serializer(name="CategoryFormDefaults", fields={"category": serializers.DictField()})},
}

category_create_schema = {
    'operation_id': 'Create Category',
    'request': CategorySerializer,
    'responses': {201: _saved, 400: _form_error},
}

category_detail_schema = {
    'operation_id': 'Get Category',
    'responses': {
        200: inline_serializer(name="CategoryDetail", fields={"category": CategorySerializer()}),
        404: _not_found,
    },
}

category_update_schema = {
    'request': CategorySerializer,
    'responses': {200: _saved, 400: _form_error, 404: _not_found},
}

category_delete_schema = {
    'operation_id': 'Delete Category',
    'description': "Delete a category. Businesses referencing it keep their stored category id.",
    'responses': {
        200: inline_serializer(name="CategoryDeleted", fields={"message": serializers.CharField()}),
        404: _not_found,
    },
}
