"""
Shared list/create and detail handlers for business-unit scoped resources.

Views stay plain ``@api_view`` functions and delegate here when the resource
has no behaviour beyond validation, uniqueness within the unit and audit.
"""
import logging

from rest_framework import status
from rest_framework.response import Response

from .cache_utils import get_cached_reference_list, cache_reference_list
from .tenancy import is_admin, admin_required_response
from .utils import create_audit_log

logger = logging.getLogger('backoffice.core')


def find_conflict(business_unit, model, unique_fields, data, exclude_pk=None):
    """
    Message for the first unique field (or field tuple) already taken in the unit.
    Fields missing from ``data`` are taken from the instance being updated.
    """
    for fields in unique_fields:
        if isinstance(fields, str):
            fields = (fields,)
        lookup = {}
        for field in fields:
            value = data.get(field)
            if value in (None, ''):
                break
            lookup[field] = getattr(value, 'pk', value)
        else:
            queryset = model.objects.filter(business_unit=business_unit, **lookup)
            if exclude_pk is not None:
                queryset = queryset.exclude(pk=exclude_pk)
            if queryset.exists():
                label = model._meta.verbose_name.capitalize()
                described = ', '.join(f"{key} '{value}'" for key, value in lookup.items())
                return f"{label} with {described} already exists"
    return None


def conflict_response(message):
    return Response({'error': message}, status=status.HTTP_409_CONFLICT)


def serializer_context(request, business_unit):
    return {'request': request, 'business_unit': business_unit}


def handle_list_create(request, business_unit, queryset, serializer_class, unique_fields=(),
                       admin_only=True, cache_kind=None, cache_filters=None):
    """GET lists ``queryset``; POST validates, checks uniqueness and saves into the unit"""
    context = serializer_context(request, business_unit)
    model = serializer_class.Meta.model

    if request.method == 'GET':
        if cache_kind:
            cached, cache_key = get_cached_reference_list(business_unit.id, cache_kind, **(cache_filters or {}))
            if cached is not None:
                return Response(cached)
        data = serializer_class(queryset, many=True, context=context).data
        if cache_kind:
            cache_reference_list(cache_key, data)
        return Response(data)

    if admin_only and not is_admin(request):
        return admin_required_response()

    serializer = serializer_class(data=request.data, context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    message = find_conflict(business_unit, model, unique_fields, serializer.validated_data)
    if message:
        return conflict_response(message)

    instance = serializer.save(business_unit=business_unit)
    create_audit_log(
        request=request, action='create', model_name=model.__name__,
        object_id=instance.pk, object_name=str(instance),
    )
    logger.info(f"{model.__name__} {instance.pk} created in business unit {business_unit.code}")
    return Response(serializer_class(instance, context=context).data, status=status.HTTP_201_CREATED)


def handle_detail(request, business_unit, instance, serializer_class, unique_fields=(),
                  admin_only=True, delete_check=None):
    """
    GET/PUT/PATCH/DELETE of one object already resolved within the unit.

    ``delete_check(instance)`` returns an error message when the object is still referenced.
    """
    context = serializer_context(request, business_unit)
    model = type(instance)

    if request.method == 'GET':
        return Response(serializer_class(instance, context=context).data)

    if admin_only and not is_admin(request):
        return admin_required_response()

    if request.method == 'DELETE':
        if delete_check is not None:
            message = delete_check(instance)
            if message:
                return Response({'error': message}, status=status.HTTP_400_BAD_REQUEST)
        object_id, object_name = instance.pk, str(instance)
        instance.delete()
        create_audit_log(
            request=request, action='delete', model_name=model.__name__,
            object_id=object_id, object_name=object_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH', context=context)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    merged = {field.name: getattr(instance, field.name) for field in model._meta.fields}
    merged.update(serializer.validated_data)
    message = find_conflict(business_unit, model, unique_fields, merged, exclude_pk=instance.pk)
    if message:
        return conflict_response(message)

    serializer.save()
    create_audit_log(
        request=request, action='update', model_name=model.__name__,
        object_id=instance.pk, object_name=str(instance),
        changes={key: str(getattr(value, 'pk', value)) for key, value in serializer.validated_data.items()},
    )
    return Response(serializer.data)


def dependents_message(label, dependents):
    """``dependents`` maps a description to a count; returns None when nothing depends"""
    named = [f"{count} {name}" for name, count in dependents.items() if count]
    if not named:
        return None
    return f"Cannot delete {label}: it is referenced by {', '.join(named)}"
