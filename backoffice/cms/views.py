import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.core.cache import cache
from django.http import Http404
from django.shortcuts import get_object_or_404

from backoffice.core.cache_utils import HOMEPAGE_CACHE_KEY, HOMEPAGE_CACHE_TTL
from backoffice.core.utils import create_audit_log
from .models import HeroSection, Feature, Testimonial, GalleryImage, Amenity, ContactInfo, FAQ
from .serializers import (
    HeroSectionSerializer, FeatureSerializer, TestimonialSerializer, GalleryImageSerializer,
    AmenitySerializer, ContactInfoSerializer, FAQSerializer
)

logger = logging.getLogger('backoffice.cms')

CONTENT_TYPES = {
    'hero-sections': (HeroSection, HeroSectionSerializer),
    'features': (Feature, FeatureSerializer),
    'testimonials': (Testimonial, TestimonialSerializer),
    'gallery': (GalleryImage, GalleryImageSerializer),
    'amenities': (Amenity, AmenitySerializer),
    'contact-info': (ContactInfo, ContactInfoSerializer),
    'faqs': (FAQ, FAQSerializer),
}

# Homepage section name, content type and maximum number of records (None for all)
HOMEPAGE_SECTIONS = [
    ('hero_sections', 'hero-sections', None),
    ('features', 'features', None),
    ('amenities', 'amenities', None),
    ('testimonials', 'testimonials', 6),
    ('gallery', 'gallery', 12),
    ('contact_info', 'contact-info', None),
    ('faqs', 'faqs', 8),
]


def resolve_content_type(content_type):
    try:
        return CONTENT_TYPES[content_type]
    except KeyError:
        raise Http404(f"Unknown content type {content_type}")


def can_edit(user):
    return user.is_staff or user.is_superuser


def staff_required_response():
    return Response({'error': 'Only staff can manage website content'}, status=status.HTTP_403_FORBIDDEN)


@api_view(['GET'])
@permission_classes([AllowAny])
def homepage(request):
    """Active public content for the website homepage"""
    data = cache.get(HOMEPAGE_CACHE_KEY)
    if data is not None:
        return Response(data)

    data = {}
    for section, content_type, limit in HOMEPAGE_SECTIONS:
        model, serializer_class = CONTENT_TYPES[content_type]
        queryset = model.objects.filter(is_active=True).order_by('sort_order', 'id')
        if limit:
            queryset = queryset[:limit]
        data[section] = serializer_class(queryset, many=True).data
    cache.set(HOMEPAGE_CACHE_KEY, data, HOMEPAGE_CACHE_TTL)
    return Response(data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def content_list_create(request, content_type):
    model, serializer_class = resolve_content_type(content_type)
    if request.method == 'GET':
        queryset = model.objects.all()
        if request.query_params.get('active') == 'true':
            queryset = queryset.filter(is_active=True)
        return Response(serializer_class(queryset, many=True).data)

    if not can_edit(request.user):
        return staff_required_response()
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    instance = serializer.save()
    create_audit_log(
        request=request, action='create', model_name=model.__name__, object_id=instance.pk, object_name=str(instance),
    )
    logger.info(f"{model.__name__} {instance.pk} created by {request.user.username}")
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def content_detail(request, content_type, pk):
    model, serializer_class = resolve_content_type(content_type)
    instance = get_object_or_404(model, pk=pk)

    if request.method == 'GET':
        return Response(serializer_class(instance).data)

    if not can_edit(request.user):
        return staff_required_response()

    if request.method == 'DELETE':
        object_name = str(instance)
        instance.delete()
        create_audit_log(request=request, action='delete', model_name=model.__name__, object_id=pk, object_name=object_name)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer.save()
    create_audit_log(
        request=request, action='update', model_name=model.__name__, object_id=pk, object_name=str(instance),
        changes={key: str(value) for key, value in serializer.validated_data.items()},
    )
    return Response(serializer.data)
