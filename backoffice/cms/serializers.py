from rest_framework import serializers
from .models import HeroSection, Feature, Testimonial, GalleryImage, Amenity, ContactInfo, FAQ

CONTENT_FIELDS = ['is_active', 'sort_order', 'created_at', 'updated_at']


class HeroSectionSerializer(serializers.ModelSerializer):
    class Meta:
        model = HeroSection
        fields = ['id', 'title', 'subtitle', 'description', 'image_url', 'button_text', 'button_url'] + CONTENT_FIELDS


class FeatureSerializer(serializers.ModelSerializer):
    class Meta:
        model = Feature
        fields = ['id', 'title', 'description', 'icon'] + CONTENT_FIELDS


class TestimonialSerializer(serializers.ModelSerializer):
    class Meta:
        model = Testimonial
        fields = ['id', 'guest_name', 'guest_title', 'content', 'rating', 'image_url'] + CONTENT_FIELDS

    def validate_rating(self, value):
        if not 1 <= value <= 5:
            raise serializers.ValidationError('Rating must be between 1 and 5')
        return value


class GalleryImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = GalleryImage
        fields = ['id', 'title', 'description', 'image_url', 'category'] + CONTENT_FIELDS


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ['id', 'name', 'description', 'icon', 'category'] + CONTENT_FIELDS


class ContactInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactInfo
        fields = ['id', 'type', 'label', 'value', 'icon'] + CONTENT_FIELDS


class FAQSerializer(serializers.ModelSerializer):
    class Meta:
        model = FAQ
        fields = ['id', 'question', 'answer', 'category'] + CONTENT_FIELDS
