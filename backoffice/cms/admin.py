from django.contrib import admin
from .models import HeroSection, Feature, Testimonial, GalleryImage, Amenity, ContactInfo, FAQ


class CMSContentAdmin(admin.ModelAdmin):
    list_filter = ['is_active']
    list_editable = ['sort_order', 'is_active']
    ordering = ['sort_order', 'id']


@admin.register(HeroSection)
class HeroSectionAdmin(CMSContentAdmin):
    list_display = ['title', 'subtitle', 'sort_order', 'is_active']
    search_fields = ['title', 'subtitle']


@admin.register(Feature)
class FeatureAdmin(CMSContentAdmin):
    list_display = ['title', 'icon', 'sort_order', 'is_active']
    search_fields = ['title']


@admin.register(Testimonial)
class TestimonialAdmin(CMSContentAdmin):
    list_display = ['guest_name', 'guest_title', 'rating', 'sort_order', 'is_active']
    search_fields = ['guest_name', 'content']


@admin.register(GalleryImage)
class GalleryImageAdmin(CMSContentAdmin):
    list_display = ['title', 'category', 'sort_order', 'is_active']
    list_filter = ['is_active', 'category']
    search_fields = ['title', 'category']


@admin.register(Amenity)
class AmenityAdmin(CMSContentAdmin):
    list_display = ['name', 'category', 'sort_order', 'is_active']
    search_fields = ['name', 'category']


@admin.register(ContactInfo)
class ContactInfoAdmin(CMSContentAdmin):
    list_display = ['type', 'label', 'value', 'sort_order', 'is_active']
    list_filter = ['is_active', 'type']


@admin.register(FAQ)
class FAQAdmin(CMSContentAdmin):
    list_display = ['question', 'category', 'sort_order', 'is_active']
    search_fields = ['question', 'answer']
