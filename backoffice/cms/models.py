from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class CMSContent(models.Model):
    """Common fields of public website content"""
    homepage_content = True

    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['sort_order', 'id']


class HeroSection(CMSContent):
    title = models.CharField(max_length=200)
    subtitle = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    button_text = models.CharField(max_length=50, blank=True)
    button_url = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return self.title

    class Meta(CMSContent.Meta):
        db_table = 'cms_hero_sections'


class Feature(CMSContent):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    icon = models.CharField(max_length=50, blank=True)

    def __str__(self):
        return self.title

    class Meta(CMSContent.Meta):
        db_table = 'cms_features'


class Testimonial(CMSContent):
    guest_name = models.CharField(max_length=100)
    guest_title = models.CharField(max_length=100, blank=True)
    content = models.TextField()
    rating = models.PositiveSmallIntegerField(default=5, validators=[MinValueValidator(1), MaxValueValidator(5)])
    image_url = models.URLField(max_length=500, blank=True)

    def __str__(self):
        return f"{self.guest_name} ({self.rating})"

    class Meta(CMSContent.Meta):
        db_table = 'cms_testimonials'


class GalleryImage(CMSContent):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500)
    category = models.CharField(max_length=50, blank=True)

    def __str__(self):
        return self.title

    class Meta(CMSContent.Meta):
        db_table = 'cms_gallery_images'


class Amenity(CMSContent):
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    icon = models.CharField(max_length=50, blank=True)
    category = models.CharField(max_length=50, blank=True)

    def __str__(self):
        return self.name

    class Meta(CMSContent.Meta):
        db_table = 'cms_amenities'
        verbose_name_plural = 'Amenities'


class ContactInfo(CMSContent):
    PHONE = 'PHONE'
    EMAIL = 'EMAIL'
    ADDRESS = 'ADDRESS'
    SOCIAL = 'SOCIAL'
    TYPE_CHOICES = [
        (PHONE, 'Phone'),
        (EMAIL, 'Email'),
        (ADDRESS, 'Address'),
        (SOCIAL, 'Social'),
    ]

    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    label = models.CharField(max_length=100)
    value = models.CharField(max_length=255)
    icon = models.CharField(max_length=50, blank=True)

    def __str__(self):
        return f"{self.label}: {self.value}"

    class Meta(CMSContent.Meta):
        db_table = 'cms_contact_info'
        verbose_name_plural = 'Contact info'


class FAQ(CMSContent):
    question = models.CharField(max_length=255)
    answer = models.TextField()
    category = models.CharField(max_length=50, blank=True)

    def __str__(self):
        return self.question

    class Meta(CMSContent.Meta):
        db_table = 'cms_faqs'
        verbose_name = 'FAQ'
        verbose_name_plural = 'FAQs'
