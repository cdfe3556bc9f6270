from django.urls import path
from .views import homepage, content_list_create, content_detail

urlpatterns = [
    path('cms/homepage/', homepage, name='cms-homepage'),
    path('cms/<slug:content_type>/', content_list_create, name='cms-content-list-create'),
    path('cms/<slug:content_type>/<int:pk>/', content_detail, name='cms-content-detail'),
]
