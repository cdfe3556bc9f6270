from django.urls import path
from .views import business_partner_list_create, business_partner_detail

urlpatterns = [
    path('business-partners/', business_partner_list_create, name='business-partner-list-create'),
    path('business-partners/<int:pk>/', business_partner_detail, name='business-partner-detail'),
]
