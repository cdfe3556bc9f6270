from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, user_me,
    business_unit_list_create, business_unit_detail
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # Business units
    path('business-units/', business_unit_list_create, name='business-unit-list-create'),
    path('business-units/<int:pk>/', business_unit_detail, name='business-unit-detail'),
]
