# pulse_backend/urls.py

from django.contrib import admin
from django.urls import path, include

from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)

urlpatterns = [
    path('admin/', admin.site.urls),

    # Matching, conversations and safety API
    path('api/v1/', include('matching.urls')),

    # Obtain a token pair (login)
    path('api/v1/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),

    # Refresh an access token
    path('api/v1/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
