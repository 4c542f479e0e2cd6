from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path('admin/', admin.site.urls),

    # --- authentication-apis ---
    path('api/auth/', include('userauth.urls')),

    # --- capsule-apis ---
    path('api/capsules/', include('capsules.urls')),
]
