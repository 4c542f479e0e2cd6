from django.urls import include, path


urlpatterns = [
    # --- capsule-apis ---
    path('', include('capsules.apis.urls.capsule')),
]
