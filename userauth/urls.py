from django.urls import include, path


urlpatterns = [

    # --- authentication-apis ---
    path('', include('userauth.apis.urls.urls')),
]
