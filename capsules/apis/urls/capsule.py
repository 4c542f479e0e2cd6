from django.urls import path
from capsules.apis.views.capsule import CapsuleDetailView, CapsuleEntryCreateView, CapsuleListCreateView

urlpatterns = [
    path('', CapsuleListCreateView.as_view(), name='capsule_list_create'),
    path('<int:capsule_id>/', CapsuleDetailView.as_view(), name='capsule_detail'),
    path('<int:capsule_id>/entries/', CapsuleEntryCreateView.as_view(), name='capsule_entry_create'),
]
