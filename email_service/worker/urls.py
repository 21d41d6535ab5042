from django.urls import path
from .views import job_status

urlpatterns = [
    path('status/<str:request_id>/', job_status, name='job_status'),
]
