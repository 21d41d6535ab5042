from django.urls import include, path

from worker.views import health_check

urlpatterns = [
    path('health/', health_check, name='health_check'),
    path('api/v1/email/', include('worker.urls')),
]
