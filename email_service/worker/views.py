from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET

from .cache import RedisCacheStore
from .decorators import internal_service_required
from .exceptions import CacheError
from .serializers import TrackingRecordSerializer
from .tracking import get_tracking_record
from .transport import SmtpTransport


def get_transport():
    return SmtpTransport()


def get_cache():
    return RedisCacheStore()


@csrf_exempt
@require_GET
def health_check(request):
    # Transport liveness only; never touches the job pipeline
    smtp_ready = get_transport().verify()
    return JsonResponse(
        {"status": "healthy" if smtp_ready else "unhealthy", "smtp_ready": smtp_ready},
        status=200 if smtp_ready else 503,
    )


@csrf_exempt
@internal_service_required
@require_GET
def job_status(request, request_id):
    # Audit view over the email_sent:/email_failed: records
    try:
        state, record = get_tracking_record(get_cache(), request_id)
    except CacheError as e:
        return JsonResponse({
            "success": False,
            "error": "cache_unavailable",
            "message": str(e)
        }, status=503)

    if state is None:
        return JsonResponse({
            "success": False,
            "error": "Job not found",
            "message": f"No delivery record for request {request_id}"
        }, status=404)

    return JsonResponse({
        "success": True,
        "data": {"state": state, "record": TrackingRecordSerializer(record).data},
        "message": "Job status fetched successfully"
    })
