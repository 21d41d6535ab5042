import hmac
import logging
from functools import wraps

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def internal_service_required(view_func):
    # Only platform services holding their shared key may read job records
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        service_name = request.headers.get("X-Service-Name")
        service_key = request.headers.get("X-Service-Key")

        if not service_name or not service_key:
            logger.warning("Missing internal service headers")
            return JsonResponse({"success": False, "error": "Missing internal headers"}, status=403)

        expected_key = settings.INTERNAL_SERVICE_KEYS.get(service_name)
        if not expected_key:
            logger.warning(f"Unauthorized service attempted access: {service_name}")
            return JsonResponse({"success": False, "error": "Unauthorized service"}, status=403)

        if not hmac.compare_digest(service_key, expected_key):
            logger.warning(f"Invalid API key for service: {service_name}")
            return JsonResponse({"success": False, "error": "Unauthorized"}, status=403)

        request.calling_service = service_name
        return view_func(request, *args, **kwargs)

    return wrapper
