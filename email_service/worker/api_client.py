import requests
from django.conf import settings
from typing import Dict

from .exceptions import NotFound, ServiceLookupError


class ServiceAPIClient:
    # Handles lookups against the template and user services with the
    # email service's credentials

    def __init__(self, template_service_url: str = None, user_service_url: str = None,
                 api_key: str = None, timeout: float = None, session=None):
        self.template_service_url = (template_service_url or settings.TEMPLATE_SERVICE_URL).rstrip('/')
        self.user_service_url = (user_service_url or settings.USER_SERVICE_URL).rstrip('/')
        self.api_key = api_key if api_key is not None else settings.EMAIL_SERVICE_KEY
        self.timeout = timeout if timeout is not None else settings.LOOKUP_TIMEOUT
        self.session = session or requests.Session()

    def get_headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ServiceLookupError("No API key configured for email_service")

        return {
            'X-API-KEY': self.api_key,
            'X-Calling-Service': 'email_service',
            'Content-Type': 'application/json'
        }

    def get_email_template(self, template_key: str) -> dict:
        # GET /templates/{key}
        return self._get(f"{self.template_service_url}/templates/{template_key}", 'Template', template_key)

    def get_user_profile(self, user_id: str) -> dict:
        # GET /users/{id}
        return self._get(f"{self.user_service_url}/users/{user_id}", 'User', user_id)

    def _get(self, url: str, kind: str, key: str) -> dict:
        try:
            response = self.session.get(url, headers=self.get_headers(), timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise ServiceLookupError(f"{kind} service unavailable: {e}") from e
        except requests.RequestException as e:
            raise ServiceLookupError(f"{kind} service request failed: {e}") from e

        if response.status_code == 404:
            raise NotFound(kind, key)
        if response.status_code != 200:
            raise ServiceLookupError(f"{kind} service returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ServiceLookupError(f"{kind} service returned invalid JSON") from e

        # Platform services wrap records as {"success": ..., "data": {...}}
        if isinstance(payload, dict) and 'success' in payload and 'data' in payload:
            if not payload.get('success'):
                raise NotFound(kind, key)
            payload = payload.get('data')

        if not payload:
            raise NotFound(kind, key)
        if not isinstance(payload, dict):
            raise ServiceLookupError(f"Invalid {kind.lower()} data from {kind.lower()} service")
        return payload
