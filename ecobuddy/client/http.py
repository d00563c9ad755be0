"""
Facility API Client

Thin ``requests`` wrapper around the JSON API. Every call carries a timeout;
transport failures, timeouts and unreadable bodies are raised as
ClientError, error responses from the server as ApiError.
"""

import logging

import requests

from ecobuddy.models.status import FacilityStatus

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class ClientError(Exception):
    """The request could not be completed or its response could not be read."""


class ApiError(ClientError):
    """The server answered with an error payload."""

    def __init__(self, status_code, message, payload=None):
        super().__init__(f'{status_code}: {message}')
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class FacilityApiClient:
    def __init__(self, base_url='', session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.csrf_token = None

    def fetch_token(self):
        """Ask the server for this session's anti-forgery token."""
        self.csrf_token = self._request('GET', '/api/csrf-token')['csrf_token']
        return self.csrf_token

    def search(self, keyword, category='', town=''):
        params = {'q': keyword, 'category': category or '', 'town': town or ''}
        return self._request('GET', '/api/search', params=params,
                             headers={'X-CSRF-Token': self.csrf_token or ''})

    def update_comment(self, facility_id, comment):
        if FacilityStatus.parse(comment) is None:
            raise ValueError(f'{comment!r} is not an allowed status')
        data = {'facility_id': str(facility_id), 'comments': comment, 'csrf_token': self.csrf_token or ''}
        return self._request('POST', '/api/comments', data=data)

    def get_facility(self, facility_id):
        return self._request('GET', f'/api/facilities/{facility_id}')

    def statuses(self):
        return self._request('GET', '/api/statuses')

    def _request(self, method, path, **kwargs):
        url = self.base_url + path
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.debug('%s %s timed out', method, url)
            raise ClientError('Request timed out') from e
        except requests.exceptions.RequestException as e:
            raise ClientError(str(e)) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise ClientError(f'Invalid JSON from {path}') from e

        if resp.status_code >= 400:
            message = payload.get('error') if isinstance(payload, dict) else None
            raise ApiError(resp.status_code, message or 'Request failed', payload)
        return payload
