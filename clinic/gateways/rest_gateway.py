"""
Gateways for a hosted PostgREST backend (Supabase-compatible): tables under
``/rest/v1``, objects under ``/storage/v1`` and password auth under ``/auth/v1``.
"""
from urllib.parse import quote

import requests

from .. import logger
from ..errors import AuthenticationError, BackendError, BackendUnavailable
from . import RecordGateway, FileStore, AuthGateway

CONNECTION_ERROR_MESSAGE = (
    "Não foi possível conectar ao banco de dados. Verifique sua conexão com a "
    "internet ou se a URL do backend está correta."
)


class RestClient:
    """Thin wrapper adding the api key and bearer token to every call"""

    def __init__(self, base_url, api_key, timeout=15, access_token=None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.access_token = access_token

    def headers(self, extra=None):
        headers = {
            'apikey': self.api_key,
            'Authorization': f"Bearer {self.access_token or self.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def request(self, method, path, headers=None, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                headers=self.headers(headers),
                timeout=self.timeout,
                **kwargs
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Backend unreachable ({method} {path}): {str(e)}")
            raise BackendUnavailable(CONNECTION_ERROR_MESSAGE)
        except requests.exceptions.RequestException as e:
            logger.error(f"Backend request failed ({method} {path}): {str(e)}")
            raise BackendError(f"Backend request failed: {str(e)}")
        return response


def _raise_for_status(response, action):
    if response.ok:
        return
    try:
        detail = response.json().get('message') or response.text
    except ValueError:
        detail = response.text
    logger.error(f"Backend rejected {action}: HTTP {response.status_code} {detail}")
    raise BackendError(f"Backend rejected {action}", details={"status": response.status_code, "message": detail})


class RestRecordGateway(RecordGateway):

    def __init__(self, client, table, ordering=None):
        super().__init__(table)
        self.client = client
        self.ordering = ordering

    def get_all(self):
        params = {'select': '*'}
        if self.ordering:
            column, descending = self.ordering
            params['order'] = f"{column}.{'desc' if descending else 'asc'}"
        response = self.client.request('GET', f"/rest/v1/{self.table}", params=params)
        _raise_for_status(response, f"load of {self.table}")
        return response.json() or []

    def upsert(self, record):
        response = self.client.request(
            'POST',
            f"/rest/v1/{self.table}",
            json=record,
            headers={'Prefer': 'resolution=merge-duplicates,return=representation'}
        )
        _raise_for_status(response, f"save of {self.table} row {record.get('id')}")
        rows = response.json()
        logger.info(f"Upserted {self.table} row {record.get('id')}")
        return rows[0] if rows else record

    def delete(self, record_id):
        response = self.client.request('DELETE', f"/rest/v1/{self.table}", params={'id': f"eq.{record_id}"})
        _raise_for_status(response, f"delete of {self.table} row {record_id}")
        logger.info(f"Deleted {self.table} row {record_id}")


class RestFileStore(FileStore):

    def __init__(self, client):
        self.client = client

    def upload(self, bucket, path, stream, content_type=None):
        object_path = quote(path)
        response = self.client.request(
            'POST',
            f"/storage/v1/object/{bucket}/{object_path}",
            data=stream.read(),
            headers={'Content-Type': content_type or 'application/octet-stream'}
        )
        _raise_for_status(response, f"upload of {path}")
        return f"{self.client.base_url}/storage/v1/object/public/{bucket}/{object_path}"


class RestAuthGateway(AuthGateway):

    def __init__(self, client):
        self.client = client

    def sign_in(self, email, password):
        response = self.client.request(
            'POST',
            '/auth/v1/token',
            params={'grant_type': 'password'},
            json={'email': email, 'password': password}
        )
        if response.status_code in (400, 401):
            logger.warning(f"Rejected sign-in for {email}")
            raise AuthenticationError("Invalid login credentials")
        _raise_for_status(response, "sign-in")
        payload = response.json()
        user = payload.get('user') or {}
        return {
            "id": user.get('id'),
            "email": user.get('email', email),
            "access_token": payload.get('access_token')
        }

    def sign_out(self, identity):
        token = identity.get('access_token')
        if not token:
            return
        response = self.client.request('POST', '/auth/v1/logout', headers={'Authorization': f"Bearer {token}"})
        if not response.ok:
            logger.warning(f"Backend sign-out returned HTTP {response.status_code}")

    def get_profile(self, user_id, access_token=None):
        headers = {'Accept': 'application/vnd.pgrst.object+json'}
        if access_token:
            headers['Authorization'] = f"Bearer {access_token}"
        response = self.client.request(
            'GET',
            '/rest/v1/profiles',
            params={'select': '*', 'id': f"eq.{user_id}"},
            headers=headers
        )
        if response.status_code == 406:
            # PostgREST answers 406 when the single-row lookup matched nothing
            return None
        _raise_for_status(response, f"profile lookup for {user_id}")
        return response.json()
