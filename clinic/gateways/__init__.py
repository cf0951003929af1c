"""
Backend gateways.

The views depend only on these interfaces; which backend sits behind them is
decided once per session by :func:`create_backend`.
"""
from abc import ABC, abstractmethod

from ..constants import ENTITY_TABLES

# Table -> (column, descending) for collections the backend returns ordered
TABLE_ORDERING = {
    'clients': ('name', False),
    'transactions': ('date', True),
}


class RecordGateway(ABC):
    """get-all / upsert / delete-by-id contract of one entity table"""

    def __init__(self, table):
        self.table = table

    @abstractmethod
    def get_all(self):
        """Return every row of the table as a list of dicts"""

    @abstractmethod
    def upsert(self, record):
        """Insert or fully replace ``record`` (keyed by ``id``) and return the stored row"""

    @abstractmethod
    def delete(self, record_id):
        """Hard-delete the row with ``record_id``; deleting a missing row is not an error"""


class FileStore(ABC):
    """Object store with upload-then-public-URL semantics"""

    @abstractmethod
    def upload(self, bucket, path, stream, content_type=None):
        """Store the bytes of ``stream`` under ``bucket/path`` and return their public URL"""


class AuthGateway(ABC):

    @abstractmethod
    def sign_in(self, email, password):
        """
        Password sign-in.

        Returns:
            dict: ``{"id", "email", "access_token"}`` of the authenticated user

        Raises:
            AuthenticationError: credentials rejected
            BackendUnavailable: the auth endpoint could not be reached
        """

    @abstractmethod
    def sign_out(self, identity):
        """End the backend session of ``identity``"""

    @abstractmethod
    def get_profile(self, user_id, access_token=None):
        """Single-row profile lookup by user id; ``None`` when there is no profile"""


class Backend:
    """The collaborators one session talks to"""

    def __init__(self, records, files, auth):
        self._records = records
        self.files = files
        self.auth = auth

    def records(self, collection):
        return self._records[collection]


def create_backend(app, access_token=None):
    """
    Build the gateways for the configured driver.

    Args:
        app: Flask application holding the backend configuration
        access_token: bearer token of the signed-in user (REST driver only)
    """
    driver = app.config['BACKEND_DRIVER']
    if driver == 'rest':
        from .rest_gateway import RestRecordGateway, RestFileStore, RestAuthGateway, RestClient
        client = RestClient(
            app.config['BACKEND_URL'],
            app.config['BACKEND_KEY'],
            timeout=app.config.get('BACKEND_TIMEOUT', 15),
            access_token=access_token
        )
        records = {
            name: RestRecordGateway(client, table, ordering=TABLE_ORDERING.get(table))
            for name, (table, _prefix) in ENTITY_TABLES.items()
        }
        return Backend(records, RestFileStore(client), RestAuthGateway(client))

    if driver == 'sql':
        from .sql_gateway import SqlRecordGateway, LocalFileStore, SqlAuthGateway
        records = {
            name: SqlRecordGateway(table, ordering=TABLE_ORDERING.get(table))
            for name, (table, _prefix) in ENTITY_TABLES.items()
        }
        return Backend(records, LocalFileStore(app), SqlAuthGateway())

    raise ValueError(f"Unknown backend driver: {driver}")
