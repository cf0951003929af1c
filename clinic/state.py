"""
Per-session application state.

A :class:`ClinicState` owns one :class:`EntityCollection` per entity. Views read
and update records only through it; each collection mirrors writes to its
backend gateway and changes its in-memory rows only after the backend call
succeeded.
"""
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from datetime import timedelta

from flask_login import UserMixin

from . import logger
from .constants import ENTITY_TABLES, SESSION_COLLECTIONS, DEFAULT_APPEARANCE
from .errors import ActionConflict, BackendError, RecordActionError, RecordNotFound
from .utils.helpers import generate_id, matches_term


class EntityCollection:
    """In-memory copy of one entity table, loaded once per session"""

    def __init__(self, name, gateway, id_prefix):
        self.name = name
        self.gateway = gateway
        self.id_prefix = id_prefix
        self._records = []
        self._loaded = False

    @property
    def loaded(self):
        return self._loaded

    def load(self):
        records = self.gateway.get_all()
        self._records = [dict(record) for record in records]
        self._loaded = True
        logger.info(f"Loaded {len(self._records)} {self.name}")
        return self.all()

    def all(self):
        if not self._loaded:
            self.load()
        return [dict(record) for record in self._records]

    def get(self, record_id):
        for record in self.all():
            if record.get('id') == record_id:
                return record
        return None

    def require(self, record_id):
        record = self.get(record_id)
        if record is None:
            raise RecordNotFound(f"{self.name[:-1].capitalize()} {record_id} not found")
        return record

    def filter(self, term=None, fields=(), **equals):
        """
        Substring search over ``fields`` combined with exact matches; an
        ``equals`` value of ``None`` is ignored.
        """
        result = []
        for record in self.all():
            if not matches_term(record, term, fields):
                continue
            if any(value is not None and record.get(key) != value for key, value in equals.items()):
                continue
            result.append(record)
        return result

    def save(self, record):
        """
        Create (no id) or fully replace (existing id) a record.

        Returns:
            dict: the stored record, including its generated identifier

        Raises:
            RecordActionError: the backend refused or could not be reached
        """
        record = dict(record)
        if not record.get('id'):
            record['id'] = generate_id(self.id_prefix)

        try:
            stored = self.gateway.upsert(record)
        except BackendError as e:
            logger.error(f"Saving {self.name} {record['id']} failed: {e.message}")
            raise RecordActionError(f"Erro ao salvar registro em {self.name}.", details=e.message) from e

        stored = dict(stored or record)
        if not self._loaded:
            self.load()
        for index, existing in enumerate(self._records):
            if existing.get('id') == stored['id']:
                self._records[index] = stored
                break
        else:
            self._records.append(stored)
        return dict(stored)

    def delete(self, record_id):
        self.require(record_id)
        try:
            self.gateway.delete(record_id)
        except BackendError as e:
            logger.error(f"Deleting {self.name} {record_id} failed: {e.message}")
            raise RecordActionError(f"Erro ao remover registro de {self.name}.", details=e.message) from e
        self._records = [record for record in self._records if record.get('id') != record_id]


class ClinicState:
    """Typed access to the entity collections of one signed-in session"""

    def __init__(self, backend):
        self.backend = backend
        self._collections = {
            name: EntityCollection(name, backend.records(name), prefix)
            for name, (_table, prefix) in ENTITY_TABLES.items()
        }
        self.appearance = dict(DEFAULT_APPEARANCE)
        self._insights_running = set()
        self._lock = threading.Lock()

    def collection(self, name):
        return self._collections[name]

    @property
    def clients(self):
        return self._collections['clients']

    @property
    def appointments(self):
        return self._collections['appointments']

    @property
    def transactions(self):
        return self._collections['transactions']

    @property
    def deals(self):
        return self._collections['deals']

    @property
    def suppliers(self):
        return self._collections['suppliers']

    @property
    def packages(self):
        return self._collections['packages']

    @property
    def users(self):
        return self._collections['users']

    def load_session(self, app, workers=4):
        """Load the session collections in parallel and wait for all of them"""
        if workers <= 1:
            for name in SESSION_COLLECTIONS:
                self.collection(name).load()
            return

        def _load(name):
            with app.app_context():
                return self.collection(name).load()

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_load, name) for name in SESSION_COLLECTIONS]
            for future in futures:
                future.result()

    @contextmanager
    def insight_call(self, key):
        """Allow a single generative-text call per insight button at a time"""
        with self._lock:
            if key in self._insights_running:
                raise ActionConflict("Análise em andamento. Aguarde a resposta atual.")
            self._insights_running.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._insights_running.discard(key)


class SessionUser(UserMixin):
    """The Flask-Login user: a signed-in profile plus its state container"""

    def __init__(self, profile, identity, state, session_id=None):
        self.session_id = session_id or uuid.uuid4().hex
        self.profile = dict(profile)
        self.identity = identity
        self.state = state

    def get_id(self):
        return self.session_id

    @property
    def is_active(self):
        return bool(self.profile.get('active', True))

    @property
    def user_id(self):
        return self.profile.get('id')


class StateRegistry:
    """
    Signed-in sessions of this process, keyed by session id.

    A session not looked up for ``idle_timeout`` is evicted on the next
    lookup or registration.
    """

    def __init__(self, idle_timeout=None, clock=time.monotonic):
        self.idle_timeout = idle_timeout.total_seconds() if isinstance(idle_timeout, timedelta) else idle_timeout
        self._clock = clock
        self._sessions = {}
        self._last_seen = {}
        self._lock = threading.Lock()

    def _evict_idle(self, now):
        if not self.idle_timeout:
            return
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self.idle_timeout]
        for session_id in expired:
            self._sessions.pop(session_id, None)
            self._last_seen.pop(session_id, None)
        if expired:
            logger.info(f"Evicted {len(expired)} idle sessions")

    def register(self, session_user):
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            self._sessions[session_user.session_id] = session_user
            self._last_seen[session_user.session_id] = now
        return session_user

    def get(self, session_id):
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            session_user = self._sessions.get(session_id)
            if session_user is not None:
                self._last_seen[session_id] = now
            return session_user

    def discard(self, session_id):
        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._sessions.pop(session_id, None)

    def __len__(self):
        with self._lock:
            return len(self._sessions)
