"""
Entity collections and the per-session state container, against an
in-memory gateway.
"""
import pytest

from clinic.constants import ENTITY_TABLES
from clinic.errors import ActionConflict, BackendError, BackendUnavailable, RecordActionError, RecordNotFound
from clinic.gateways import Backend, RecordGateway
from clinic.state import ClinicState, SessionUser, StateRegistry


class MemoryGateway(RecordGateway):

    def __init__(self, table, rows=None):
        super().__init__(table)
        self.rows = {row['id']: dict(row) for row in rows or []}
        self.fail_with = None
        self.calls = 0

    def _check(self):
        self.calls += 1
        if self.fail_with:
            raise self.fail_with

    def get_all(self):
        self._check()
        return [dict(row) for row in self.rows.values()]

    def upsert(self, record):
        self._check()
        self.rows[record['id']] = dict(record)
        return dict(record)

    def delete(self, record_id):
        self._check()
        self.rows.pop(record_id, None)


@pytest.fixture
def gateways():
    return {table: MemoryGateway(table) for table in ENTITY_TABLES}


@pytest.fixture
def state(gateways):
    gateways['clients'].rows = {'c-1': {'id': 'c-1', 'name': 'Ana Souza', 'cpf': '123', 'status': 'ACTIVE'}}
    return ClinicState(Backend(gateways, files=None, auth=None))


class TestEntityCollection:

    def test_save_new_record_gets_prefixed_id(self, state, gateways):
        saved = state.clients.save({'name': 'Bruna Lima', 'status': 'LEAD'})

        assert saved['id'].startswith('c-')
        assert saved['id'] in gateways['clients'].rows
        assert len(state.clients.all()) == 2

    def test_save_existing_id_replaces_whole_record(self, state):
        state.clients.save({'id': 'c-1', 'name': 'Ana Maria'})
        record = state.clients.require('c-1')

        assert record == {'id': 'c-1', 'name': 'Ana Maria'}
        assert len(state.clients.all()) == 1

    def test_failed_save_leaves_collection_unchanged(self, state, gateways):
        before = state.clients.all()
        gateways['clients'].fail_with = BackendError("boom")

        with pytest.raises(RecordActionError):
            state.clients.save({'id': 'c-1', 'name': 'Changed'})
        with pytest.raises(RecordActionError):
            state.clients.save({'name': 'New'})

        assert state.clients.all() == before

    def test_failed_delete_keeps_record(self, state, gateways):
        state.clients.all()
        gateways['clients'].fail_with = BackendUnavailable("down")

        with pytest.raises(RecordActionError):
            state.clients.delete('c-1')
        assert state.clients.get('c-1') is not None

    def test_delete(self, state, gateways):
        state.clients.delete('c-1')
        assert state.clients.all() == []
        assert gateways['clients'].rows == {}

    def test_delete_unknown_record(self, state):
        with pytest.raises(RecordNotFound):
            state.clients.delete('c-missing')

    def test_returned_records_are_copies(self, state):
        record = state.clients.require('c-1')
        record['name'] = 'Mutated'
        assert state.clients.require('c-1')['name'] == 'Ana Souza'

    def test_filter(self, state):
        state.clients.save({'name': 'Bruna Lima', 'cpf': '999', 'status': 'LEAD'})

        assert [c['id'] for c in state.clients.filter('ANA', fields=('name', 'cpf'))] == ['c-1']
        assert len(state.clients.filter('99', fields=('name', 'cpf'))) == 1
        assert len(state.clients.filter(None, fields=('name',), status='LEAD')) == 1
        assert len(state.clients.filter(None, fields=('name',), status=None)) == 2


class TestClinicState:

    def test_load_session_fans_out_over_session_collections(self, app, state, gateways):
        state.load_session(app, workers=4)

        for name in ('clients', 'appointments', 'transactions', 'deals'):
            assert gateways[name].calls == 1
            assert state.collection(name).loaded
        assert not state.suppliers.loaded

    def test_load_session_propagates_backend_failure(self, app, state, gateways):
        gateways['deals'].fail_with = BackendUnavailable("down")
        with pytest.raises(BackendUnavailable):
            state.load_session(app, workers=4)

    def test_lazy_collections_load_on_first_access(self, state, gateways):
        gateways['suppliers'].rows = {'s-1': {'id': 's-1', 'name': 'Allergan'}}
        assert state.suppliers.all() == [{'id': 's-1', 'name': 'Allergan'}]
        state.suppliers.all()
        assert gateways['suppliers'].calls == 1

    def test_insight_call_is_single_flight_per_key(self, state):
        with state.insight_call('funnel'):
            with pytest.raises(ActionConflict):
                with state.insight_call('funnel'):
                    pass
            with state.insight_call('reports'):
                pass
        with state.insight_call('funnel'):
            pass


class TestStateRegistry:

    def test_register_and_discard(self, state):
        registry = StateRegistry()
        user = SessionUser({'id': 'u-1', 'name': 'Ana'}, {'id': 'u-1'}, state)

        registry.register(user)
        assert registry.get(user.get_id()) is user
        assert len(registry) == 1

        registry.discard(user.get_id())
        assert registry.get(user.get_id()) is None

    def test_idle_sessions_are_evicted(self, state):
        now = [1000.0]
        registry = StateRegistry(idle_timeout=60, clock=lambda: now[0])
        idle = registry.register(SessionUser({'id': 'u-1'}, {'id': 'u-1'}, state))
        active = registry.register(SessionUser({'id': 'u-2'}, {'id': 'u-2'}, state))

        now[0] += 45
        assert registry.get(active.get_id()) is active
        now[0] += 30

        assert registry.get(idle.get_id()) is None
        assert registry.get(active.get_id()) is active
        assert len(registry) == 1

    def test_no_timeout_keeps_sessions(self, state):
        now = [0.0]
        registry = StateRegistry(clock=lambda: now[0])
        user = registry.register(SessionUser({'id': 'u-1'}, {'id': 'u-1'}, state))
        now[0] += 10 ** 6
        assert registry.get(user.get_id()) is user
