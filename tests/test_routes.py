"""
Per-view operations through the HTTP API on the SQL driver.
"""
import io

import pytest


class TestClients:

    def test_create_normalises_phone_and_stamps_consent(self, make_client):
        client = make_client(lgpd_consent=True)

        assert client['id'].startswith('c-')
        assert client['phone'] == '11987654321'
        assert client['lgpd_timestamp'] is not None

    def test_edit_is_a_full_replace(self, auth_client, make_client):
        client = make_client(lgpd_consent=True, address='Rua A, 10')

        response = auth_client.put(f"/clients/{client['id']}", json={'name': 'Ana Souza Lima'})
        updated = response.get_json()['client']

        assert response.status_code == 200
        assert updated['name'] == 'Ana Souza Lima'
        assert updated['address'] == ''
        assert updated['phone'] == ''
        assert updated['lgpd_consent'] is False
        assert updated['lgpd_timestamp'] is None

    def test_search_by_name_or_cpf_and_status(self, auth_client, make_client):
        make_client(name='Ana Souza', cpf='111.222.333-44', status='ACTIVE')
        make_client(name='Beatriz Costa', cpf='555.666.777-88', status='LEAD')

        assert len(auth_client.get('/clients?q=ana').get_json()) == 1
        assert len(auth_client.get('/clients?q=555').get_json()) == 1
        assert len(auth_client.get('/clients?status=ALL').get_json()) == 2
        leads = auth_client.get('/clients?status=LEAD').get_json()
        assert [c['name'] for c in leads] == ['Beatriz Costa']

    def test_numeric_phone_is_rejected(self, auth_client):
        response = auth_client.post('/clients', json={'name': 'Ana', 'phone': 11987654321})
        assert response.status_code == 400
        assert 'phone' in response.get_json()['error']

    def test_invalid_client(self, auth_client):
        response = auth_client.post('/clients', json={'name': '', 'status': 'VIP'})
        assert response.status_code == 400
        assert set(response.get_json()['error']) >= {'name', 'status'}

    def test_clinical_evolution_is_prepended(self, auth_client, make_client):
        client = make_client()
        url = f"/clients/{client['id']}/history"

        auth_client.post(url, json={'procedure': 'Botox', 'date': '2024-01-10'})
        response = auth_client.post(url, json={'procedure': 'Retorno', 'date': '2024-01-25', 'notes': 'Sem intercorrências'})

        history = response.get_json()['client']['clinical_history']
        assert response.status_code == 201
        assert [h['procedure'] for h in history] == ['Retorno', 'Botox']
        assert history[0]['professional_name'] == 'Dra. Elena Ramos'
        assert history[0]['id'].startswith('h-')

    def test_photo_upload(self, auth_client, make_client):
        client = make_client()

        response = auth_client.post(
            f"/clients/{client['id']}/photos",
            data={'files': [(io.BytesIO(b'before'), 'before.jpg'), (io.BytesIO(b'after'), 'after.jpg')]},
            content_type='multipart/form-data'
        )

        assert response.status_code == 201
        urls = response.get_json()['urls']
        assert len(urls) == 2
        assert urls[0].startswith(f"/media/clinical-photos/{client['id']}/")
        assert urls[0].endswith('-before.jpg')
        assert auth_client.get(urls[0]).data == b'before'

    def test_photo_upload_requires_files(self, auth_client, make_client):
        client = make_client()
        response = auth_client.post(f"/clients/{client['id']}/photos", data={}, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_delete(self, auth_client, make_client):
        client = make_client()
        assert auth_client.delete(f"/clients/{client['id']}").status_code == 200
        assert auth_client.get('/clients').get_json() == []
        assert auth_client.delete(f"/clients/{client['id']}").status_code == 404


class TestFunnel:

    def test_board_has_ordered_stages(self, auth_client, make_client):
        client = make_client()
        auth_client.post('/funnel/deals', json={'title': 'Botox', 'client_id': client['id'], 'value': 1200})
        auth_client.post('/funnel/deals', json={'title': 'Laser', 'value': 800})

        board = auth_client.get('/funnel').get_json()

        assert [stage['id'] for stage in board] == ['new', 'contact', 'consult', 'proposal', 'closed']
        assert board[0]['count'] == 2
        assert board[0]['total_value'] == 2000
        names = sorted(d['client_name'] for d in board[0]['deals'])
        assert names == ['Ana Souza', 'Cliente Desconhecido']

    def test_move_deal(self, auth_client):
        deal = auth_client.post('/funnel/deals', json={'title': 'Preenchimento'}).get_json()['deal']

        response = auth_client.post(f"/funnel/deals/{deal['id']}/move", json={'stage_id': 'consult'})
        assert response.status_code == 200
        board = {stage['id']: stage for stage in auth_client.get('/funnel').get_json()}
        assert board['consult']['count'] == 1
        assert board['new']['count'] == 0

    def test_move_to_unknown_stage(self, auth_client):
        deal = auth_client.post('/funnel/deals', json={'title': 'Peeling'}).get_json()['deal']
        response = auth_client.post(f"/funnel/deals/{deal['id']}/move", json={'stage_id': 'won'})
        assert response.status_code == 409


class TestFinance:

    @pytest.fixture
    def ledger(self, auth_client, make_client):
        client = make_client()
        auth_client.post('/finance/transactions', json={
            'type': 'INCOME', 'value': 1500, 'client_id': client['id'], 'payment_method': 'PIX'
        })
        auth_client.post('/finance/transactions', json={
            'type': 'INCOME', 'value': 500, 'status': 'PENDING'
        })
        auth_client.post('/finance/transactions', json={
            'type': 'EXPENSE', 'value': 300, 'category': 'Insumos'
        })
        return client

    def test_tabs_and_stats(self, auth_client, ledger):
        flow = auth_client.get('/finance').get_json()
        assert len(flow['transactions']) == 3
        assert flow['stats'] == {
            'income_total': 2000,
            'expense_total': 300,
            'net_margin': None,
            'average_ticket': None
        }

        payable = auth_client.get('/finance?tab=payable').get_json()['transactions']
        assert [t['type'] for t in payable] == ['EXPENSE']

        receivable = auth_client.get('/finance?tab=receivable').get_json()['transactions']
        assert sorted(t['client_name'] for t in receivable) == ['Ana Souza', 'Outros']

        assert auth_client.get('/finance?tab=forecast').status_code == 400

    def test_invalid_transaction(self, auth_client):
        response = auth_client.post('/finance/transactions', json={'type': 'REFUND', 'value': -1})
        assert response.status_code == 400

    def test_packages_crud(self, auth_client):
        response = auth_client.post('/finance/packages', json={'name': 'Pacote Laser 10x', 'price': 2500, 'sessions': 10})
        package = response.get_json()['package']
        assert package['id'].startswith('pk-')

        updated = auth_client.put(f"/finance/packages/{package['id']}", json={'name': 'Pacote Laser 8x', 'sessions': 8})
        assert updated.get_json()['package']['price'] == 0

        assert len(auth_client.get('/finance/packages').get_json()) == 1
        assert auth_client.delete(f"/finance/packages/{package['id']}").status_code == 200
        assert auth_client.get('/finance/packages').get_json() == []


class TestSuppliers:

    def test_search_and_category(self, auth_client):
        auth_client.post('/suppliers', json={'name': 'Allergan', 'category': 'Toxinas', 'contact_person': 'Marcos'})
        auth_client.post('/suppliers', json={'name': 'Galderma', 'category': 'Preenchedores', 'contact_person': 'Paula'})

        assert len(auth_client.get('/suppliers?category=Todos').get_json()) == 2
        assert [s['name'] for s in auth_client.get('/suppliers?q=paula').get_json()] == ['Galderma']
        assert [s['name'] for s in auth_client.get('/suppliers?category=Toxinas').get_json()] == ['Allergan']

    def test_phone_validation(self, auth_client):
        response = auth_client.post('/suppliers', json={'name': 'Fornecedor X', 'phone': '1234'})
        assert response.status_code == 400
        assert 'phone' in response.get_json()['error']

    def test_numeric_phone_is_rejected(self, auth_client):
        response = auth_client.post('/suppliers', json={'name': 'Fornecedor X', 'phone': 1133334444})
        assert response.status_code == 400
        assert 'phone' in response.get_json()['error']

    def test_update_and_delete(self, auth_client):
        supplier = auth_client.post('/suppliers', json={'name': 'Merz'}).get_json()['supplier']

        response = auth_client.put(f"/suppliers/{supplier['id']}", json={'name': 'Merz Aesthetics', 'rating': 4.5})
        assert response.get_json()['supplier']['rating'] == 4.5

        assert auth_client.delete(f"/suppliers/{supplier['id']}").status_code == 200
        assert auth_client.get('/suppliers').get_json() == []


class TestSettings:

    def test_update_own_profile(self, auth_client):
        response = auth_client.put('/settings/profile', json={'name': 'Dra. Elena R. Ramos', 'specialty': 'Dermatologia'})

        assert response.status_code == 200
        assert auth_client.get('/auth/me').get_json()['name'] == 'Dra. Elena R. Ramos'
        assert auth_client.get('/settings/profile').get_json()['role'] == 'ADMIN'

    def test_employees(self, auth_client):
        response = auth_client.post('/settings/employees', json={
            'name': 'Carla Mendes', 'email': 'carla@clinic.test', 'role': 'SALES'
        })
        employee = response.get_json()['user']

        assert response.status_code == 201
        assert employee['id'].startswith('u-')
        assert employee['active'] is True
        assert employee['avatar'].startswith('https://ui-avatars.com/api/?name=Carla')
        assert len(auth_client.get('/settings/employees').get_json()) == 2

        assert auth_client.delete(f"/settings/employees/{employee['id']}").status_code == 200
        assert auth_client.delete('/settings/employees/u-admin').status_code == 409

    def test_appearance(self, auth_client):
        response = auth_client.put('/settings/appearance', json={'primary_color': '#0f766e', 'secondary_color': '#111827'})
        assert response.get_json()['primary_color'] == '#0f766e'
        assert auth_client.get('/session').get_json()['appearance']['primary_color'] == '#0f766e'

        assert auth_client.put('/settings/appearance', json={'primary_color': 'teal', 'secondary_color': '#111827'}).status_code == 400

        reset = auth_client.delete('/settings/appearance').get_json()
        assert reset == {'primary_color': '#be185d', 'secondary_color': '#1e1b4b'}


class TestOverviews:

    def test_dashboard(self, auth_client, make_client, make_appointment):
        active = make_client(status='ACTIVE')
        make_client(name='Beatriz Costa')
        make_appointment(active['id'], procedure='Botox')
        make_appointment(active['id'], procedure='Botox', time='11:00')
        auth_client.post('/finance/transactions', json={'type': 'INCOME', 'value': 900})
        auth_client.post('/finance/transactions', json={'type': 'INCOME', 'value': 400, 'status': 'PENDING'})

        body = auth_client.get('/dashboard').get_json()

        assert body['stats'] == {
            'total_clients': 2,
            'conversion_rate': 50.0,
            'paid_income': 900,
            'total_appointments': 2
        }
        assert body['procedure_mix'] == [{'name': 'Botox', 'value': 2}]
        assert body['performance']['placeholder'] is True

    def test_reports(self, auth_client, make_client, make_appointment):
        client = make_client()
        make_appointment(client['id'], status='COMPLETED')
        make_appointment(client['id'], status='CANCELED', time='11:00')
        make_appointment(client['id'], status='SCHEDULED', time='12:00')

        body = auth_client.get('/reports').get_json()

        assert body['occupancy']['completed'] == 1
        assert body['occupancy']['canceled'] == 1
        assert body['occupancy']['scheduled'] == 1
        assert body['occupancy']['capacity_slots'] == 420
        assert body['occupancy']['no_show']['estimate'] is True
        assert body['professionals'][0]['total'] == 3
        assert body['trend']['placeholder'] is True

    def test_analytics(self, auth_client, make_client):
        make_client(birth_date='1990-05-15', total_spent=3200)

        body = auth_client.get('/analytics').get_json()

        assert body['total_clients'] == 1
        assert body['average_ltv'] == 3200
        tiers = {t['name']: t['value'] for t in body['spend_tiers']}
        assert tiers['Fidelizados'] == 1

    def test_marketing(self, auth_client, make_client):
        make_client(source='Instagram', status='ACTIVE')
        make_client(source='Instagram')

        body = auth_client.get('/marketing').get_json()

        assert body['lead_sources'] == [{'name': 'Instagram', 'total': 2, 'converted': 1, 'rate': 50.0}]
        assert body['campaigns']['placeholder'] is True

    def test_chat_conversations(self, auth_client):
        body = auth_client.get('/chat/conversations?q=renata').get_json()
        assert body['placeholder'] is True
        assert [c['name'] for c in body['items']] == ['Renata Souza']
