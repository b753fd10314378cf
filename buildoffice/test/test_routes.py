"""
JSON routes and file downloads
"""

from buildoffice.business.orders.order_factory import OrderFactory
from buildoffice.data.projects.order import Order


def test_dashboard(client, tool):
    response = client.get('/api/dashboard')
    assert response.status_code == 200
    data = response.get_json()
    assert data['counts']['tools'] == 1
    assert data['counts']['employees'] == 1
    assert 'expiring_soon' in data['tools']


def test_csrf_token(client):
    response = client.get('/api/csrf-token')
    assert response.status_code == 200
    assert response.get_json()['csrf_token']


def test_pricing_preview(client):
    response = client.post('/api/pricing/preview', json={
        'kind': 'quotation', 'values': {'quantity': '2', 'unit_price': '100'}, 'field': 'margin', 'value': '10',
    })
    assert response.status_code == 200
    assert response.get_json()['total'] == 220.0

    response = client.post('/api/pricing/preview', json={'kind': 'invoice', 'field': 'x'})
    assert response.status_code == 400
    assert 'error' in response.get_json()

    response = client.post('/api/pricing/preview', json={
        'kind': 'order', 'values': ['net_amount', '100'], 'field': 'tax_rate', 'value': '23',
    })
    assert response.status_code == 400


def test_employee_crud(client):
    response = client.post('/api/employees', json={'first_name': 'Anna', 'last_name': 'Nowak', 'rate': '45,5'})
    assert response.status_code == 201
    employee = response.get_json()
    assert employee['rate'] == 45.5

    response = client.post(f"/api/employees/{employee['id']}/permissions", json={'name': 'SEP E1', 'issue_date': '2025-01-01'})
    assert response.status_code == 201
    assert response.get_json()['expiry']['status'] == 'no_expiry'

    response = client.post('/api/employees', json={'first_name': 'Anna'})
    assert response.status_code == 400
    assert response.get_json() == {'error': 'last_name is required'}

    assert client.delete(f"/api/employees/{employee['id']}").status_code == 200
    assert client.get('/api/employees').get_json() == []


def test_unknown_record_is_404(client):
    assert client.get('/api/tools/999').status_code == 404
    assert client.put('/api/orders/999', json={'title': 'x'}).status_code == 404


def test_tool_routes(client, tool):
    response = client.get(f'/api/tools/{tool.id}')
    assert response.status_code == 200
    data = response.get_json()
    assert data['url'] == f'https://office.example.com/tools/{tool.id}'
    assert data['inspection_interval'] == 6

    response = client.post(f'/api/tools/{tool.id}/protocols', json={'date': '2026-03-01', 'validity_months': 12})
    assert response.status_code == 201
    protocol = response.get_json()
    assert protocol['result'] == 'POSITIVE'

    response = client.get(f"/api/tools/protocols/{protocol['id']}/pdf")
    assert response.mimetype == 'application/pdf'

    response = client.get(f'/api/tools/{tool.id}/qr.svg')
    assert response.mimetype == 'image/svg+xml'

    response = client.get('/api/tools/qr-sheet.pdf?format=B5')
    assert response.status_code == 400


def test_protocol_form_options(client, tool):
    options = client.get('/api/tools/protocols/checklist').get_json()
    assert options['validity_months'] == [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 24]

    response = client.post(f'/api/tools/{tool.id}/protocols', json={'date': '2026-03-01', 'validity_months': 3})
    assert response.status_code == 201
    assert response.get_json()['next_inspection_date'] == '2026-06-01'


def test_tool_exports(client, tool):
    response = client.get('/api/tools/export.xlsx')
    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

    response = client.get(f'/api/tools/checklist.pdf?employee_id={tool.assigned_employees[0].id}')
    assert response.data.startswith(b'%PDF')


def test_public_tool_page(client, tool):
    response = client.get(f'/tools/{tool.id}')
    assert response.status_code == 200
    data = response.get_json()
    assert data['name'] == 'Hammer drill'
    assert 'price' not in data


def test_warehouse_routes(client):
    response = client.post('/api/warehouse/items', json={'name': 'Screws', 'quantity': '100', 'min_quantity': '20'})
    assert response.status_code == 201
    item = response.get_json()
    assert item['quantity'] == 100

    response = client.post(f"/api/warehouse/items/{item['id']}/operations", json={'type': 'OUT', 'quantity': '90'})
    assert response.status_code == 201
    assert response.get_json()['item']['is_low_stock'] is True

    response = client.post(f"/api/warehouse/items/{item['id']}/operations", json={'type': 'OUT', 'quantity': '50'})
    assert response.status_code == 400
    assert response.get_json()['error'].startswith('Insufficient stock')

    history = client.get(f"/api/warehouse/items/{item['id']}/history").get_json()
    assert [h['type'] for h in history] == ['OUT', 'IN']
    assert [i['name'] for i in client.get('/api/warehouse/low-stock').get_json()] == ['Screws']


def test_order_routes(client, project):
    response = client.post(f'/api/projects/{project.id}/orders', json={'title': 'Sand', 'net_amount': '10', 'quantity': '2'})
    assert response.status_code == 201
    order_id = response.get_json()['order']['id']

    response = client.post(f'/api/orders/{order_id}/status', json={'status': 'Delivered'})
    assert response.status_code == 200
    result = response.get_json()
    assert result['warehouse_synced'] is True
    assert result['to_status'] == 'Delivered'

    response = client.post(f'/api/orders/{order_id}/sync-warehouse')
    assert response.status_code == 400

    response = client.get(f'/api/projects/{project.id}/orders/export.xlsx')
    assert response.status_code == 200


def test_board_move_route(client, project):
    order = OrderFactory().create_order(project.id, {'title': 'Gravel'}).order

    response = client.post(f'/api/projects/{project.id}/board/move', json={'order_id': order.id, 'status': 'Ordered'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['applied'] is True
    assert [c['id'] for c in body['board']['Ordered']] == [order.id]

    client.delete(f'/api/orders/{order.id}')
    assert Order.query.get(order.id).is_deleted == 1
    response = client.get(f'/api/projects/{project.id}/board')
    assert all(cards == [] for cards in response.get_json().values())


def test_quotation_routes(client, project):
    response = client.post(f'/api/projects/{project.id}/quotation/items',
                           json={'description': 'Tiling', 'quantity': '2', 'unit_price': '100', 'margin': '10'})
    assert response.status_code == 201
    assert response.get_json()['total'] == 220.0

    assert client.get(f'/api/projects/{project.id}').get_json()['total_value'] == 220.0

    response = client.get(f'/api/projects/{project.id}/quotation/export.pdf')
    assert response.data.startswith(b'%PDF')

    response = client.get('/api/projects/quotation/price-suggestions?q=til')
    assert response.get_json() == [], "draft quotations are not suggested"


def test_notifications(client, project):
    order = OrderFactory().create_order(project.id, {'title': 'Gravel'}).order
    client.post(f'/api/orders/{order.id}/status', json={'status': 'Ordered'})

    data = client.get('/api/notifications').get_json()
    assert data['unread'] == 1
    assert data['notifications'][0]['message'] == 'Order "Gravel" changed status to: In progress'

    assert client.post('/api/notifications/read-all').get_json() == {'updated': 1}
    assert client.get('/api/notifications').get_json()['unread'] == 0


def test_security_headers(client):
    response = client.get('/api/csrf-token')
    assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
