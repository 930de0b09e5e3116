import pytest

from tiendapos.shared.database.models import Form, Permission, Role

API = "/api/v1"


@pytest.fixture
def cashier(seeded):
    """Rol sin formularios asignados"""
    role = Role(name="Cajero", status='A')
    seeded.add(role)
    seeded.commit()
    return role


def _form(db, url=None, title=None):
    if url:
        return db.query(Form).filter(Form.url == url).one()
    return db.query(Form).filter(Form.title == title, Form.parent_id.is_(None)).one()


def _assigned_urls(db, role_id):
    rows = db.query(Permission).filter(Permission.role_id == role_id).all()
    return sorted(p.form.url or p.form.title for p in rows)


def test_asignar_hijo_asigna_tambien_el_padre(client, admin_headers, seeded, cashier):
    ventas = _form(seeded, url="/dashboard/ventas")

    response = client.post(f"{API}/permisos", json={
        "id_rol": cashier.id, "id_formulario": ventas.id
    }, headers=admin_headers)

    assert response.status_code == 201, response.text
    assert response.json()["asignadoTambien"] == "Operación"
    assert _assigned_urls(seeded, cashier.id) == ["/dashboard/ventas", "Operación"]


def test_asignar_formulario_repetido(client, admin_headers, seeded, cashier):
    inicio = _form(seeded, url="/dashboard")
    payload = {"id_rol": cashier.id, "id_formulario": inicio.id}

    first = client.post(f"{API}/permisos", json=payload, headers=admin_headers)
    assert first.json()["asignadoTambien"] is None

    second = client.post(f"{API}/permisos", json=payload, headers=admin_headers)
    assert second.status_code == 409


def test_asignacion_masiva(client, admin_headers, seeded, cashier):
    inicio = _form(seeded, url="/dashboard")
    ventas = _form(seeded, url="/dashboard/ventas")
    compras = _form(seeded, url="/dashboard/compras")
    client.post(f"{API}/permisos", json={"id_rol": cashier.id, "id_formulario": inicio.id}, headers=admin_headers)

    response = client.post(f"{API}/permisos/bulk", json={
        "id_rol": cashier.id, "id_formularios": [inicio.id, ventas.id, compras.id]
    }, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert (body["asignados"], body["yaExistian"], body["padresAsignados"]) == (2, 1, 1)
    assert len(_assigned_urls(seeded, cashier.id)) == 4


def test_asignacion_masiva_con_formulario_inexistente(client, admin_headers, cashier):
    response = client.post(f"{API}/permisos/bulk", json={
        "id_rol": cashier.id, "id_formularios": [9999]
    }, headers=admin_headers)
    assert response.status_code == 404


def test_quitar_padre_quita_sus_hijos(client, admin_headers, seeded, seller_role):
    operacion = _form(seeded, title="Operación")

    response = client.delete(
        f"{API}/permisos/rol/{seller_role.id}/formulario/{operacion.id}", headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["hijosEliminados"] == 2
    assert _assigned_urls(seeded, seller_role.id) == ["/dashboard"]


def test_quitar_hijo_conserva_el_padre(client, admin_headers, seeded, seller_role):
    ventas = _form(seeded, url="/dashboard/ventas")

    response = client.delete(
        f"{API}/permisos/rol/{seller_role.id}/formulario/{ventas.id}", headers=admin_headers
    )

    assert response.json()["hijosEliminados"] is None
    assert "Operación" in _assigned_urls(seeded, seller_role.id)


def test_quitar_todos_los_permisos(client, admin_headers, seeded, seller_role):
    response = client.delete(f"{API}/permisos/rol/{seller_role.id}", headers=admin_headers)

    assert response.json()["total"] == 4
    assert _assigned_urls(seeded, seller_role.id) == []


def test_formularios_de_un_rol(client, admin_headers, seller_role):
    response = client.get(f"{API}/permisos/rol/{seller_role.id}", headers=admin_headers)
    urls = {f["url_formulario"] for f in response.json()}
    assert urls == {"/dashboard", None, "/dashboard/ventas", "/dashboard/productos"}


def test_crear_formulario_hijo(client, admin_headers, seeded):
    reportes = _form(seeded, title="Reportes")

    response = client.post(f"{API}/formularios", json={
        "titulo_formulario": "Cartera", "url_formulario": "/dashboard/cartera", "padre_id": reportes.id
    }, headers=admin_headers)

    assert response.status_code == 201
    urls = [f["url_formulario"] for f in client.get(f"{API}/formularios", headers=admin_headers).json()]
    assert "/dashboard/cartera" in urls


@pytest.mark.parametrize("payload", [
    {"titulo_formulario": "Sin url"},
    {"titulo_formulario": "Padre con url", "is_padre": True, "url_formulario": "/x"},
])
def test_formulario_con_forma_invalida(client, admin_headers, payload):
    response = client.post(f"{API}/formularios", json=payload, headers=admin_headers)
    assert response.status_code == 422


def test_formulario_bajo_un_hijo(client, admin_headers, seeded):
    ventas = _form(seeded, url="/dashboard/ventas")
    response = client.post(f"{API}/formularios", json={
        "titulo_formulario": "Detalle", "url_formulario": "/dashboard/detalle", "padre_id": ventas.id
    }, headers=admin_headers)
    assert response.status_code == 400


def test_vendedor_no_administra_permisos(client, seller_headers):
    assert client.get(f"{API}/permisos", headers=seller_headers).status_code == 403
