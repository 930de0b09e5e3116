from tiendapos.core.session import FormCapability, SessionContext
from tiendapos.shared.database.models import User

API = "/api/v1"


def _capability(form_id, route, parent_id=None, is_parent=False, order=0, title=None):
    return FormCapability(
        form_id=form_id, title=title or route or f"#{form_id}", route=route,
        parent_id=parent_id, is_parent=is_parent, order=order
    )


def test_menu_agrupa_hijos_bajo_su_padre():
    forms = [
        _capability(3, "/dashboard/productos", parent_id=2, order=3),
        _capability(2, None, is_parent=True, order=2, title="Operación"),
        _capability(1, "/dashboard", order=1),
        _capability(4, "/dashboard/ventas", parent_id=2, order=1),
    ]
    session = SessionContext(user=User(id=1), role_name="vendedor", forms=forms)

    menu = session.menu()

    assert [node["id"] for node in menu] == [1, 2]
    assert [child["url"] for child in menu[1]["hijos"]] == ["/dashboard/ventas", "/dashboard/productos"]


def test_acceso_por_clave_exacta():
    session = SessionContext(user=User(id=1), role_name="vendedor",
                             forms=[_capability(1, "/dashboard/ventas")])

    assert session.can_access("/dashboard/ventas")
    assert not session.can_access("/dashboard/ventas-historicas")
    assert not session.can_access("/dashboard")


def test_administrador_accede_a_todo():
    session = SessionContext(user=User(id=1), role_name="administrador")
    assert session.can_access("/dashboard/compras")


def test_capacidad_viaja_en_el_token():
    capability = _capability(7, "/dashboard/compras", parent_id=2, order=2)
    assert FormCapability.from_claim(capability.to_claim()) == capability


def test_login_incluye_formularios_del_rol(client):
    response = client.post(f"{API}/auth/login-json", json={
        "email": "VENDEDOR@tiendapos.com", "password": "vendedor123"
    })

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["nombre_rol"] == "vendedor"
    urls = {f["url"] for f in body["formularios"]}
    assert urls == {"/dashboard", None, "/dashboard/ventas", "/dashboard/productos"}


def test_login_con_contrasena_incorrecta(client):
    response = client.post(f"{API}/auth/login-json", json={
        "email": "vendedor@tiendapos.com", "password": "incorrecta"
    })
    assert response.status_code == 401


def test_login_de_usuario_inactivo(client, seeded):
    user = seeded.query(User).filter(User.email == "vendedor@tiendapos.com").one()
    user.is_active = False
    seeded.commit()

    response = client.post(f"{API}/auth/login-json", json={
        "email": "vendedor@tiendapos.com", "password": "vendedor123"
    })
    assert response.status_code == 403


def test_login_por_formulario(client):
    response = client.post(f"{API}/auth/login", data={
        "username": "admin@tiendapos.com", "password": "admin123"
    })
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_menu_del_vendedor(client, seller_headers):
    response = client.get(f"{API}/auth/menu", headers=seller_headers)

    body = response.json()
    assert body["total_formularios"] == 4
    assert [node["titulo"] for node in body["menu"]] == ["Inicio", "Operación"]
    assert [child["titulo"] for child in body["menu"][1]["hijos"]] == ["Ventas", "Productos"]


def test_me(client, admin_headers):
    response = client.get(f"{API}/auth/me", headers=admin_headers)
    assert response.json()["email"] == "admin@tiendapos.com"
    assert response.json()["tipo_identificacion"] == "CC"


def test_sin_token(client):
    assert client.get(f"{API}/ventas").status_code in (401, 403)


def test_token_invalido(client):
    response = client.get(f"{API}/ventas", headers={"Authorization": "Bearer basura"})
    assert response.status_code == 401


def test_me_con_usuario_desactivado_despues_del_login(client, seller_headers, seeded):
    user = seeded.query(User).filter(User.email == "vendedor@tiendapos.com").one()
    user.is_active = False
    seeded.commit()

    response = client.get(f"{API}/auth/me", headers=seller_headers)
    assert response.status_code == 401
