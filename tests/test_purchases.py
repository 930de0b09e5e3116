from tiendapos.shared.database.models import InventoryMovement, PurchaseItem

COMPRAS = "/api/v1/compras"
VENTAS = "/api/v1/ventas"


def _purchase(client, headers, lines, **extra):
    body = {"detalles": [
        {"id_producto": pid, "cantidad": qty, "precio_unitario": price} for pid, qty, price in lines
    ]}
    body.update(extra)
    return client.post(COMPRAS, json=body, headers=headers)


def test_compra_suma_stock(client, admin_headers, products, seeded):
    arroz, aceite = products["arroz"], products["aceite"]
    response = _purchase(client, admin_headers, [(arroz.id, 5, 700), (aceite.id, 2, 7000)],
                         fecha_compra="2024-05-02", observaciones="Pedido semanal")

    assert response.status_code == 201, response.text
    compra = response.json()["compra"]
    assert compra["total"] == 5 * 700 + 2 * 7000
    assert compra["fecha_compra"].startswith("2024-05-02")
    assert response.json()["warnings"] == []

    seeded.refresh(arroz)
    seeded.refresh(aceite)
    assert (arroz.stock, aceite.stock) == (15, 7)


def test_compra_sobre_el_maximo_se_advierte(client, admin_headers, products, seeded):
    arroz = products["arroz"]
    response = _purchase(client, admin_headers, [(arroz.id, 15, 700)])

    assert response.status_code == 201
    warnings = response.json()["warnings"]
    assert warnings[0]["tipo"] == "MAX_STOCK"
    assert warnings[0]["exceso"] == 5
    seeded.refresh(arroz)
    assert arroz.stock == 25


def test_compra_con_precio_cero(client, admin_headers, products):
    response = _purchase(client, admin_headers, [(products["aceite"].id, 1, 0)])
    assert response.status_code == 201
    assert response.json()["compra"]["total"] == 0


def test_compra_con_producto_duplicado(client, admin_headers, products):
    arroz = products["arroz"]
    response = _purchase(client, admin_headers, [(arroz.id, 1, 700), (arroz.id, 2, 700)])
    assert response.status_code == 400


def test_compra_con_fecha_invalida(client, admin_headers, products):
    response = _purchase(client, admin_headers, [(products["arroz"].id, 1, 700)], fecha_compra="02/05/2024")
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "YYYY-MM-DD" in response.json()["message"]


def test_editar_compra_reconcilia_stock(client, admin_headers, products, seeded):
    arroz, aceite = products["arroz"], products["aceite"]
    purchase_id = _purchase(client, admin_headers, [(arroz.id, 5, 700)]).json()["compra"]["id_compra"]

    # arroz 5 -> 2 y se agrega aceite 3
    response = client.put(f"{COMPRAS}/{purchase_id}", json={"detalles": [
        {"id_producto": arroz.id, "cantidad": 2, "precio_unitario": 700},
        {"id_producto": aceite.id, "cantidad": 3, "precio_unitario": 7000},
    ]}, headers=admin_headers)

    assert response.status_code == 200, response.text
    assert response.json()["compra"]["total"] == 2 * 700 + 3 * 7000
    seeded.refresh(arroz)
    seeded.refresh(aceite)
    assert (arroz.stock, aceite.stock) == (12, 8)
    items = seeded.query(PurchaseItem).filter(PurchaseItem.purchase_id == purchase_id).all()
    assert sorted((i.product_id, i.quantity) for i in items) == sorted([(arroz.id, 2), (aceite.id, 3)])


def test_editar_compra_cuyas_unidades_ya_se_vendieron(client, admin_headers, products, cash, seeded):
    aceite = products["aceite"]
    purchase_id = _purchase(client, admin_headers, [(aceite.id, 3, 7000)]).json()["compra"]["id_compra"]
    client.post(VENTAS, json={
        "detalles": [{"id_producto": aceite.id, "cantidad": 8, "precio_unitario": 9000}],
        "pagos": [{"id_metodo_pago": cash.id, "monto": 72000}],
    }, headers=admin_headers)

    response = client.put(f"{COMPRAS}/{purchase_id}", json={"detalles": [
        {"id_producto": aceite.id, "cantidad": 1, "precio_unitario": 7000},
    ]}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["code"] == "STOCK_NOT_ENOUGH"
    seeded.refresh(aceite)
    assert aceite.stock == 0


def test_anular_compra_revierte_stock(client, admin_headers, products, seeded):
    arroz = products["arroz"]
    purchase_id = _purchase(client, admin_headers, [(arroz.id, 4, 700)]).json()["compra"]["id_compra"]

    response = client.delete(f"{COMPRAS}/{purchase_id}", params={"motivo": "Proveedor equivocado"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["compra"]["activo"] is False
    seeded.refresh(arroz)
    assert arroz.stock == 10
    kinds = [m.change_type for m in seeded.query(InventoryMovement).order_by(InventoryMovement.id)]
    assert kinds == ["compra", "anulacion_compra"]


def test_anular_compra_que_deja_stock_negativo(client, admin_headers, products, cash, seeded):
    aceite = products["aceite"]
    purchase_id = _purchase(client, admin_headers, [(aceite.id, 2, 7000)]).json()["compra"]["id_compra"]
    client.post(VENTAS, json={
        "detalles": [{"id_producto": aceite.id, "cantidad": 6, "precio_unitario": 9000}],
        "pagos": [{"id_metodo_pago": cash.id, "monto": 54000}],
    }, headers=admin_headers)

    response = client.delete(f"{COMPRAS}/{purchase_id}", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["items"][0]["deficit"] == 1
    assert client.get(f"{COMPRAS}/{purchase_id}", headers=admin_headers).json()["compra"]["activo"] is True


def test_vendedor_sin_acceso_a_compras(client, seller_headers):
    response = client.get(COMPRAS, headers=seller_headers)
    assert response.status_code == 403


def test_editar_compra_con_producto_ya_desactivado(client, admin_headers, products, seeded):
    arroz, aceite = products["arroz"], products["aceite"]
    purchase_id = _purchase(client, admin_headers, [(arroz.id, 2, 700)]).json()["compra"]["id_compra"]
    arroz.is_active = False
    aceite.is_active = False
    seeded.commit()

    same_lines = {"detalles": [{"id_producto": arroz.id, "cantidad": 2, "precio_unitario": 700}],
                  "observaciones": "Factura corregida"}
    response = client.put(f"{COMPRAS}/{purchase_id}", json=same_lines, headers=admin_headers)

    assert response.status_code == 200, response.text
    assert response.json()["compra"]["observaciones"] == "Factura corregida"

    new_inactive = {"detalles": same_lines["detalles"] + [
        {"id_producto": aceite.id, "cantidad": 1, "precio_unitario": 7000}
    ]}
    response = client.put(f"{COMPRAS}/{purchase_id}", json=new_inactive, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Productos inactivos: Aceite 1 L"
