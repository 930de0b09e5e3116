from decimal import Decimal

from tiendapos.config.settings import settings
from tiendapos.shared.database.models import InventoryMovement, Sale

VENTAS = "/api/v1/ventas"


def _sale_body(product_id, method_id, paid=None, quantity=2, price=1000, **extra):
    body = {"detalles": [{"id_producto": product_id, "cantidad": quantity, "precio_unitario": price}]}
    if paid is not None:
        body["pagos"] = [{"id_metodo_pago": method_id, "monto": paid}]
    body.update(extra)
    return body


def test_venta_de_contado_queda_pagada(client, seller_headers, products, cash):
    arroz = products["arroz"]
    response = client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers)

    assert response.status_code == 201, response.text
    venta = response.json()["venta"]
    assert venta["total"] == 2000
    assert venta["saldo_pendiente"] == 0
    assert venta["estado"] == "PAGADA"
    assert venta["es_fiado"] is False
    assert venta["porcentaje_pagado"] == 100


def test_venta_fiada_queda_pendiente(client, seller_headers, products, cash):
    arroz = products["arroz"]
    response = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=500, cliente_desc="Juan"), headers=seller_headers
    )

    assert response.status_code == 201, response.text
    venta = response.json()["venta"]
    assert venta["total"] == 2000
    assert venta["saldo_pendiente"] == 1500
    assert venta["estado"] == "PENDIENTE"
    assert venta["es_fiado"] is True
    assert venta["cliente_desc"] == "Juan"


def test_venta_fiada_sin_cliente_se_rechaza(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    response = client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=500), headers=seller_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "nombre del cliente" in body["message"]
    assert seeded.query(Sale).count() == 0


def test_venta_sin_pagos_es_fiada(client, seller_headers, products, cash):
    arroz = products["arroz"]
    response = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, cliente_desc="Marta"), headers=seller_headers
    )

    assert response.status_code == 201
    assert response.json()["venta"]["saldo_pendiente"] == 2000


def test_pagos_que_exceden_el_total(client, seller_headers, products, cash):
    arroz = products["arroz"]
    response = client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=2500), headers=seller_headers)

    assert response.status_code == 400
    assert "excede el total" in response.json()["message"]


def test_producto_duplicado_se_rechaza(client, seller_headers, products, cash):
    arroz = products["arroz"]
    body = {
        "detalles": [
            {"id_producto": arroz.id, "cantidad": 1, "precio_unitario": 1000},
            {"id_producto": arroz.id, "cantidad": 1, "precio_unitario": 1000},
        ],
        "pagos": [{"id_metodo_pago": cash.id, "monto": 2000}],
    }
    response = client.post(VENTAS, json=body, headers=seller_headers)

    assert response.status_code == 400
    assert "ya fue seleccionado" in response.json()["message"]


def test_acepta_productos_como_alias_de_detalles(client, seller_headers, products, cash):
    arroz = products["arroz"]
    body = {
        "productos": [{"id_producto": arroz.id, "cantidad": 1, "precio_unitario": 1000}],
        "pagos": [{"id_metodo_pago": cash.id, "monto": 1000}],
    }
    response = client.post(VENTAS, json=body, headers=seller_headers)

    assert response.status_code == 201
    assert response.json()["venta"]["total"] == 1000


def test_venta_descuenta_stock_y_registra_movimiento(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers)

    seeded.refresh(arroz)
    assert arroz.stock == 8
    movement = seeded.query(InventoryMovement).filter(InventoryMovement.change_type == "venta").one()
    assert (movement.quantity_before, movement.quantity_after) == (10, 8)


def test_stock_insuficiente(client, seller_headers, products, cash, seeded):
    aceite = products["aceite"]
    response = client.post(
        VENTAS, json=_sale_body(aceite.id, cash.id, paid=54000, quantity=6, price=9000), headers=seller_headers
    )

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "STOCK_NOT_ENOUGH"
    assert body["items"] == [{
        "producto_id": aceite.id,
        "nombre": "Aceite 1 L",
        "disponible": 5,
        "solicitado": 6,
        "deficit": 1,
    }]
    seeded.refresh(aceite)
    assert aceite.stock == 5
    assert seeded.query(Sale).count() == 0


def test_venta_bajo_stock_minimo_se_rechaza(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    response = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=9000, quantity=9), headers=seller_headers
    )

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "MIN_STOCK_BREACH"
    violation = body["violations"][0]
    assert violation["stock_minimo"] == 2
    assert violation["resultante"] == 1
    assert violation["faltante"] == 1
    seeded.refresh(arroz)
    assert arroz.stock == 10


def test_stock_minimo_como_advertencia(client, seller_headers, products, cash, monkeypatch):
    monkeypatch.setattr(settings, "block_on_min_stock_breach", False)
    arroz = products["arroz"]
    response = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=9000, quantity=9), headers=seller_headers
    )

    assert response.status_code == 201
    warnings = response.json()["warnings"]
    assert len(warnings) == 1
    assert warnings[0]["tipo"] == "MIN_STOCK"


def test_anular_venta_revierte_stock(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    sale_id = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers
    ).json()["venta"]["id_venta"]

    response = client.delete(f"{VENTAS}/{sale_id}", params={"motivo": "Error de digitación"}, headers=seller_headers)

    assert response.status_code == 200, response.text
    venta = response.json()["venta"]
    assert venta["activo"] is False
    assert venta["estado"] == "CANCELADA"
    assert venta["motivo_eliminacion"] == "Error de digitación"
    seeded.refresh(arroz)
    assert arroz.stock == 10


def test_anular_venta_que_supera_stock_maximo_se_rechaza(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    sale_id = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers
    ).json()["venta"]["id_venta"]

    # Reposición que deja el producto en su máximo
    arroz.stock = 20
    seeded.commit()

    response = client.delete(f"{VENTAS}/{sale_id}", headers=seller_headers)

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "MAX_STOCK_BREACH"
    assert body["violations"][0]["exceso"] == 2
    assert body["violations"][0]["stock_maximo"] == 20

    detail = client.get(f"{VENTAS}/{sale_id}", headers=seller_headers).json()
    assert detail["venta"]["activo"] is True
    seeded.refresh(arroz)
    assert arroz.stock == 20


def test_anular_dos_veces(client, seller_headers, products, cash):
    arroz = products["arroz"]
    sale_id = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers
    ).json()["venta"]["id_venta"]
    client.delete(f"{VENTAS}/{sale_id}", headers=seller_headers)

    response = client.delete(f"{VENTAS}/{sale_id}", headers=seller_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "La venta ya fue eliminada."


def test_listado_excluye_anuladas_por_defecto(client, seller_headers, products, cash):
    arroz = products["arroz"]
    first = client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers).json()
    client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers)
    client.delete(f"{VENTAS}/{first['venta']['id_venta']}", headers=seller_headers)

    assert len(client.get(VENTAS, headers=seller_headers).json()) == 1
    todas = client.get(VENTAS, params={"incluir_eliminadas": True}, headers=seller_headers).json()
    assert len(todas) == 2


def test_detalle_de_venta(client, seller_headers, products, cash):
    arroz = products["arroz"]
    sale_id = client.post(
        VENTAS, json=_sale_body(arroz.id, cash.id, paid=500, cliente_desc="Juan"), headers=seller_headers
    ).json()["venta"]["id_venta"]

    detail = client.get(f"{VENTAS}/{sale_id}", headers=seller_headers).json()
    assert detail["productos"] == [{
        "id_producto": arroz.id,
        "nombre": "Arroz 500 g",
        "cantidad": 2,
        "precio_unitario": 1000.0,
        "subtotal": 2000.0,
    }]
    assert [p["monto"] for p in detail["pagos"]] == [500.0]


def test_venta_inexistente(client, seller_headers):
    response = client.get(f"{VENTAS}/999", headers=seller_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_metodo_de_pago_inactivo(client, seller_headers, products, cash, seeded):
    cash.is_active = False
    seeded.commit()
    arroz = products["arroz"]

    response = client.post(VENTAS, json=_sale_body(arroz.id, cash.id, paid=2000), headers=seller_headers)
    assert response.status_code == 400
    assert "Métodos de pago" in response.json()["message"]


def test_precio_con_mas_de_dos_decimales_se_rechaza(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    body = _sale_body(arroz.id, cash.id, paid=1000, quantity=1, price=1000.004, cliente_desc="Juan")

    response = client.post(VENTAS, json=body, headers=seller_headers)

    assert response.status_code == 422
    assert response.json()["message"] == "El precio unitario admite máximo 2 decimales."
    assert seeded.query(Sale).count() == 0
    seeded.refresh(arroz)
    assert arroz.stock == 10


def test_venta_con_centavos_conserva_el_saldo_guardado(client, seller_headers, products, cash, seeded):
    arroz = products["arroz"]
    body = _sale_body(arroz.id, cash.id, paid=1000.25, quantity=2, price=1000.50, cliente_desc="Juan")

    venta = client.post(VENTAS, json=body, headers=seller_headers).json()["venta"]

    assert (venta["total"], venta["saldo_pendiente"], venta["estado"]) == (2001, 1000.75, "PENDIENTE")
    stored = seeded.get(Sale, venta["id_venta"])
    seeded.refresh(stored)
    assert (stored.pending_balance, stored.state) == (Decimal("1000.75"), "PENDIENTE")
    detail = client.get(f"{VENTAS}/{venta['id_venta']}", headers=seller_headers).json()["venta"]
    assert (detail["saldo_pendiente"], detail["estado"]) == (1000.75, "PENDIENTE")

    abono = client.post(f"{VENTAS}/{venta['id_venta']}/abonos", json={
        "id_metodo_pago": cash.id, "monto": 1000.75
    }, headers=seller_headers)
    assert abono.json()["venta"]["estado"] == "PAGADA"
