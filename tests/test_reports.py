from datetime import date

import pytest

from tiendapos.core.errors import ValidationError
from tiendapos.modules.reports import resolve_period
from tiendapos.modules.reports.schemas import ReportPeriod

API = "/api/v1"
TODAY = date(2024, 3, 14)


@pytest.mark.parametrize("period, expected", [
    (ReportPeriod.TODAY, (date(2024, 3, 14), date(2024, 3, 14))),
    (ReportPeriod.WEEKLY, (date(2024, 3, 8), date(2024, 3, 14))),
    (ReportPeriod.MONTHLY, (date(2024, 3, 1), date(2024, 3, 14))),
    (ReportPeriod.YEARLY, (date(2024, 1, 1), date(2024, 3, 14))),
])
def test_rango_de_periodos(period, expected):
    assert resolve_period(period, today=TODAY) == expected


def test_periodo_personalizado():
    start, end = date(2024, 2, 1), date(2024, 2, 29)
    assert resolve_period(ReportPeriod.CUSTOM, start, end, today=TODAY) == (start, end)


def test_periodo_personalizado_sin_fechas():
    with pytest.raises(ValidationError):
        resolve_period(ReportPeriod.CUSTOM, date(2024, 2, 1), None, today=TODAY)


def test_periodo_personalizado_invertido():
    with pytest.raises(ValidationError):
        resolve_period(ReportPeriod.CUSTOM, date(2024, 2, 10), date(2024, 2, 1), today=TODAY)


def _sale(client, headers, lines, **extra):
    payload = {
        "detalles": [
            {"id_producto": p.id, "cantidad": qty, "precio_unitario": price} for p, qty, price in lines
        ],
        **extra
    }
    response = client.post(f"{API}/ventas", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["venta"]


def test_reporte_de_ventas_personalizado(client, admin_headers, products, cash):
    arroz, aceite = products["arroz"], products["aceite"]
    _sale(client, admin_headers, [(arroz, 2, 1000)],
          pagos=[{"id_metodo_pago": cash.id, "monto": 2000}], fecha_venta="2024-03-10")
    _sale(client, admin_headers, [(aceite, 1, 9000)],
          cliente_desc="Juan", fecha_venta="2024-03-12T15:30:00")
    _sale(client, admin_headers, [(arroz, 1, 1000)],
          pagos=[{"id_metodo_pago": cash.id, "monto": 1000}], fecha_venta="2024-04-01")
    deleted = _sale(client, admin_headers, [(arroz, 1, 1000)],
                    pagos=[{"id_metodo_pago": cash.id, "monto": 1000}], fecha_venta="2024-03-11")
    client.delete(f"{API}/ventas/{deleted['id_venta']}", headers=admin_headers)

    response = client.get(f"{API}/reportes/ventas", params={
        "periodo": "personalizado", "fecha_inicio": "2024-03-01", "fecha_fin": "2024-03-31"
    }, headers=admin_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["periodo"]["dias"] == 31
    summary = body["resumen"]
    assert summary["total_ventas"] == 11000
    assert summary["cantidad_ventas"] == 2
    assert (summary["ventas_contado"], summary["ventas_fiadas"]) == (1, 1)
    assert summary["total_fiado"] == 9000
    assert [d["fecha"] for d in body["por_dia"]] == ["2024-03-10", "2024-03-12"]
    assert body["vendedores"][0]["ventas"] == 2


def test_reporte_personalizado_sin_fechas(client, admin_headers):
    response = client.get(f"{API}/reportes/ventas", params={"periodo": "personalizado"}, headers=admin_headers)
    assert response.status_code == 400


def test_reporte_de_compras(client, admin_headers, products):
    arroz = products["arroz"]
    for day in ("2024-05-02", "2024-05-03"):
        client.post(f"{API}/compras", json={
            "detalles": [{"id_producto": arroz.id, "cantidad": 2, "precio_unitario": 700}],
            "fecha_compra": day,
        }, headers=admin_headers)

    response = client.get(f"{API}/reportes/compras", params={
        "periodo": "personalizado", "fecha_inicio": "2024-05-01", "fecha_fin": "2024-05-02"
    }, headers=admin_headers)

    body = response.json()
    assert body["resumen"]["cantidad_compras"] == 1
    assert body["resumen"]["total_compras"] == 1400
    assert body["productos_mas_comprados"][0]["unidades"] == 2


def test_dashboard(client, seller_headers, admin_headers, products, cash):
    arroz, aceite = products["arroz"], products["aceite"]
    _sale(client, seller_headers, [(arroz, 3, 1000)], pagos=[{"id_metodo_pago": cash.id, "monto": 3000}])
    _sale(client, seller_headers, [(aceite, 1, 9000)],
          cliente_desc="Juan", pagos=[{"id_metodo_pago": cash.id, "monto": 4000}])
    client.post(f"{API}/compras", json={
        "detalles": [{"id_producto": arroz.id, "cantidad": 2, "precio_unitario": 700}]
    }, headers=admin_headers)

    response = client.get(f"{API}/reportes/dashboard", headers=seller_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["resumen_hoy"]["ventas"] == {"cantidad": 2, "total": 12000}
    assert body["resumen_hoy"]["compras"] == {"cantidad": 1, "total": 1400}
    assert body["cartera"] == {"ventas_pendientes": 1, "total_por_cobrar": 5000}
    assert body["top_5_productos"][0]["nombre"] == "Arroz 500 g"
    assert body["producto_mas_rentable"] == {"nombre": "Aceite 1 L", "ganancia": 2000}
    assert body["inventario"]["total_productos"] == 2


def test_vendedor_sin_reporte_de_ventas(client, seller_headers):
    assert client.get(f"{API}/reportes/ventas", headers=seller_headers).status_code == 403
