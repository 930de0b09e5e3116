# tiendapos/modules/reports/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional, Tuple
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from collections import defaultdict
import logging

from .repository import ReportsRepository
from .schemas import ReportPeriod
from tiendapos.core.errors import ValidationError

logger = logging.getLogger(__name__)


def resolve_period(
    period: ReportPeriod,
    start: Optional[date] = None,
    end: Optional[date] = None,
    today: Optional[date] = None
) -> Tuple[date, date]:
    """
    Rango [inicio, fin] (ambos inclusive) de un periodo de reporte.

    - hoy: solo hoy
    - semanal: los últimos 7 días incluyendo hoy
    - mensual: desde el primer día del mes
    - anual: desde el 1 de enero
    - personalizado: fecha_inicio y fecha_fin obligatorias
    """
    today = today or date.today()
    if period == ReportPeriod.TODAY:
        return today, today
    if period == ReportPeriod.WEEKLY:
        return today - timedelta(days=6), today
    if period == ReportPeriod.MONTHLY:
        return today.replace(day=1), today
    if period == ReportPeriod.YEARLY:
        return today.replace(month=1, day=1), today

    if start is None or end is None:
        raise ValidationError("Para el periodo personalizado debes indicar fecha_inicio y fecha_fin.")
    if end < start:
        raise ValidationError("La fecha final no puede ser anterior a la fecha inicial.")
    return start, end


def _bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


def _money(value) -> float:
    return float(value or 0)


class ReportsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ReportsRepository(db)

    # ===== REPORTE DE VENTAS =====

    async def sales_report(
        self,
        period: ReportPeriod,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> Dict[str, Any]:
        start, end = resolve_period(period, start, end)
        sales = self.repository.get_sales(*_bounds(start, end))
        logger.info(f"Reporte de ventas {period.value}: {start} a {end} ({len(sales)} ventas)")

        total = sum((s.total for s in sales), Decimal("0"))
        cash = [s for s in sales if not s.is_credit]
        credit = [s for s in sales if s.is_credit]

        sellers: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"ventas": 0, "total": Decimal("0")})
        for sale in sales:
            name = sale.seller.full_name if sale.seller else f"Usuario #{sale.user_id}"
            sellers[name]["ventas"] += 1
            sellers[name]["total"] += sale.total

        return {
            "ok": True,
            "periodo": self._period_info(period, start, end),
            "resumen": {
                "total_ventas": _money(total),
                "cantidad_ventas": len(sales),
                "venta_promedio": _money(total / len(sales)) if sales else 0.0,
                "ventas_contado": len(cash),
                "ventas_fiadas": len(credit),
                "total_contado": _money(sum((s.total for s in cash), Decimal("0"))),
                "total_fiado": _money(sum((s.total for s in credit), Decimal("0")))
            },
            "por_dia": self._by_day(sales, lambda s: s.sale_date),
            "productos_mas_vendidos": self._top_products([i for s in sales for i in s.items]),
            "vendedores": sorted(
                [{"nombre": n, "ventas": v["ventas"], "total": _money(v["total"])} for n, v in sellers.items()],
                key=lambda x: x["total"],
                reverse=True
            )
        }

    # ===== REPORTE DE COMPRAS =====

    async def purchases_report(
        self,
        period: ReportPeriod,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> Dict[str, Any]:
        start, end = resolve_period(period, start, end)
        purchases = self.repository.get_purchases(*_bounds(start, end))
        logger.info(f"Reporte de compras {period.value}: {start} a {end} ({len(purchases)} compras)")

        total = sum((p.total for p in purchases), Decimal("0"))
        users: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"compras": 0, "total": Decimal("0")})
        for purchase in purchases:
            name = purchase.user.full_name if purchase.user else f"Usuario #{purchase.user_id}"
            users[name]["compras"] += 1
            users[name]["total"] += purchase.total

        return {
            "ok": True,
            "periodo": self._period_info(period, start, end),
            "resumen": {
                "total_compras": _money(total),
                "cantidad_compras": len(purchases),
                "compra_promedio": _money(total / len(purchases)) if purchases else 0.0
            },
            "por_dia": self._by_day(purchases, lambda p: p.purchase_date),
            "productos_mas_comprados": self._top_products([i for p in purchases for i in p.items]),
            "usuarios": sorted(
                [{"nombre": n, "compras": v["compras"], "total": _money(v["total"])} for n, v in users.items()],
                key=lambda x: x["total"],
                reverse=True
            )
        }

    # ===== DASHBOARD =====

    async def dashboard(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        today_bounds = _bounds(today, today)
        month_bounds = _bounds(today.replace(day=1), today)

        sales_today = self.repository.sales_totals(*today_bounds)
        purchases_today = self.repository.purchases_totals(*today_bounds)
        sales_month = self.repository.sales_totals(*month_bounds)
        purchases_month = self.repository.purchases_totals(*month_bounds)
        pending_count, receivable = self.repository.receivables()

        month_items = [i for s in self.repository.get_sales(*month_bounds) for i in s.items]

        return {
            "ok": True,
            "fecha_generacion": datetime.now().isoformat(),
            "resumen_hoy": {
                "ventas": {"cantidad": sales_today[0], "total": _money(sales_today[1])},
                "compras": {"cantidad": purchases_today[0], "total": _money(purchases_today[1])}
            },
            "resumen_mes": {
                "ventas": {"cantidad": sales_month[0], "total": _money(sales_month[1])},
                "compras": {"cantidad": purchases_month[0], "total": _money(purchases_month[1])},
                "ganancia_neta": _money(sales_month[1] - purchases_month[1])
            },
            "inventario": self._inventory_summary(),
            "cartera": {
                "ventas_pendientes": pending_count,
                "total_por_cobrar": _money(receivable)
            },
            "top_5_productos": [
                {"nombre": p["nombre"], "unidades": p["unidades"], "total": p["total"]}
                for p in self._top_products(month_items, limit=5)
            ],
            "producto_mas_rentable": self._most_profitable(month_items)
        }

    # ===== HELPERS =====

    @staticmethod
    def _period_info(period: ReportPeriod, start: date, end: date) -> Dict[str, Any]:
        return {
            "tipo": period.value,
            "fecha_inicio": start.isoformat(),
            "fecha_fin": end.isoformat(),
            "dias": (end - start).days + 1
        }

    @staticmethod
    def _by_day(records, get_date) -> List[Dict[str, Any]]:
        days: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"cantidad": 0, "total": Decimal("0")})
        for record in records:
            key = get_date(record).date().isoformat()
            days[key]["cantidad"] += 1
            days[key]["total"] += record.total
        return [
            {"fecha": day, "cantidad": v["cantidad"], "total": _money(v["total"])}
            for day, v in sorted(days.items())
        ]

    @staticmethod
    def _top_products(items, limit: int = 10) -> List[Dict[str, Any]]:
        products: Dict[int, Dict[str, Any]] = {}
        for item in items:
            entry = products.setdefault(item.product_id, {
                "id_producto": item.product_id,
                "nombre": item.product.name if item.product else f"Producto #{item.product_id}",
                "unidades": 0,
                "total": Decimal("0")
            })
            entry["unidades"] += item.quantity
            entry["total"] += item.subtotal

        ranked = sorted(products.values(), key=lambda p: (p["unidades"], p["total"]), reverse=True)[:limit]
        return [{**p, "total": _money(p["total"])} for p in ranked]

    @staticmethod
    def _most_profitable(items) -> Optional[Dict[str, Any]]:
        """Mayor ganancia (precio de venta - precio de compra actual) x unidades"""
        profit: Dict[int, Dict[str, Any]] = {}
        for item in items:
            if not item.product:
                continue
            entry = profit.setdefault(item.product_id, {"nombre": item.product.name, "ganancia": Decimal("0")})
            entry["ganancia"] += (item.unit_price - (item.product.purchase_price or 0)) * item.quantity

        if not profit:
            return None
        best = max(profit.values(), key=lambda p: p["ganancia"])
        return {"nombre": best["nombre"], "ganancia": _money(best["ganancia"])}

    def _inventory_summary(self) -> Dict[str, Any]:
        products = self.repository.get_active_products()
        over_max = [
            {
                "id_producto": p.id,
                "nombre": p.name,
                "stock_actual": p.stock,
                "stock_maximo": p.max_stock,
                "exceso": p.stock - p.max_stock
            }
            for p in products if p.max_stock is not None and p.stock > p.max_stock
        ]
        under_min = [
            {
                "id_producto": p.id,
                "nombre": p.name,
                "stock_actual": p.stock,
                "stock_minimo": p.min_stock,
                "faltante": p.min_stock - p.stock
            }
            for p in products if p.min_stock is not None and p.stock < p.min_stock
        ]
        return {
            "total_productos": len(products),
            "productos_sobre_maximo": len(over_max),
            "productos_bajo_minimo": len(under_min),
            "valor_total": _money(sum((Decimal(p.stock) * (p.purchase_price or 0) for p in products), Decimal("0"))),
            "productos_sobre_maximo_lista": over_max,
            "productos_bajo_minimo_lista": under_min
        }
