"""
Utilidad de Análisis de Precios
===============================

Cálculos derivados sobre colecciones de ofertas ya obtenidas de la base de
datos: porcentaje de descuento, mejor oferta por producto y estadísticas de
precio de un conjunto de resultados.

Todas las funciones son puras y nunca lanzan excepciones por datos
degenerados: divisiones por cero y conjuntos vacíos producen `None` o un
diccionario vacío.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional
import statistics


def to_float(value: Any) -> Optional[float]:
    """Convertir Decimal/numérico a float preservando None"""
    if value is None:
        return None
    return float(value)


def round_half_up(value: float, places: int = 0) -> float:
    """Redondeo aritmético (0.5 se aleja de cero), independiente del redondeo bancario de `round`"""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def compute_discount(offer_price: Any, original_price: Any) -> Optional[float]:
    """
    Porcentaje de descuento `(1 - P/O) * 100` con un decimal.

    Sin precio original, o con precio original cero, el descuento no está
    definido. El valor no se acota: un precio de oferta mayor al original
    produce un descuento negativo.
    """
    if original_price is None or offer_price is None:
        return None
    original = float(original_price)
    if original == 0:
        return None
    return round_half_up((1 - float(offer_price) / original) * 100, 1)


def offer_discount(offer) -> Optional[float]:
    return compute_discount(offer.offer_price, offer.original_price)


def select_best_offers(offers: Iterable[Any]) -> Dict[int, Any]:
    """
    Mejor oferta (menor precio) por producto entre las ofertas válidas.

    Ante empate se conserva la primera oferta encontrada en el orden de
    entrada. Productos sin ofertas válidas no aparecen en el resultado.
    """
    best: Dict[int, Any] = {}
    for offer in offers:
        if not offer.valid:
            continue
        current = best.get(offer.product_id)
        if current is None or offer.offer_price < current.offer_price:
            best[offer.product_id] = offer
    return best


def count_valid_offers(offers: Iterable[Any]) -> Dict[int, int]:
    """Cantidad de ofertas válidas por producto"""
    counts: Dict[int, int] = {}
    for offer in offers:
        if offer.valid:
            counts[offer.product_id] = counts.get(offer.product_id, 0) + 1
    return counts


def best_price_summary(offer) -> Optional[Dict[str, Any]]:
    """Resumen de la mejor oferta de un producto, `None` si no tiene"""
    if offer is None:
        return None
    supermarket = offer.supermarket
    return {
        "precio": to_float(offer.offer_price),
        "precio_original": to_float(offer.original_price),
        "descuento": offer_discount(offer),
        "supermercado": {
            "id_supermercado": supermarket.id,
            "nombre_supermercado": supermarket.name,
        } if supermarket is not None else None,
        "id_oferta": offer.id,
        "fecha_actualizacion": offer.extracted_at,
    }


def compute_price_statistics(prices: Iterable[Any]) -> Dict[str, Any]:
    """
    Estadísticas de un conjunto de precios de ofertas válidas.

    Devuelve mínimo, máximo, promedio (2 decimales) y la diferencia
    porcentual entre máximo y mínimo (entera, `None` si el mínimo es 0).
    Un conjunto vacío produce un diccionario vacío.
    """
    values: List[float] = [float(p) for p in prices if p is not None]
    if not values:
        return {}

    min_price = min(values)
    max_price = max(values)
    avg_price = statistics.fmean(values)

    return {
        "precio_minimo": min_price,
        "precio_maximo": max_price,
        "precio_promedio": round_half_up(avg_price, 2),
        "diferencia_porcentaje": (
            int(round_half_up((max_price - min_price) / min_price * 100))
            if min_price > 0 else None
        ),
        "total_ofertas_validas": len(values),
    }


def compute_share_percentages(counts: Mapping[Hashable, int], total: int) -> Dict[Hashable, float]:
    """Participación porcentual (2 decimales) de cada clave sobre el total"""
    if total <= 0:
        return {key: 0.0 for key in counts}
    return {key: round_half_up(count / total * 100, 2) for key, count in counts.items()}
