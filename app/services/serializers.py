"""
Conversión de modelos a diccionarios de respuesta con nomenclatura en español
"""
from typing import Any, Dict, Optional

from app.models import Category, Offer, OfferReport, Product, Supermarket, User
from app.utils.price_analyzer import offer_discount, to_float


def category_to_dict(category: Optional[Category], total_products: Optional[int] = None) -> Optional[Dict[str, Any]]:
    if category is None:
        return None
    data = {
        "id_categoria": category.id,
        "nombre_categoria": category.name,
        "descripcion": category.description,
    }
    if total_products is not None:
        data["total_productos"] = total_products
    return data


def supermarket_to_dict(
    supermarket: Optional[Supermarket],
    total_offers: Optional[int] = None,
    valid_offers: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    if supermarket is None:
        return None
    data = {
        "id_supermercado": supermarket.id,
        "nombre_supermercado": supermarket.name,
        "direccion": supermarket.address,
        "url_sitio_web": supermarket.website_url,
    }
    if total_offers is not None:
        data["total_ofertas"] = total_offers
    if valid_offers is not None:
        data["ofertas_validas"] = valid_offers
    return data


def product_to_dict(product: Optional[Product], include_category: bool = True) -> Optional[Dict[str, Any]]:
    if product is None:
        return None
    data = {
        "id_producto": product.id,
        "nombre_producto": product.name,
        "marca": product.brand,
        "descripcion_producto": product.description,
        "imagen_url": product.image_url,
        "id_categoria": product.category_id,
    }
    if include_category:
        data["categoria"] = category_to_dict(product.category)
    return data


def offer_to_dict(
    offer: Offer,
    *,
    include_product: bool = False,
    include_supermarket: bool = False,
    favorites: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Oferta con su descuento calculado.

    Las relaciones solo se incluyen cuando se pidieron; deben venir
    precargadas para no disparar consultas por fila.
    """
    data = {
        "id_oferta": offer.id,
        "precio_oferta": to_float(offer.offer_price),
        "precio_original": to_float(offer.original_price),
        "descuento": offer_discount(offer),
        "fecha_inicio_oferta": offer.start_date,
        "fecha_fin_oferta": offer.end_date,
        "descripcion_oferta": offer.description,
        "url_oferta_original": offer.source_url,
        "fecha_extraccion": offer.extracted_at,
        "valida": offer.valid,
        "id_producto": offer.product_id,
        "id_supermercado": offer.supermarket_id,
    }
    if include_product:
        data["producto"] = product_to_dict(offer.product)
    if include_supermarket:
        data["supermercado"] = supermarket_to_dict(offer.supermarket)
    if favorites is not None:
        data["total_favoritos"] = favorites
    return data


def report_to_dict(report: OfferReport, include_offer: bool = False) -> Dict[str, Any]:
    data = {
        "id_reporte": report.id,
        "motivo": report.reason,
        "id_oferta": report.offer_id,
        "id_usuario_reporta": report.reporter_id,
        "fecha_reporte": report.created_at,
    }
    if include_offer and report.offer is not None:
        data["oferta"] = offer_to_dict(report.offer, include_product=True, include_supermarket=True)
    return data


def user_to_dict(user: User) -> Dict[str, Any]:
    """Usuario sin el hash de la contraseña"""
    return {
        "id_usuario": user.id,
        "nombre_completo": user.full_name,
        "email": user.email,
        "rol": user.role.value if hasattr(user.role, "value") else user.role,
        "fecha_registro": user.registered_at,
    }
