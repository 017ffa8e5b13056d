"""
Carga datos de ejemplo: categorías, supermercados, productos, ofertas y un
usuario administrador.

Se puede ejecutar varias veces; los registros existentes se reutilizan por
nombre (o email) y solo se insertan los que faltan.
"""
import os
import sys
from decimal import Decimal

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import SessionLocal, create_database
from app.core.security import get_password_hash
from app.models import Category, Offer, Product, Supermarket, User, UserRole

CATEGORIAS = {
    "Lácteos": "Leches, yogures y quesos",
    "Despensa": "Arroz, fideos, aceites y conservas",
    "Bebidas": "Jugos, aguas y bebidas",
}

SUPERMERCADOS = {
    "Jumbo": "https://www.jumbo.cl",
    "Lider": "https://www.lider.cl",
    "Unimarc": "https://www.unimarc.cl",
}

# nombre, marca, categoría
PRODUCTOS = [
    ("Leche Entera 1L", "Colun", "Lácteos"),
    ("Yogurt Natural 1kg", "Soprole", "Lácteos"),
    ("Arroz Grado 1 1kg", "Tucapel", "Despensa"),
    ("Aceite Maravilla 1L", "Belmont", "Despensa"),
    ("Jugo de Naranja 1.5L", "Andina", "Bebidas"),
]

# producto, supermercado, precio oferta, precio original
OFERTAS = [
    ("Leche Entera 1L", "Jumbo", "990", "1190"),
    ("Leche Entera 1L", "Lider", "950", "1150"),
    ("Leche Entera 1L", "Unimarc", "1050", None),
    ("Yogurt Natural 1kg", "Lider", "2290", "2690"),
    ("Arroz Grado 1 1kg", "Jumbo", "1390", "1590"),
    ("Arroz Grado 1 1kg", "Unimarc", "1290", "1590"),
    ("Aceite Maravilla 1L", "Lider", "2990", "3490"),
]

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@ofertas.cl")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")


def get_or_create(db, model, lookup, **values):
    """Registro existente que cumpla `lookup` o uno nuevo con `values`"""
    existing = db.execute(select(model).filter_by(**lookup)).scalars().first()
    if existing is not None:
        return existing, False
    obj = model(**lookup, **values)
    db.add(obj)
    db.flush()
    return obj, True


def run():
    create_database()
    db = SessionLocal()
    try:
        print("  Creando categorías...")
        categorias = {}
        for nombre, descripcion in CATEGORIAS.items():
            categorias[nombre], created = get_or_create(db, Category, {"name": nombre}, description=descripcion)
            print(f"  {'✓' if created else '⚠'} {nombre}")

        print("  Creando supermercados...")
        supermercados = {}
        for nombre, url in SUPERMERCADOS.items():
            supermercados[nombre], created = get_or_create(db, Supermarket, {"name": nombre}, website_url=url)
            print(f"  {'✓' if created else '⚠'} {nombre}")

        print("  Creando productos...")
        productos = {}
        for nombre, marca, categoria in PRODUCTOS:
            productos[nombre], created = get_or_create(
                db, Product, {"name": nombre}, brand=marca, category_id=categorias[categoria].id
            )
            print(f"  {'✓' if created else '⚠'} {nombre}")

        print("  Creando ofertas...")
        for producto, supermercado, precio, original in OFERTAS:
            _, created = get_or_create(
                db,
                Offer,
                {"product_id": productos[producto].id, "supermarket_id": supermercados[supermercado].id},
                offer_price=Decimal(precio),
                original_price=Decimal(original) if original else None,
                source_url=f"{SUPERMERCADOS[supermercado]}/ofertas",
            )
            print(f"  {'✓' if created else '⚠'} {producto} en {supermercado}")

        print("  Creando administrador...")
        _, created = get_or_create(
            db,
            User,
            {"email": ADMIN_EMAIL},
            full_name="Administrador",
            password_hash=get_password_hash(ADMIN_PASSWORD),
            role=UserRole.ADMINISTRADOR,
        )
        print(f"  {'✓' if created else '⚠'} {ADMIN_EMAIL}")

        db.commit()
        print("\n✅ Datos insertados correctamente")

    except SQLAlchemyError as e:
        db.rollback()
        print(f"❌ Error insertando datos: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    run()
