"""
Utilidades compartidas por los tests
"""
from decimal import Decimal

from app.core.security import create_access_token

API = "/api/v1"


def make_offer(db, product, supermarket, price, original=None, valid=True, description=None):
    """Crear una oferta persistida"""
    from app.models.offer import Offer

    offer = Offer(
        product_id=product.id,
        supermarket_id=supermarket.id,
        offer_price=Decimal(str(price)),
        original_price=Decimal(str(original)) if original is not None else None,
        description=description,
        source_url=f"https://example.com/ofertas/{product.id}/{supermarket.id}",
        valid=valid,
    )
    db.add(offer)
    db.commit()
    db.refresh(offer)
    return offer


def auth_headers_for(user):
    token = create_access_token(user.id, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


class TestUtils:
    """Utilidades para tests"""

    __test__ = False

    @staticmethod
    def assert_response_success(response, expected_status=200):
        """Verificar que la respuesta sea exitosa"""
        assert response.status_code == expected_status, response.text
        if response.headers.get("content-type", "").startswith("application/json"):
            data = response.json()
            if isinstance(data, dict) and "success" in data:
                assert data["success"] is True

    @staticmethod
    def assert_response_error(response, expected_status=400):
        """Verificar que la respuesta sea de error con el formato común"""
        assert response.status_code == expected_status, response.text
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == expected_status
        return data["error"]
