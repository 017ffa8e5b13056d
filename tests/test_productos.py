"""
Tests para endpoints de productos
"""
from fastapi.testclient import TestClient

from tests.utils import API, TestUtils, make_offer


class TestListarProductos:
    """Listado de productos con mejor precio"""

    def test_orden_por_nombre_por_defecto(
        self, client: TestClient, sample_offers, sample_product_alt, product_without_offers
    ):
        response = client.get(f"{API}/productos/")

        TestUtils.assert_response_success(response)
        data = response.json()
        assert [p["nombre_producto"] for p in data["productos"]] == [
            "Leche Entera 1L",
            "Queso Gauda",
            "Yogurt Natural",
        ]
        assert data["pagination"]["total"] == 3

    def test_mejor_precio_ignora_ofertas_invalidas(self, client: TestClient, sample_offers, product_without_offers):
        """La mejor oferta es B a 40 y no la oferta inválida de C a 30"""
        response = client.get(f"{API}/productos/")
        productos = {p["nombre_producto"]: p for p in response.json()["productos"]}

        leche = productos["Leche Entera 1L"]
        assert leche["mejor_precio"]["precio"] == 40.0
        assert leche["mejor_precio"]["supermercado"]["nombre_supermercado"] == "Supermercado B"
        assert leche["mejor_precio"]["descuento"] == 20.0
        assert leche["tiene_ofertas"] is True
        assert leche["total_ofertas"] == 2

        queso = productos["Queso Gauda"]
        assert queso["mejor_precio"] is None
        assert queso["tiene_ofertas"] is False
        assert queso["total_ofertas"] == 0

    def test_orden_por_precio_deja_sin_ofertas_al_final(
        self,
        client: TestClient,
        db_session,
        sample_offers,
        sample_product_alt,
        product_without_offers,
        sample_supermarket,
    ):
        make_offer(db_session, sample_product_alt, sample_supermarket, 45)

        def names(orden):
            response = client.get(f"{API}/productos/?ordenar={orden}")
            return [p["nombre_producto"] for p in response.json()["productos"]]

        assert names("precio_asc") == ["Leche Entera 1L", "Yogurt Natural", "Queso Gauda"]
        assert names("precio_desc") == ["Yogurt Natural", "Leche Entera 1L", "Queso Gauda"]

    def test_orden_por_precio_antes_de_paginar(
        self, client: TestClient, db_session, sample_offers, sample_product_alt, sample_supermarket
    ):
        make_offer(db_session, sample_product_alt, sample_supermarket, 45)

        response = client.get(f"{API}/productos/?ordenar=precio_desc&limit=1&page=1")

        data = response.json()
        assert [p["nombre_producto"] for p in data["productos"]] == ["Yogurt Natural"]
        assert data["pagination"]["totalPages"] == 2

    def test_filtros_nombre_marca_categoria(
        self, client: TestClient, sample_product, sample_product_alt, sample_category
    ):
        por_nombre = client.get(f"{API}/productos/?nombre=leche").json()
        por_marca = client.get(f"{API}/productos/?marca=SOPROLE").json()
        por_categoria = client.get(f"{API}/productos/?categoria={sample_category.id}").json()
        categoria_invalida = client.get(f"{API}/productos/?categoria=abc").json()

        assert [p["nombre_producto"] for p in por_nombre["productos"]] == ["Leche Entera 1L"]
        assert [p["nombre_producto"] for p in por_marca["productos"]] == ["Yogurt Natural"]
        assert por_categoria["pagination"]["total"] == 2
        assert categoria_invalida["pagination"]["total"] == 2


class TestBuscarProductos:

    def test_busqueda_por_descripcion(self, client: TestClient, sample_product, sample_product_alt):
        response = client.get(f"{API}/productos/buscar", params={"termino": "azúcar"})

        TestUtils.assert_response_success(response)
        assert [p["nombre_producto"] for p in response.json()["productos"]] == ["Yogurt Natural"]

    def test_categoria_por_nombre(self, client: TestClient, sample_product, sample_product_alt):
        match = client.get(f"{API}/productos/buscar", params={"categoria": "lácteos"}).json()
        otra = client.get(f"{API}/productos/buscar", params={"categoria": "Bebidas"}).json()

        assert match["pagination"]["total"] == 2
        assert otra["productos"] == []

    def test_rango_de_precios_sobre_ofertas_validas(
        self, client: TestClient, db_session, sample_offers, sample_product_alt, sample_supermarket
    ):
        make_offer(db_session, sample_product_alt, sample_supermarket, 45)

        en_rango = client.get(f"{API}/productos/buscar?precio_min=41&precio_max=50").json()
        solo_invalidas = client.get(f"{API}/productos/buscar?precio_max=35").json()

        assert [p["nombre_producto"] for p in en_rango["productos"]] == ["Leche Entera 1L", "Yogurt Natural"]
        assert solo_invalidas["productos"] == []


class TestProductosPorCategoria:

    def test_incluye_categoria(self, client: TestClient, sample_product, sample_category):
        response = client.get(f"{API}/productos/categoria/{sample_category.id}")

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["categoria"]["nombre_categoria"] == "Lácteos"
        assert data["pagination"]["total"] == 1

    def test_categoria_inexistente(self, client: TestClient, db_session):
        response = client.get(f"{API}/productos/categoria/9999")

        TestUtils.assert_response_success(response)
        assert response.json()["productos"] == []
        assert response.json()["categoria"] is None


class TestObtenerProducto:

    def test_detalle_con_ofertas_validas(self, client: TestClient, sample_offers, sample_product):
        response = client.get(f"{API}/productos/{sample_product.id}")

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["categoria"]["nombre_categoria"] == "Lácteos"
        assert [o["precio_oferta"] for o in data["ofertas"]] == [40.0, 50.0]
        assert data["ofertas"][0]["supermercado"]["nombre_supermercado"] == "Supermercado B"

    def test_producto_no_encontrado(self, client: TestClient, db_session):
        error = TestUtils.assert_response_error(client.get(f"{API}/productos/9999"), 404)
        assert error["message"] == "Producto no encontrado"

    def test_ofertas_del_producto(self, client: TestClient, sample_offers, sample_product):
        response = client.get(f"{API}/productos/{sample_product.id}/ofertas?validas=all")

        data = response.json()
        assert data["pagination"]["total"] == 3
        assert data["estadisticas"]["precio_promedio"] == 45.0

    def test_ofertas_de_producto_inexistente(self, client: TestClient, db_session):
        TestUtils.assert_response_error(client.get(f"{API}/productos/9999/ofertas"), 404)


class TestMutacionesProducto:

    def test_crear_producto(self, client: TestClient, admin_headers, sample_category):
        response = client.post(
            f"{API}/productos/",
            json={"nombre_producto": "  Mantequilla  ", "marca": "Colun", "id_categoria": sample_category.id},
            headers=admin_headers,
        )

        TestUtils.assert_response_success(response, 201)
        data = response.json()
        assert data["nombre_producto"] == "Mantequilla"
        assert data["categoria"]["id_categoria"] == sample_category.id

    def test_crear_sin_nombre(self, client: TestClient, admin_headers):
        response = client.post(f"{API}/productos/", json={"marca": "Colun"}, headers=admin_headers)

        error = TestUtils.assert_response_error(response, 400)
        assert error["message"] == "El nombre del producto es obligatorio"

    def test_crear_con_categoria_inexistente(self, client: TestClient, admin_headers):
        response = client.post(
            f"{API}/productos/",
            json={"nombre_producto": "Pan", "id_categoria": 9999},
            headers=admin_headers,
        )

        error = TestUtils.assert_response_error(response, 400)
        assert error["message"] == "La categoría especificada no existe"

    def test_crear_requiere_admin(self, client: TestClient, user_headers):
        response = client.post(f"{API}/productos/", json={"nombre_producto": "Pan"}, headers=user_headers)

        TestUtils.assert_response_error(response, 403)

    def test_actualizacion_parcial(self, client: TestClient, admin_headers, sample_product):
        response = client.put(
            f"{API}/productos/{sample_product.id}",
            json={"marca": "Loncoleche"},
            headers=admin_headers,
        )

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["marca"] == "Loncoleche"
        assert data["nombre_producto"] == "Leche Entera 1L"

    def test_eliminar_con_ofertas(self, client: TestClient, admin_headers, sample_offers, sample_product):
        response = client.delete(f"{API}/productos/{sample_product.id}", headers=admin_headers)

        error = TestUtils.assert_response_error(response, 400)
        assert error["details"] == {"ofertas": 3}

    def test_eliminar_sin_ofertas(self, client: TestClient, admin_headers, product_without_offers):
        response = client.delete(f"{API}/productos/{product_without_offers.id}", headers=admin_headers)

        TestUtils.assert_response_success(response)
        assert response.json()["mensaje"] == "Producto eliminado correctamente"


class TestBuscarProductosConAlias:

    def test_precio_min_max_con_alias(
        self, client: TestClient, db_session, sample_offers, sample_product_alt, sample_supermarket
    ):
        make_offer(db_session, sample_product_alt, sample_supermarket, 45)

        response = client.get(f"{API}/productos/buscar?precioMin=44&precioMax=46")

        TestUtils.assert_response_success(response)
        assert [p["nombre_producto"] for p in response.json()["productos"]] == ["Yogurt Natural"]

    def test_categoria_fuera_de_rango_en_listado(self, client: TestClient, sample_product):
        response = client.get(f"{API}/productos/?categoria=99999999999999999999")

        TestUtils.assert_response_success(response)
        assert response.json()["pagination"]["total"] == 1
