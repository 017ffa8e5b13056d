"""
Tests para endpoints de supermercados
"""
from fastapi.testclient import TestClient

from tests.utils import API, TestUtils


class TestSupermercados:
    """Tests de consulta de supermercados"""

    def test_listar_con_conteos(self, client: TestClient, sample_offers):
        response = client.get(f"{API}/supermercados/")

        TestUtils.assert_response_success(response)
        data = response.json()
        assert [s["nombre_supermercado"] for s in data] == ["Supermercado A", "Supermercado B", "Supermercado C"]
        market_c = data[2]
        assert market_c["total_ofertas"] == 1
        assert market_c["ofertas_validas"] == 0

    def test_buscar_por_nombre(self, client: TestClient, sample_supermarkets):
        response = client.get(f"{API}/supermercados/buscar?nombre=mercado b")

        TestUtils.assert_response_success(response)
        assert [s["nombre_supermercado"] for s in response.json()] == ["Supermercado B"]

    def test_buscar_sin_nombre(self, client: TestClient, db_session):
        error = TestUtils.assert_response_error(client.get(f"{API}/supermercados/buscar"), 400)
        assert error["message"] == "Se debe proporcionar un nombre para la búsqueda"

    def test_obtener_supermercado(self, client: TestClient, sample_offers, sample_supermarkets):
        response = client.get(f"{API}/supermercados/{sample_supermarkets[0].id}")

        TestUtils.assert_response_success(response)
        assert response.json()["ofertas_validas"] == 1

    def test_supermercado_no_encontrado(self, client: TestClient, db_session):
        TestUtils.assert_response_error(client.get(f"{API}/supermercados/9999"), 404)

    def test_ofertas_del_supermercado(self, client: TestClient, sample_offers, sample_supermarkets):
        response = client.get(f"{API}/supermercados/{sample_supermarkets[2].id}/ofertas?validas=all")

        data = response.json()
        assert data["pagination"]["total"] == 1
        assert data["ofertas"][0]["valida"] is False
        assert data["estadisticas"] == {}

    def test_ofertas_de_supermercado_inexistente(self, client: TestClient, db_session):
        TestUtils.assert_response_error(client.get(f"{API}/supermercados/9999/ofertas"), 404)


class TestEstadisticas:

    def test_participacion_sobre_ofertas_validas(self, client: TestClient, admin_headers, sample_offers):
        response = client.get(f"{API}/supermercados/estadisticas", headers=admin_headers)

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["total_ofertas"] == 2
        porcentajes = {s["nombre_supermercado"]: s["porcentaje"] for s in data["supermercados"]}
        assert porcentajes == {"Supermercado A": 50.0, "Supermercado B": 50.0, "Supermercado C": 0.0}

    def test_sin_ofertas(self, client: TestClient, admin_headers, sample_supermarkets):
        data = client.get(f"{API}/supermercados/estadisticas", headers=admin_headers).json()

        assert data["total_ofertas"] == 0
        assert all(s["porcentaje"] == 0.0 for s in data["supermercados"])

    def test_requiere_admin(self, client: TestClient, user_headers):
        TestUtils.assert_response_error(
            client.get(f"{API}/supermercados/estadisticas", headers=user_headers), 403
        )


class TestMutacionesSupermercado:

    def test_crear_supermercado(self, client: TestClient, admin_headers):
        response = client.post(
            f"{API}/supermercados/",
            json={"nombre_supermercado": "Lider", "url_sitio_web": "https://www.lider.cl"},
            headers=admin_headers,
        )

        TestUtils.assert_response_success(response, 201)
        assert response.json()["total_ofertas"] == 0

    def test_crear_duplicado(self, client: TestClient, admin_headers, sample_supermarkets):
        response = client.post(
            f"{API}/supermercados/",
            json={"nombre_supermercado": "Supermercado A"},
            headers=admin_headers,
        )

        TestUtils.assert_response_error(response, 400)

    def test_renombrar_con_nombre_de_otro(self, client: TestClient, admin_headers, sample_supermarkets):
        response = client.put(
            f"{API}/supermercados/{sample_supermarkets[0].id}",
            json={"nombre_supermercado": "Supermercado B"},
            headers=admin_headers,
        )

        error = TestUtils.assert_response_error(response, 400)
        assert error["message"] == "Ya existe otro supermercado con ese nombre"

    def test_eliminar_con_ofertas(self, client: TestClient, admin_headers, sample_offers, sample_supermarkets):
        response = client.delete(f"{API}/supermercados/{sample_supermarkets[0].id}", headers=admin_headers)

        error = TestUtils.assert_response_error(response, 400)
        assert error["details"] == {"ofertas": 1}

    def test_eliminar_sin_ofertas(self, client: TestClient, admin_headers, sample_supermarkets):
        response = client.delete(f"{API}/supermercados/{sample_supermarkets[1].id}", headers=admin_headers)

        TestUtils.assert_response_success(response)
        assert len(client.get(f"{API}/supermercados/").json()) == 2
