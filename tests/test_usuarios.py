"""
Tests para registro, autenticación y administración de usuarios
"""
from fastapi.testclient import TestClient

from tests.utils import API, TestUtils


class TestRegistroYLogin:

    def test_registro(self, client: TestClient, db_session):
        response = client.post(
            f"{API}/usuarios/",
            json={"nombre_completo": "Ana Pérez", "email": "Ana@Example.com", "contrasena": "secreto123"},
        )

        TestUtils.assert_response_success(response, 201)
        data = response.json()
        assert data["email"] == "ana@example.com"
        assert data["rol"] == "USUARIO"
        assert "password_hash" not in data
        assert "contrasena" not in data

    def test_registro_incompleto(self, client: TestClient, db_session):
        response = client.post(f"{API}/usuarios/", json={"email": "ana@example.com"})

        error = TestUtils.assert_response_error(response, 400)
        assert error["message"] == "Nombre completo, email y contraseña son obligatorios"

    def test_registro_email_duplicado(self, client: TestClient, regular_user):
        response = client.post(
            f"{API}/usuarios/",
            json={"nombre_completo": "Otro", "email": "USUARIO@example.com", "contrasena": "x"},
        )

        error = TestUtils.assert_response_error(response, 400)
        assert error["message"] == "Email ya registrado"

    def test_registro_rol_invalido(self, client: TestClient, db_session):
        response = client.post(
            f"{API}/usuarios/",
            json={"nombre_completo": "Ana", "email": "ana@example.com", "contrasena": "x", "rol": "ROOT"},
        )

        TestUtils.assert_response_error(response, 400)

    def test_login(self, client: TestClient, regular_user):
        response = client.post(
            f"{API}/usuarios/login",
            json={"email": "usuario@example.com", "contrasena": "secreto123"},
        )

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["usuario"]["id_usuario"] == regular_user.id

        perfil = client.get(f"{API}/usuarios/perfil", headers={"Authorization": f"Bearer {data['token']}"})
        TestUtils.assert_response_success(perfil)
        assert perfil.json()["email"] == "usuario@example.com"

    def test_login_credenciales_invalidas(self, client: TestClient, regular_user):
        response = client.post(
            f"{API}/usuarios/login",
            json={"email": "usuario@example.com", "contrasena": "incorrecta"},
        )

        error = TestUtils.assert_response_error(response, 401)
        assert error["message"] == "Credenciales inválidas"

    def test_login_sin_datos(self, client: TestClient, db_session):
        TestUtils.assert_response_error(client.post(f"{API}/usuarios/login", json={}), 400)


class TestAutorizacion:
    """Token ausente o inválido produce 401; rol insuficiente produce 403"""

    def test_perfil_sin_token(self, client: TestClient, db_session):
        TestUtils.assert_response_error(client.get(f"{API}/usuarios/perfil"), 401)

    def test_token_invalido(self, client: TestClient, db_session):
        response = client.get(f"{API}/usuarios/perfil", headers={"Authorization": "Bearer no-es-un-jwt"})

        TestUtils.assert_response_error(response, 401)

    def test_listar_requiere_admin(self, client: TestClient, user_headers, moderator_headers):
        TestUtils.assert_response_error(client.get(f"{API}/usuarios/", headers=user_headers), 403)
        TestUtils.assert_response_error(client.get(f"{API}/usuarios/", headers=moderator_headers), 403)


class TestAdministracionUsuarios:

    def test_listar_usuarios(self, client: TestClient, admin_headers, regular_user):
        response = client.get(f"{API}/usuarios/", headers=admin_headers)

        TestUtils.assert_response_success(response)
        assert {u["email"] for u in response.json()} == {"admin@example.com", "usuario@example.com"}

    def test_listar_por_rol(self, client: TestClient, admin_headers, regular_user, moderator_user):
        response = client.get(f"{API}/usuarios/rol/moderador", headers=admin_headers)

        TestUtils.assert_response_success(response)
        assert [u["id_usuario"] for u in response.json()] == [moderator_user.id]

    def test_obtener_usuario_inexistente(self, client: TestClient, admin_headers):
        TestUtils.assert_response_error(client.get(f"{API}/usuarios/9999", headers=admin_headers), 404)

    def test_actualizar_usuario(self, client: TestClient, admin_headers, regular_user):
        response = client.put(
            f"{API}/usuarios/{regular_user.id}",
            json={"nombre_completo": "Nombre Nuevo", "email": ""},
            headers=admin_headers,
        )

        TestUtils.assert_response_success(response)
        assert response.json()["nombre_completo"] == "Nombre Nuevo"
        assert response.json()["email"] == "usuario@example.com"

    def test_cambiar_rol(self, client: TestClient, admin_headers, regular_user):
        response = client.patch(
            f"{API}/usuarios/{regular_user.id}/rol",
            json={"rol": "MODERADOR"},
            headers=admin_headers,
        )

        TestUtils.assert_response_success(response)
        assert response.json()["usuario"]["rol"] == "MODERADOR"

    def test_cambiar_rol_invalido(self, client: TestClient, admin_headers, regular_user):
        response = client.patch(
            f"{API}/usuarios/{regular_user.id}/rol",
            json={"rol": "SUPERUSUARIO"},
            headers=admin_headers,
        )

        error = TestUtils.assert_response_error(response, 400)
        assert error["message"] == "Rol no válido. Debe ser USUARIO, ADMINISTRADOR o MODERADOR"

    def test_eliminar_usuario_con_reportes(
        self, client: TestClient, admin_headers, user_headers, regular_user, sample_offers
    ):
        client.post(
            f"{API}/ofertas/{sample_offers[0].id}/reportar",
            json={"motivo": "Precio incorrecto"},
            headers=user_headers,
        )

        response = client.delete(f"{API}/usuarios/{regular_user.id}", headers=admin_headers)

        error = TestUtils.assert_response_error(response, 400)
        assert error["details"] == {"reportes": 1}

    def test_eliminar_usuario_con_favoritos(
        self, client: TestClient, admin_headers, user_headers, regular_user, sample_offers
    ):
        """Los favoritos del usuario se eliminan junto con él"""
        client.post(f"{API}/ofertas/{sample_offers[0].id}/favorito", headers=user_headers)

        response = client.delete(f"{API}/usuarios/{regular_user.id}", headers=admin_headers)

        TestUtils.assert_response_success(response)
        oferta = client.get(f"{API}/ofertas/{sample_offers[0].id}").json()
        assert oferta["total_favoritos"] == 0
