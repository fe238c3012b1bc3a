"""Tests for the client directory service and its HTTP routes."""
import pytest

from credito.exceptions import ClienteNotFoundError, DuplicateCpfError
from credito.schemas import ClienteSaveRequest
from credito.services.clientes import ClienteService


def _request(cpf="12345678901", nome="Ana", idade=40) -> ClienteSaveRequest:
    return ClienteSaveRequest(cpf=cpf, nome=nome, idade=idade)


class TestClienteService:
    """Directory operations against the database."""

    def test_create_assigns_id_and_round_trips(self, db):
        service = ClienteService(db)
        cliente = service.create(_request())

        assert cliente.id is not None
        stored = service.get_by_id(cliente.id)
        assert (stored.cpf, stored.nome, stored.idade) == ("12345678901", "Ana", 40)

    def test_create_duplicate_cpf_rejected(self, db):
        service = ClienteService(db)
        service.create(_request())

        with pytest.raises(DuplicateCpfError):
            service.create(_request(nome="Outra"))

        assert len(service.list_all()) == 1

    def test_get_by_cpf_missing_returns_none(self, db):
        service = ClienteService(db)
        for cpf in ("00000000000", "99999999999", "123", ""):
            assert service.get_by_cpf(cpf) is None

    def test_get_by_id_missing_returns_none(self, db):
        assert ClienteService(db).get_by_id(999) is None

    def test_update_overwrites_fields(self, db):
        service = ClienteService(db)
        cliente = service.create(_request())

        updated = service.update(cliente.id, _request(cpf="10987654321", nome="Ana Maria", idade=41))

        assert updated.id == cliente.id
        assert (updated.cpf, updated.nome, updated.idade) == ("10987654321", "Ana Maria", 41)
        assert service.get_by_cpf("12345678901") is None

    def test_update_keeping_same_cpf(self, db):
        service = ClienteService(db)
        cliente = service.create(_request())

        updated = service.update(cliente.id, _request(nome="Ana Maria"))
        assert updated.nome == "Ana Maria"

    def test_update_missing_raises(self, db):
        with pytest.raises(ClienteNotFoundError):
            ClienteService(db).update(42, _request())

    def test_update_onto_another_clients_cpf_rejected(self, db):
        service = ClienteService(db)
        service.create(_request(cpf="11111111111"))
        other = service.create(_request(cpf="22222222222"))

        with pytest.raises(DuplicateCpfError):
            service.update(other.id, _request(cpf="11111111111"))

    def test_delete_removes_record(self, db):
        service = ClienteService(db)
        cliente = service.create(_request())

        service.delete(cliente.id)

        assert service.get_by_id(cliente.id) is None

    def test_delete_missing_raises(self, db):
        with pytest.raises(ClienteNotFoundError):
            ClienteService(db).delete(42)

    def test_list_all(self, db):
        service = ClienteService(db)
        service.create(_request(cpf="11111111111", nome="Ana"))
        service.create(_request(cpf="22222222222", nome="Bruno"))

        assert {c.nome for c in service.list_all()} == {"Ana", "Bruno"}


class TestClientesEndpoints:
    """HTTP surface of the client directory."""

    def test_create_returns_201_with_location(self, clientes_client):
        response = clientes_client.post(
            "/clientes", json={"cpf": "12345678901", "nome": "Ana", "idade": 40}
        )

        assert response.status_code == 201
        assert response.json() == {"message": "Cliente cadastrado com sucesso!"}
        assert response.headers["Location"].endswith("/clientes?cpf=12345678901")

    def test_create_duplicate_returns_409(self, clientes_client):
        body = {"cpf": "12345678901", "nome": "Ana", "idade": 40}
        clientes_client.post("/clientes", json=body)

        response = clientes_client.post("/clientes", json=body)

        assert response.status_code == 409
        assert response.json() == {"message": "CPF já cadastrado!"}

    def test_create_invalid_body(self, clientes_client):
        response = clientes_client.post("/clientes", json={"cpf": "12345678901"})
        assert response.status_code == 422

    def test_create_negative_age(self, clientes_client):
        response = clientes_client.post(
            "/clientes", json={"cpf": "12345678901", "nome": "Ana", "idade": -1}
        )
        assert response.status_code == 422

    def test_get_by_cpf(self, clientes_client):
        clientes_client.post("/clientes", json={"cpf": "12345678901", "nome": "Ana", "idade": 40})

        response = clientes_client.get("/clientes", params={"cpf": "12345678901"})

        assert response.status_code == 200
        data = response.json()
        assert data["cpf"] == "12345678901"
        assert data["nome"] == "Ana"
        assert data["idade"] == 40
        assert isinstance(data["id"], int)

    def test_get_by_cpf_not_found(self, clientes_client):
        response = clientes_client.get("/clientes", params={"cpf": "00000000000"})

        assert response.status_code == 404
        assert response.json() == {"message": "Cliente não encontrado!"}

    def test_list_empty_returns_200(self, clientes_client):
        response = clientes_client.get("/clientes")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_returns_all(self, clientes_client):
        clientes_client.post("/clientes", json={"cpf": "11111111111", "nome": "Ana", "idade": 40})
        clientes_client.post("/clientes", json={"cpf": "22222222222", "nome": "Bruno", "idade": 30})

        response = clientes_client.get("/clientes")

        assert response.status_code == 200
        assert {c["cpf"] for c in response.json()} == {"11111111111", "22222222222"}

    def test_get_by_id(self, clientes_client):
        clientes_client.post("/clientes", json={"cpf": "12345678901", "nome": "Ana", "idade": 40})
        cliente_id = clientes_client.get("/clientes", params={"cpf": "12345678901"}).json()["id"]

        response = clientes_client.get(f"/clientes/{cliente_id}")

        assert response.status_code == 200
        assert response.json()["nome"] == "Ana"

    def test_get_by_id_not_found(self, clientes_client):
        response = clientes_client.get("/clientes/999")
        assert response.status_code == 404

    def test_update(self, clientes_client):
        clientes_client.post("/clientes", json={"cpf": "12345678901", "nome": "Ana", "idade": 40})
        cliente_id = clientes_client.get("/clientes", params={"cpf": "12345678901"}).json()["id"]

        response = clientes_client.put(
            f"/clientes/{cliente_id}",
            json={"cpf": "12345678901", "nome": "Ana Maria", "idade": 41},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Cliente atualizado com sucesso!"}
        data = clientes_client.get(f"/clientes/{cliente_id}").json()
        assert data["nome"] == "Ana Maria"
        assert data["idade"] == 41

    def test_update_not_found(self, clientes_client):
        response = clientes_client.put(
            "/clientes/999", json={"cpf": "12345678901", "nome": "Ana", "idade": 40}
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Cliente não encontrado!"}

    def test_delete_returns_204(self, clientes_client):
        clientes_client.post("/clientes", json={"cpf": "12345678901", "nome": "Ana", "idade": 40})
        cliente_id = clientes_client.get("/clientes", params={"cpf": "12345678901"}).json()["id"]

        response = clientes_client.delete(f"/clientes/{cliente_id}")

        assert response.status_code == 204
        assert response.content == b""
        assert clientes_client.get(f"/clientes/{cliente_id}").status_code == 404

    def test_delete_not_found(self, clientes_client):
        response = clientes_client.delete("/clientes/999")
        assert response.status_code == 404

    def test_response_carries_request_id(self, clientes_client):
        response = clientes_client.get("/clientes", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
