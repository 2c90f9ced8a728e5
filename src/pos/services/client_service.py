from __future__ import annotations

from pos.domain.errors import ConflictError, NotFoundError, ValidationError
from pos.domain.models import Client
from pos.domain.validation import normalize_client_name, raise_if_errors, validate_client_name


class ClientService:
    def __init__(self, repo):
        self.repo = repo

    def add_client(self, name: str) -> Client:
        name = normalize_client_name(name)
        raise_if_errors(validate_client_name(name))
        if self.repo.get_client_by_name(name):
            raise ConflictError(f"Client with name: {name} already exists.", field="name", value=name)
        cid = self.repo.add_client(name)
        return self.get_client(cid)

    def update_client(self, client_id: int, name: str) -> Client:
        name = normalize_client_name(name)
        raise_if_errors(validate_client_name(name))
        existing = self.repo.get_client_by_name(name)
        if existing and existing.id != int(client_id):
            raise ConflictError(f"Client with name: {name} already exists.", field="name", value=name)
        if not self.repo.update_client_name(int(client_id), name):
            raise NotFoundError(f"Client with id: {client_id} not found", entity="client", entity_id=int(client_id))
        return self.get_client(client_id)

    def get_client(self, client_id: int) -> Client:
        c = self.repo.get_client_by_id(int(client_id))
        if not c:
            raise NotFoundError(f"Client with id: {client_id} not found", entity="client", entity_id=int(client_id))
        return c

    def get_client_by_name(self, name: str) -> Client:
        name = normalize_client_name(name)
        c = self.repo.get_client_by_name(name)
        if not c:
            raise NotFoundError(f"Client with name: {name} not found", entity="client")
        return c

    def list_clients(self, limit: int = 100, offset: int = 0) -> list[Client]:
        if limit <= 0 or offset < 0:
            raise ValidationError("Limit must be > 0 and offset >= 0.")
        return self.repo.list_clients(limit=limit, offset=offset)

    def search_clients(self, prefix: str, limit: int = 100) -> list[Client]:
        prefix = normalize_client_name(prefix)
        return self.repo.list_clients(name_prefix=prefix or None, limit=limit)
