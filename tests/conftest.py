import pytest
from typing import Callable, Dict, Generator
from fastapi.testclient import TestClient

from backend.app_setup.factory import create_app
from backend.auth.service import hash_password
from backend.config import Settings
from backend.orders.repository import InMemoryOrderRepository
from backend.payments.fake_gateway import FakeGateway
from backend.users.repository import InMemoryUserRepository
from backend.utils.security import issue_token


# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        jwt_secret="test-secret-key-with-at-least-32-bytes",
        environment="test",
        payment_gateway="fake",
        zarinpal_merchant_id="test-merchant",
        data_store="memory",
        bcrypt_rounds=4,
    )


@pytest.fixture()
def order_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture()
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def app(settings, order_repo, user_repo, gateway):
    """App construite avec des doublures explicites (stockage mémoire, passerelle simulée)."""
    application = create_app(settings)
    application.state.order_repository = order_repo
    application.state.user_repository = user_repo
    application.state.payment_gateway = gateway
    return application


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def create_user(user_repo, settings) -> Callable[..., Dict]:
    def _create(username: str = "alice", email: str = "alice@example.com", password: str = "secret123") -> Dict:
        return user_repo.create(username, email, hash_password(password, settings.bcrypt_rounds))
    return _create


@pytest.fixture()
def auth_headers(create_user, settings) -> Dict[str, str]:
    """En-têtes Bearer pour un utilisateur existant (alice)."""
    user = create_user()
    token = issue_token(user["id"], user["username"], settings)
    return {"Authorization": f"Bearer {token}"}


def _cart_payload(amount=None, **overrides) -> Dict:
    """Panier valide: 2 x 100000 + 1 x 25000, frais de port 50000 => 275000."""
    body = {
        "shippingInfo": {"fullName": "Alice", "address": "1 rue de Paris", "phone": "0600000000"},
        "products": [
            {"id": "p1", "name": "Produit 1", "price": 100000, "quantity": 2},
            {"id": 2, "name": "Produit 2", "price": 25000, "quantity": 1},
        ],
        "amount": 275000 if amount is None else amount,
    }
    body.update(overrides)
    return body


@pytest.fixture()
def cart_payload() -> Callable[..., Dict]:
    return _cart_payload
