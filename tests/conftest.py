import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


PASSWORD = "secret123"


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def _freshcart_domain(request):
    """Initialize the domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from freshcart.domain import freshcart

    freshcart.init()
    return freshcart


@pytest.fixture(scope="session", autouse=True)
def setup_db(_freshcart_domain):
    from freshcart.utils.db import drop_db, setup_db

    setup_db(_freshcart_domain)

    yield

    drop_db(_freshcart_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_freshcart_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _freshcart_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def push():
    """Every test pushes into a fresh in-memory channel."""
    from freshcart.notifications.channel import reset_channels, set_push_channel
    from freshcart.notifications.channel.fake_push import FakePushAdapter

    adapter = FakePushAdapter()
    set_push_channel(adapter)
    yield adapter
    reset_channels()


@pytest.fixture()
def settings():
    from freshcart.shared.config import Settings

    return Settings(
        environment="test",
        jwt_secret="test-secret",
        log_level="WARNING",
        log_to_file=False,
        auto_create_schema=False,
    )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def password_hash():
    from freshcart.identity.security import hash_password

    return hash_password(PASSWORD)


@pytest.fixture()
def make_user(password_hash):
    from protean import current_domain

    from freshcart.fulfillment.driver.driver import VehicleType
    from freshcart.identity.user.user import Role, User

    counter = {"n": 0}

    def _make_user(role=Role.USER.value, username=None, email=None, **fields):
        counter["n"] += 1
        username = username or f"{role}{counter['n']}"
        user = User.register(
            email=email or f"{username}@example.com",
            username=username,
            password_hash=password_hash,
            role=role,
            **fields,
        )
        if role == Role.DRIVER.value:
            user.assign_vehicle(VehicleType.BIKE.value)
        current_domain.repository_for(User).add(user)
        return user

    return _make_user


@pytest.fixture()
def customer(make_user):
    return make_user(username="carol")


@pytest.fixture()
def admin(make_user):
    from freshcart.identity.user.user import Role

    return make_user(role=Role.ADMIN.value, username="alice")


@pytest.fixture()
def driver(make_user):
    from freshcart.identity.user.user import Role

    return make_user(role=Role.DRIVER.value, username="dave")


@pytest.fixture()
def customer_principal(customer):
    from freshcart.identity.user.principal import principal_for

    return principal_for(customer)


@pytest.fixture()
def admin_principal(admin):
    from freshcart.identity.user.principal import principal_for

    return principal_for(admin)


@pytest.fixture()
def driver_principal(driver):
    from freshcart.identity.user.principal import principal_for

    return principal_for(driver)


@pytest.fixture()
def make_product():
    from protean import current_domain

    from freshcart.catalogue.product.product import Product

    counter = {"n": 0}

    def _make_product(name=None, price=10.0, in_stock=10, category="Fruits", **fields):
        counter["n"] += 1
        product = Product.create(
            name=name or f"Product {counter['n']}",
            description="Fresh and tasty",
            price=price,
            category=category,
            in_stock=in_stock,
            **fields,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make_product


@pytest.fixture()
def fill_cart():
    from protean import current_domain

    from freshcart.ordering.cart.management import AddToCart, get_my_cart

    def _fill_cart(user, *lines):
        """Add ``(product, quantity)`` pairs to ``user``'s cart."""
        for product, quantity in lines:
            current_domain.process(
                AddToCart(user_id=str(user.id), product_id=str(product.id), quantity=quantity),
                asynchronous=False,
            )
        return get_my_cart(str(user.id))

    return _fill_cart


@pytest.fixture()
def make_order(fill_cart):
    from protean import current_domain

    from freshcart.identity.user.principal import acting_as, principal_for
    from freshcart.ordering.order.checkout import PlaceOrder
    from freshcart.ordering.order.order import Order

    def _make_order(user, *lines, shipping_fee=0.0):
        fill_cart(user, *lines)
        command = PlaceOrder(**acting_as(principal_for(user)), user_id=str(user.id), shipping_fee=shipping_fee)
        order_id = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Order).get(order_id)

    return _make_order


@pytest.fixture()
def reload():
    """Fetch the committed state of an aggregate."""
    from protean import current_domain

    def _reload(obj):
        return current_domain.repository_for(type(obj)).get(obj.id)

    return _reload


@pytest.fixture()
def stock_of(reload):
    def _stock_of(product):
        return reload(product).in_stock

    return _stock_of


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def app(settings):
    from freshcart.web import create_app

    return create_app(settings)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client


@pytest.fixture()
def auth_headers(settings):
    from freshcart.identity.security import create_access_token

    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user, settings)}"}

    return _auth_headers
