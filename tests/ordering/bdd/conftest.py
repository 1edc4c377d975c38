"""Shared BDD fixtures and step definitions for the Ordering context."""

import pytest
from freshcart.identity.user.principal import acting_as
from freshcart.ordering.order.order import Order
from freshcart.shared import errors
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, by name."""
    return {}


@pytest.fixture()
def run(error):
    """Process a command as a principal, capturing the failure instead of raising it."""

    def _run(principal, command_cls, **fields):
        try:
            return current_domain.process(command_cls(**acting_as(principal), **fields), asynchronous=False)
        except errors.AppError as exc:
            error["exc"] = exc
            return None

    return _run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=price, in_stock=stock)


@given(parsers.cfparse('the customer has {quantity:d} "{name}" in the cart'))
def customer_cart_line(fill_cart, customer, products, quantity, name):
    fill_cart(customer, (products[name], quantity))


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the action fails with "{error_name}"'))
def action_fails_with(error, error_name):
    assert error["exc"] is not None, f"Expected {error_name} but nothing was raised"
    assert type(error["exc"]).__name__ == error_name, f"Got {type(error['exc']).__name__}: {error['exc']}"


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert current_domain.repository_for(Order).get(order.id).status == status


@then(parsers.cfparse('the payment status is "{payment_status}"'))
def payment_status_is(order, payment_status):
    assert current_domain.repository_for(Order).get(order.id).payment_status == payment_status


@then(parsers.cfparse('the stock of "{name}" is {stock:d}'))
def stock_is(stock_of, products, name, stock):
    assert stock_of(products[name]) == stock
