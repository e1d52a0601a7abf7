import pytest

pytest.importorskip("litestar")

from litestar import Litestar, get
from litestar.testing import TestClient

from policyx import Authorizer, Policy, Unauthorized
from policyx.adapters.litestar import make_unauthorized_handler, unauthorized_handler


class Invoice:
    def __init__(self, paid):
        self.paid = paid


class InvoicePolicy(Policy):
    allow_users_to = ("show",)

    def can_pay(self):
        return not self.invoice.paid


authz = Authorizer()
authz.registry.register(InvoicePolicy)


@get("/invoices/paid/pay")
async def pay_paid() -> dict:
    authz.authorize("ann", "pay", Invoice(paid=True))
    return {"paid": True}


@get("/invoices/open/pay")
async def pay_open() -> dict:
    authz.authorize("ann", "pay", Invoice(paid=False))
    return {"paid": True}


@get("/invoices/guest")
async def show_as_guest() -> dict:
    authz.authorize(None, "show", Invoice(paid=False))
    return {"shown": True}


def _client(handler):
    app = Litestar(
        route_handlers=[pay_paid, pay_open, show_as_guest],
        exception_handlers={Unauthorized: handler},
    )
    return TestClient(app=app)


def test_allowed_request_passes():
    with _client(unauthorized_handler) as client:
        r = client.get("/invoices/open/pay")
        assert r.status_code == 200
        assert r.json() == {"paid": True}


def test_denied_request_maps_to_403():
    with _client(unauthorized_handler) as client:
        r = client.get("/invoices/paid/pay")
        assert r.status_code == 403
        assert r.json() == {"detail": "Forbidden"}


def test_guest_denied_with_headers():
    with _client(make_unauthorized_handler(add_headers=True)) as client:
        r = client.get("/invoices/guest")
        assert r.status_code == 403
        assert r.headers["x-policyx-action"] == "show"
        assert r.headers["x-policyx-subject"] == "Invoice"
