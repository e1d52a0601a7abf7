from __future__ import annotations

import logging

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from policyx import Authorizer, Policy, PolicyRegistry, Unauthorized
from policyx.adapters.starlette import make_unauthorized_handler, require_permission
from policyx.metrics.prometheus import PrometheusMetrics

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


class Invoice:
    def __init__(self, invoice_id: int, paid: bool) -> None:
        self.id = invoice_id
        self.paid = paid


INVOICES = {1: Invoice(1, paid=True), 2: Invoice(2, paid=False)}


class InvoicePolicy(Policy):
    allow_users_to = ("show",)

    def can_pay(self) -> bool:
        return self.user is not None and not self.invoice.paid


registry = PolicyRegistry()
registry.register(InvoicePolicy)
authz = Authorizer(registry, metrics=PrometheusMetrics())


def current_user(request: Request) -> str | None:
    return request.headers.get("x-user")


def load_invoice(request: Request) -> Invoice:
    return INVOICES[int(request.path_params["invoice_id"])]


@require_permission(authz, "show", current_user, load_invoice)
async def show(request: Request) -> JSONResponse:
    inv = load_invoice(request)
    return JSONResponse({"id": inv.id, "paid": inv.paid})


@require_permission(authz, "pay", current_user, load_invoice)
async def pay(request: Request) -> JSONResponse:
    inv = load_invoice(request)
    inv.paid = True
    return JSONResponse({"id": inv.id, "paid": inv.paid})


app = Starlette(
    routes=[
        Route("/invoices/{invoice_id:int}", show, methods=["GET"]),
        Route("/invoices/{invoice_id:int}/pay", pay, methods=["POST"]),
    ],
    exception_handlers={Unauthorized: make_unauthorized_handler(add_headers=True)},
)

# Run: uvicorn examples.starlette_demo.app:app --reload
