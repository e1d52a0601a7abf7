from __future__ import annotations

import logging
import logging.config

from litestar import Litestar, Request, get

from policyx import Authorizer, Policy, PolicyRegistry, Unauthorized
from policyx.adapters.litestar import unauthorized_handler

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}},
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "default"}},
    "loggers": {"policyx": {"level": "DEBUG"}},
    "root": {"level": "INFO", "handlers": ["console"]},
}
logging.config.dictConfig(LOGGING)


class Document:
    def __init__(self, doc_id: int, owner: str) -> None:
        self.id = doc_id
        self.owner = owner


DOCS = {1: Document(1, owner="ann"), 2: Document(2, owner="bob")}


class DocumentPolicy(Policy):
    allow_anyone_to = ("index",)

    def can_read(self) -> bool:
        return self.user is not None and self.document.owner == self.user


registry = PolicyRegistry()
registry.register(DocumentPolicy)
authz = Authorizer(registry)


@get("/docs/{doc_id:int}")
async def get_doc(doc_id: int, request: Request) -> dict:
    doc = DOCS[doc_id]
    authz.authorize(request.headers.get("x-user"), "read", doc)
    return {"id": doc.id, "owner": doc.owner}


@get("/health")
async def health() -> dict:
    return {"ok": True}


app = Litestar(
    route_handlers=[get_doc, health],
    exception_handlers={Unauthorized: unauthorized_handler},
)

# Run: uvicorn examples.litestar_demo.app:app --reload
