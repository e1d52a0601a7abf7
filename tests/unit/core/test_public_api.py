import pytest

import policyx
from policyx import Policy, Unauthorized


class Ticket:
    pass


def test_exports():
    for name in policyx.__all__:
        assert hasattr(policyx, name)


def test_default_helpers_use_default_registry():
    @policyx.policy_for()
    class TicketPolicy(Policy):
        allow_users_to = ("book",)

    try:
        assert policyx.decide(object(), "book", Ticket()) is True
        assert policyx.decide(None, "book", Ticket()) is False
        with pytest.raises(Unauthorized):
            policyx.authorize(None, "book", Ticket())
        policyx.authorize(object(), "book", Ticket())
    finally:
        policyx.default_registry.unregister(Ticket)

    assert Ticket not in policyx.default_registry
