import pytest

from policyx.core.errors import InvalidSubject
from policyx.core.policy import Policy, snake_case


class Contract:
    def __init__(self, signed=False):
        self.signed = signed


class CreditCard:
    pass


class Admin:
    is_admin = True


class ContractPolicy(Policy):
    def can_update(self):
        return not self.contract.signed


class EmptyPolicy(Policy):
    pass


@pytest.mark.parametrize("actor", [None, object(), Admin()])
@pytest.mark.parametrize("action", ["destroy", "update_all", "can_update", "show?", "no such action"])
def test_unknown_actions_are_denied(actor, action):
    assert EmptyPolicy(actor, Contract()).is_allowed(action) is False
    assert ContractPolicy(actor, Contract()).is_allowed(action) is False


def test_decide_returns_none_without_predicate():
    assert EmptyPolicy(Admin(), Contract()).decide("update") is None


@pytest.mark.parametrize("actor", [None, Admin()])
def test_none_subject_fails_fast(actor):
    with pytest.raises(InvalidSubject) as ei:
        ContractPolicy(actor, None)
    assert ei.value.policy == "ContractPolicy"


def test_invalid_subject_is_value_error():
    with pytest.raises(ValueError):
        EmptyPolicy(None, None)


def test_evaluation_context_accessors():
    actor, subject = Admin(), CreditCard()
    p = EmptyPolicy(actor, subject)
    assert p.actor is actor
    assert p.user is actor
    assert p.subject is subject
    assert p.creditcard is subject
    assert p.credit_card is subject
    with pytest.raises(AttributeError):
        p.contract


def test_context_is_read_only():
    p = EmptyPolicy(None, Contract())
    with pytest.raises(AttributeError):
        p.actor = Admin()  # type: ignore[misc]


def test_predicate_result_is_coerced_to_bool():
    class ThingPolicy(Policy):
        def can_a(self):
            return "yes"

        def can_b(self):
            return None

        def can_c(self):
            return []

    p = ThingPolicy(None, Contract())
    assert p.is_allowed("a") is True
    assert p.is_allowed("b") is False
    assert p.is_allowed("c") is False


def test_predicate_errors_propagate():
    class BrokenPolicy(Policy):
        def can_update(self):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        BrokenPolicy(None, Contract()).is_allowed("update")


def test_non_callable_can_attribute_is_not_a_predicate():
    class OddPolicy(Policy):
        can_update = True

    assert OddPolicy.has_predicate("update") is False
    assert OddPolicy(None, Contract()).is_allowed("update") is False


@pytest.mark.parametrize(
    "name, expected",
    [("Contract", "contract"), ("CreditCard", "credit_card"), ("HTTPRequest", "http_request"), ("V2Item", "v2_item")],
)
def test_snake_case(name, expected):
    assert snake_case(name) == expected
