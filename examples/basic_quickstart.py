from policyx import Authorizer, Policy, PolicyRegistry, Unauthorized


class User:
    def __init__(self, name: str, project_manager: bool = False) -> None:
        self.name = name
        self.project_manager = project_manager


class Contract:
    def __init__(self, signed: bool) -> None:
        self.signed = signed


class ContractPolicy(Policy):
    allow_anyone_to = ("index", "create")
    allow_users_to = ("show",)

    def can_update(self) -> bool:
        return (self.user is not None and self.user.project_manager) or not self.contract.signed


def main() -> None:
    registry = PolicyRegistry()
    registry.register(ContractPolicy)
    authz = Authorizer(registry)

    signed = Contract(signed=True)
    print(authz.decide(None, "create", signed))  # True
    print(authz.decide(None, "show", signed))  # False
    print(authz.decide(User("pm", project_manager=True), "update", signed))  # True

    try:
        authz.authorize(User("bob"), "update", signed)
    except Unauthorized as e:
        print("denied:", e)  # denied: not allowed to update Contract


if __name__ == "__main__":
    main()
