from __future__ import annotations

import inspect
import logging
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, Type, Union

from .errors import PolicyNotFound
from .policy import Policy

logger = logging.getLogger("policyx.registry")

PolicyFactory = Callable[[Any, Any], Policy]
SubjectType = Union[type, str]


def type_name(obj: Any) -> str:
    """Simple (module-less) name of the runtime type of *obj*."""
    return type(obj).__name__


class PolicyRegistry:
    """Maps subject type names to policy factories.

    Lookup uses the subject's most specific runtime type name only: a
    ``SignedContract(Contract)`` subject does *not* fall back to the policy
    registered for ``Contract``. Register subtypes explicitly when they should
    share a policy.

    The registry is meant to be filled once at startup and only read after
    that.
    """

    def __init__(self, *, suffix: str = "Policy") -> None:
        if not suffix:
            raise ValueError("suffix must not be empty")
        self.suffix = suffix
        self._factories: Dict[str, PolicyFactory] = {}

    # --- registration --------------------------------------------------------

    def subject_name_for(self, policy_cls: type) -> str:
        name = policy_cls.__name__
        if not name.endswith(self.suffix) or name == self.suffix:
            raise ValueError(
                f"cannot derive a subject type from {name!r}; "
                f"name it '<Subject>{self.suffix}' or pass subject_type"
            )
        return name[: -len(self.suffix)]

    def register(
        self,
        factory: Union[Type[Policy], PolicyFactory],
        subject_type: Optional[SubjectType] = None,
    ) -> Union[Type[Policy], PolicyFactory]:
        """Register *factory* for *subject_type* and return it unchanged.

        *factory* is usually a :class:`Policy` subclass but any callable taking
        ``(actor, subject)`` works. Without *subject_type* the subject name is
        the policy class name minus the suffix (``ContractPolicy`` ->
        ``Contract``).
        """
        if subject_type is None:
            if not inspect.isclass(factory):
                raise ValueError("subject_type is required when registering a non-class factory")
            name = self.subject_name_for(factory)
        elif isinstance(subject_type, str):
            name = subject_type
        else:
            name = subject_type.__name__

        previous = self._factories.get(name)
        if previous is not None and previous is not factory:
            logger.debug("policyx: replacing policy for %s: %r -> %r", name, previous, factory)
        self._factories[name] = factory
        return factory

    def policy_for(self, subject_type: Optional[SubjectType] = None) -> Callable[[Type[Policy]], Type[Policy]]:
        """Decorator form of :meth:`register`."""

        def _decorator(policy_cls: Type[Policy]) -> Type[Policy]:
            self.register(policy_cls, subject_type)
            return policy_cls

        return _decorator

    def discover(self, module: ModuleType) -> List[str]:
        """Register every ``<Subject><suffix>`` policy class defined in *module*.

        Returns the registered subject names.
        """
        found: List[str] = []
        for attr, obj in vars(module).items():
            if not inspect.isclass(obj) or obj is Policy or not issubclass(obj, Policy):
                continue
            # skip policies imported from elsewhere
            if obj.__module__ != module.__name__ or attr != obj.__name__:
                continue
            if not obj.__name__.endswith(self.suffix) or obj.__name__ == self.suffix:
                continue
            self.register(obj)
            found.append(self.subject_name_for(obj))
        logger.debug("policyx: discovered %d policies in %s", len(found), module.__name__)
        return found

    def unregister(self, subject_type: SubjectType) -> None:
        name = subject_type if isinstance(subject_type, str) else subject_type.__name__
        self._factories.pop(name, None)

    def clear(self) -> None:
        self._factories.clear()

    # --- lookup --------------------------------------------------------------

    def lookup(self, subject: Any) -> PolicyFactory:
        name = type_name(subject)
        try:
            return self._factories[name]
        except KeyError:
            raise PolicyNotFound(name) from None

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, subject_type: object) -> bool:
        if isinstance(subject_type, str):
            return subject_type in self._factories
        if inspect.isclass(subject_type):
            return subject_type.__name__ in self._factories
        return False

    def __len__(self) -> int:
        return len(self._factories)


__all__ = ["PolicyRegistry", "PolicyFactory", "type_name"]
