"""
Service wrapper.

Records a contract per exposed method and checks every call against it before
the method body runs. A service can be used without any configuration: an
unconfigured method accepts any arguments.

Simple service built without writing a new class:

    service = Service("Math")

    @service.rpc("add", params=["int", "int"])
    def add(a, b):
        return a + b

    service.call("add", [12, 24])      # 36
    service.call("add", ["as", "b"])   # TypeMismatchError

Subclasses can also expose plain methods and declare their contracts in the
setup hook:

    class MathService(Service):
        def opposite(self, flag):
            return not flag

    service = MathService("Math", setup=lambda s: s.rpc("opposite", params="boolean"))

Parameter types (any spelling is accepted, see type_catalog):
* int / i4 / integer   integer values (bool excluded)
* boolean / bool       only True and False
* string               text of any length
* double / float       floating point numbers
* datetime             date/time values
* base64               text that carries base64 data
* array                list or tuple
* struct               reserved, rejected at registration
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from .errors import UnknownMethodError
from .logging_setup import new_call_id, reset_call_id
from .schemas import MethodContract, MethodSignature, ServiceDescription
from .store import ContractStore
from .validator import normalize_and_validate
from .verifier import CallVerifier, OptionVerifier

logger = logging.getLogger(__name__)


class Service:
    """Contract-checked method dispatch target."""

    def __init__(
        self,
        domain: Optional[str] = None,
        setup: Optional[Callable[["Service"], Any]] = None,
        option_verifiers: Optional[Dict[str, OptionVerifier]] = None,
    ):
        """
        Args:
            domain: Prefix of every method name, so 'add' of Service('Math')
                is called as 'Math.add' from outside
            setup: Called once with the new service, to declare contracts inline
            option_verifiers: Routines for auxiliary contract options
        """
        self.domain = domain
        self._contracts = ContractStore()
        self._verifier = CallVerifier(self._contracts, option_verifiers)
        self._implementations: Dict[str, Callable[..., Any]] = {}
        if setup is not None:
            setup(self)

    # --- configuration ---

    def register(self, method_id: str, raw_options: Any = None) -> MethodContract:
        """Validate raw options and store them as the contract of method_id.

        All-or-nothing: on ContractValidationError the store is left unchanged.
        Re-registering replaces the previous contract.
        """
        contract = normalize_and_validate(method_id, raw_options)
        self._contracts.register(method_id, contract)
        logger.info(
            "configured %s params=%s",
            self.qualified_name(method_id),
            [token.value for token in contract.params],
        )
        return contract

    def rpc(
        self,
        method_id: str,
        options: Optional[Dict[str, Any]] = None,
        func: Optional[Callable[..., Any]] = None,
        **option_kwargs: Any,
    ):
        """
        Declare the contract of a method, optionally binding its implementation.

        Options can be passed as a mapping, as keyword arguments, or both:

            service.rpc("add", params=["int", "int"])
            service.rpc("opposite", {"params": "boolean"}, func=lambda b: not b)

        Returns a decorator that binds the decorated function as the
        implementation, so declaration and definition can sit together.
        """
        if option_kwargs:
            merged = dict(options) if options is not None else {}
            merged.update(option_kwargs)
            options = merged
        self.register(method_id, options)

        def bind(implementation: Callable[..., Any]) -> Callable[..., Any]:
            self._implementations[method_id] = implementation
            return implementation

        if func is not None:
            bind(func)
        return bind

    def add_option_verifier(self, key: str, routine: OptionVerifier) -> None:
        self._verifier.register_option(key, routine)

    # --- queries ---

    def is_configured(self, method_id: str) -> bool:
        return self._contracts.is_configured(method_id)

    def contract_for(self, method_id: str) -> Optional[MethodContract]:
        return self._contracts.get(method_id)

    def qualified_name(self, method_id: str) -> str:
        if self.domain:
            return f"{self.domain}.{method_id}"
        return method_id

    def responds_to(self, method_id: str) -> bool:
        return self._implementation(method_id) is not None

    def describe(self) -> ServiceDescription:
        methods = []
        for method_id in self._contracts.methods():
            contract = self._contracts.get(method_id)
            methods.append(
                MethodSignature(
                    name=method_id,
                    qualified_name=self.qualified_name(method_id),
                    params=[token.value for token in contract.params],
                )
            )
        return ServiceDescription(domain=self.domain, methods=methods)

    # --- dispatch ---

    def verify(self, method_id: str, args: Optional[Sequence[Any]] = None) -> None:
        self._verifier.verify(method_id, args)

    def call(self, method_id: str, args: Optional[Sequence[Any]] = None) -> Any:
        """
        Call a method of the service, verifying its contract first.

        Raises:
            TypeMismatchError: args violate the contract (the method is not run)
            UnknownMethodError: the method has no implementation
        """
        args = tuple(args) if args is not None else ()
        token = new_call_id()
        try:
            if self.is_configured(method_id):
                self.verify(method_id, args)

            implementation = self._implementation(method_id)
            if implementation is None:
                raise UnknownMethodError(method_id, self.qualified_name(method_id))
            return implementation(*args)
        finally:
            reset_call_id(token)

    def _implementation(self, method_id: str) -> Optional[Callable[..., Any]]:
        if method_id in self._implementations:
            return self._implementations[method_id]
        # the Service API itself is never exposed as an RPC method
        if not isinstance(method_id, str) or method_id.startswith("_") or hasattr(Service, method_id):
            return None
        candidate = getattr(self, method_id, None)
        return candidate if callable(candidate) else None
