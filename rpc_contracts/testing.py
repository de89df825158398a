"""Dispatch helpers for tests and smoke tools (no router, no network)."""
from typing import Any

from .service import Service


class DirectServiceMock:
    """
    Call a service's methods directly, as a dispatcher would:

        mock = DirectServiceMock(service)
        mock.add(12, 24)   # service.call("add", (12, 24))
    """

    def __init__(self, service: Service):
        self._service = service

    def __getattr__(self, name: str) -> Any:
        service = self.__dict__.get("_service")
        if service is not None and (service.is_configured(name) or service.responds_to(name)):
            def forward(*args):
                return service.call(name, args)
            forward.__name__ = name
            return forward
        raise AttributeError(f"{type(self).__name__} has no method {name!r}")
