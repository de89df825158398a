"""Service: registration surface, dispatch and direct mock calls."""
import logging
import math

import numpy as np
import pytest

from rpc_contracts import Service
from rpc_contracts.errors import ContractValidationError, TypeMismatchError, UnknownMethodError
from rpc_contracts.logging_setup import CallIdFilter, call_id_ctx, configure_logging
from rpc_contracts.settings import ContractSettings
from rpc_contracts.testing import DirectServiceMock
from rpc_contracts.type_catalog import TypeToken


class MathService(Service):
    def add(self, a, b):
        return a + b

    def percentile(self, array, percentile):
        p = len(array) - int(len(array) * percentile / 100)
        array = sorted(array)
        for _ in range(p):
            array.pop(0)
            array.pop()
        return array

    def opposite(self, flag):
        return not flag


@pytest.fixture
def math_service():
    def setup(service):
        service.rpc("add", params=["int", "i4"])
        service.rpc("opposite", params="boolean")

    return MathService("Math", setup=setup)


def test_register_then_is_configured():
    service = Service()
    service.register("m", {"params": ["int"]})
    assert service.is_configured("m") is True
    assert service.is_configured("other") is False


def test_scalar_params_are_stored_as_sequence():
    service = Service()
    service.register("m", {"params": TypeToken.INTEGER})
    assert list(service.contract_for("m").params) == [TypeToken.INTEGER]


def test_failed_registration_leaves_store_unchanged():
    service = Service()
    with pytest.raises(ContractValidationError):
        service.register("m", {"params": ["int", "bogus"]})
    assert service.is_configured("m") is False

    service.register("n", {"params": "int"})
    with pytest.raises(ContractValidationError):
        service.register("n", {"params": "struct"})
    assert list(service.contract_for("n").params) == [TypeToken.INTEGER]


def test_stored_contract_changes_only_by_registration():
    service = Service()
    limits = [2]
    service.register("m", {"params": "int", "limits": limits})

    with pytest.raises(TypeError):
        service.contract_for("m").options["max_args"] = 99
    limits.append(5)

    assert service.contract_for("m").options == {"limits": (2,)}


def test_numpy_types_can_be_declared_and_called():
    service = Service()
    service.rpc("at", params=[np.datetime64], func=lambda when: str(when))
    assert service.call("at", [np.datetime64("1998-07-17")]) == "1998-07-17"


def test_re_registration_uses_latest_contract():
    service = Service()
    service.rpc("echo", params="int", func=lambda x: x)
    assert service.call("echo", [1]) == 1

    service.rpc("echo", params="string", func=lambda x: x)
    assert service.call("echo", ["a"]) == "a"
    with pytest.raises(TypeMismatchError):
        service.call("echo", [1])


def test_add_returns_sum(math_service):
    mock = DirectServiceMock(math_service)
    assert mock.add(12, 24) == 36


def test_unconfigured_method_is_called_without_checks(math_service):
    mock = DirectServiceMock(math_service)
    data = [8, 5, 6, 7, 10, 434, 9, 1]
    assert mock.percentile(data, 90) == [5, 6, 7, 8, 9, 10]


def test_wrong_argument_types_are_rejected(math_service):
    mock = DirectServiceMock(math_service)
    with pytest.raises(TypeMismatchError):
        mock.add("as", "b")
    with pytest.raises(TypeMismatchError):
        mock.add(12.12, 24)

    assert mock.opposite(True) is False
    assert mock.opposite(False) is True
    with pytest.raises(TypeMismatchError):
        mock.opposite(12.12)
    with pytest.raises(TypeMismatchError):
        mock.opposite(0)


def test_implementation_is_not_run_on_mismatch():
    calls = []
    service = Service()
    service.rpc("record", params="int", func=calls.append)

    with pytest.raises(TypeMismatchError):
        service.call("record", ["x"])
    assert calls == []

    service.call("record", [3])
    assert calls == [3]


def test_rpc_decorator_defines_the_method():
    service = Service("Math")

    @service.rpc("sin", params="double")
    def sin(x):
        return math.sin(x)

    mock = DirectServiceMock(service)
    assert mock.sin(8.0) == math.sin(8.0)
    with pytest.raises(TypeMismatchError):
        mock.sin(8)


def test_rpc_merges_mapping_and_keyword_options():
    service = Service()
    contract_options = {"params": "int", "doc": "from mapping"}
    service.rpc("m", contract_options, doc="from kwargs")
    contract = service.contract_for("m")
    assert contract.options == {"doc": "from kwargs"}
    assert contract_options["doc"] == "from mapping"


def test_unknown_method_raises(math_service):
    with pytest.raises(UnknownMethodError) as exc_info:
        math_service.call("cos", [1])
    assert "Math.cos" in str(exc_info.value)

    mock = DirectServiceMock(math_service)
    with pytest.raises(AttributeError):
        mock.cos(1)


def test_service_api_is_not_dispatchable(math_service):
    assert math_service.responds_to("add") is True
    assert math_service.responds_to("call") is False
    assert math_service.responds_to("_implementation") is False
    with pytest.raises(UnknownMethodError):
        math_service.call("register", ["x", {}])


def test_configured_method_without_implementation():
    service = Service()
    service.rpc("later", params="int")
    with pytest.raises(TypeMismatchError):
        service.call("later", ["x"])
    with pytest.raises(UnknownMethodError):
        service.call("later", [1])


def test_option_verifier_plugs_into_dispatch():
    def max_args(method_id, args, limit):
        if len(args) > limit:
            raise TypeError(f"{method_id} takes at most {limit} arguments")

    service = Service(option_verifiers={"max_args": max_args})
    service.rpc("pair", params="int", max_args=2, func=lambda *a: a)

    assert service.call("pair", [1, "b"]) == (1, "b")
    with pytest.raises(TypeError):
        service.call("pair", [1, 2, 3])


def test_qualified_name_and_describe(math_service):
    assert math_service.qualified_name("add") == "Math.add"
    assert Service().qualified_name("add") == "add"

    description = math_service.describe()
    assert description.domain == "Math"
    assert [m.qualified_name for m in description.methods] == ["Math.add", "Math.opposite"]
    assert description.methods[0].params == ["integer", "integer"]
    assert description.methods[1].params == ["boolean"]


def test_call_id_is_set_during_dispatch():
    seen = []
    service = Service()
    service.rpc("current_call", func=lambda: seen.append(call_id_ctx.get()))

    service.call("current_call")
    assert len(seen) == 1 and seen[0] != "-"
    assert call_id_ctx.get() == "-"


def test_call_id_filter_tags_records():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert CallIdFilter().filter(record) is True
    assert record.call_id == "-"


def test_configure_logging_adds_filter_once(monkeypatch):
    handler = logging.StreamHandler()
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [handler])

    configure_logging(ContractSettings())
    configure_logging(ContractSettings())

    assert sum(isinstance(f, CallIdFilter) for f in handler.filters) == 1


def test_registration_is_logged(caplog):
    caplog.set_level(logging.INFO, logger="rpc_contracts")
    Service("Math").register("add", {"params": ["int", "int"]})
    assert "configured Math.add" in caplog.text


def test_trace_calls_setting(monkeypatch):
    monkeypatch.setenv("RPC_CONTRACTS_TRACE_CALLS", "true")
    monkeypatch.setenv("RPC_CONTRACTS_LOG_LEVEL", "debug")
    config = ContractSettings()
    assert config.trace_calls is True
    assert config.log_level == "DEBUG"
