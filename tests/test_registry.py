import io
import threading
import time

import pytest

from objfactory import (
    Factory,
    FactoryRegistry,
    FactoryService,
    IncorrectFactoryError,
    InstantiationError,
)


class RecordingFactory(Factory):
    """Builds ``(class_name, loader, params, signature)`` tuples."""

    created = 0
    init_calls = []

    def __init__(self):
        type(self).created += 1
        self.class_name = None

    def init(self, class_name):
        type(self).init_calls.append(class_name)
        self.class_name = class_name

    def get_instance(self, loader=None, params=None, signature=None):
        return (self.class_name, loader, params, signature)

    def is_loader_supported(self):
        return False


class StructuralFactory:
    """Satisfies the protocol without inheriting from it."""

    def init(self, class_name):
        self.class_name = class_name

    def get_instance(self, loader=None, params=None, signature=None):
        return io.StringIO(self.class_name)

    def is_loader_supported(self):
        return True


class NotAFactory:
    pass


class FailingInitFactory(StructuralFactory):
    def init(self, class_name):
        raise ValueError(f"cannot serve {class_name}")


class SlowFactory(StructuralFactory):
    created = 0
    lock = threading.Lock()

    def __init__(self):
        with SlowFactory.lock:
            SlowFactory.created += 1
        time.sleep(0.01)


RECORDING = f"{__name__}.RecordingFactory"


@pytest.fixture(autouse=True)
def reset_counters():
    RecordingFactory.created = 0
    RecordingFactory.init_calls = []
    SlowFactory.created = 0
    yield


def test_default_factory_is_created_once_per_class_name():
    service = FactoryService(factories={"default": RECORDING})

    first = service.get_instance("app.model.Order")
    second = service.get_instance("app.model.Order")

    assert first[0] == second[0] == "app.model.Order"
    assert RecordingFactory.created == 1
    assert RecordingFactory.init_calls == ["app.model.Order"]
    assert service.registry.get("app.model.Order") is service.registry.get("app.model.Order")


def test_default_factory_is_told_the_requested_name():
    service = FactoryService(factories={"default": RECORDING})

    service.get_instance("a.A")
    service.get_instance("b.B")

    assert RecordingFactory.init_calls == ["a.A", "b.B"]
    assert set(service.registry.cached()) == {"a.A", "b.B"}


def test_exact_factory_wins_over_default():
    service = FactoryService(factories={"default": RECORDING, "io.StringIO": f"{__name__}.StructuralFactory"})

    obj = service.get_instance("io.StringIO")

    assert isinstance(obj, io.StringIO)
    assert obj.getvalue() == "io.StringIO"
    assert RecordingFactory.created == 0


def test_delegation_passes_arguments_through():
    service = FactoryService(factories={"x.Y": RECORDING})
    loader = object()

    assert service.get_instance("x.Y") == ("x.Y", None, None, None)
    assert service.get_instance("x.Y", loader) == ("x.Y", loader, None, None)
    assert service.get_instance("x.Y", params=[1], signature=["int"]) == ("x.Y", None, [1], ["int"])
    assert service.get_instance("x.Y", loader, [1], ["int"]) == ("x.Y", loader, [1], ["int"])


def test_unmapped_names_are_constructed_directly():
    service = FactoryService(factories={"x.Y": RECORDING})

    assert isinstance(service.get_instance("io.StringIO"), io.StringIO)
    assert service.registry.get("io.StringIO") is None
    assert RecordingFactory.created == 0


def test_is_loader_supported_asks_the_factory():
    service = FactoryService(factories={"x.Y": RECORDING})

    assert service.is_loader_supported("x.Y") is False
    assert service.is_loader_supported("io.StringIO") is True


def test_structural_factory_is_accepted():
    service = FactoryService(factories={"default": f"{__name__}.StructuralFactory"})
    assert service.get_instance("hello").getvalue() == "hello"


def test_incorrect_factory():
    service = FactoryService(factories={"x.Y": f"{__name__}.NotAFactory"})

    with pytest.raises(IncorrectFactoryError) as ei:
        service.get_instance("x.Y")

    assert ei.value.factory_class == f"{__name__}.NotAFactory"
    assert "Incorrect factory" in str(ei.value)
    assert service.registry.cached() == {}


def test_unknown_factory_class():
    service = FactoryService(factories={"x.Y": "no_such_module_xyz.Factory"})

    with pytest.raises(InstantiationError) as ei:
        service.get_instance("x.Y")
    assert not isinstance(ei.value, IncorrectFactoryError)


def test_factory_init_failure_is_wrapped():
    service = FactoryService(factories={"x.Y": f"{__name__}.FailingInitFactory"})

    with pytest.raises(InstantiationError) as ei:
        service.get_instance("x.Y")
    assert isinstance(ei.value.cause, ValueError)
    assert service.registry.cached() == {}


def test_default_factory_class_is_not_built_through_itself():
    service = FactoryService(factories={"default": RECORDING})

    service.get_instance("x.Y")

    assert RECORDING not in service.registry.cached()


def test_concurrent_first_use_yields_one_factory():
    service = FactoryService(factories={"default": f"{__name__}.SlowFactory"})
    barrier = threading.Barrier(16)
    seen = []
    errors = []

    def worker():
        try:
            barrier.wait()
            seen.append(service.registry.get("app.Hot"))
            service.get_instance("app.Hot")
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len({id(f) for f in seen}) == 1
    assert seen[0] is service.registry.get("app.Hot")
    assert 1 <= SlowFactory.created <= 16


def test_registry_builder_and_clear():
    built = []

    def builder(name):
        built.append(name)
        return StructuralFactory()

    registry = FactoryRegistry(builder)
    registry.configure({"default": "some.Factory"})

    assert registry.factory_class_for("x") == "some.Factory"
    assert registry.get("x") is registry.get("x")
    assert built == ["some.Factory"]

    registry.clear()
    assert registry.cached() == {}
    assert registry.classes == {}
    assert registry.get("x") is None


def test_configured_table_is_read_only():
    registry = FactoryRegistry(lambda name: None)
    registry.configure({"a": "b"})
    with pytest.raises(TypeError):
        registry.classes["c"] = "d"
