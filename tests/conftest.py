import importlib
import sys
import textwrap

import pytest

from objfactory import FactoryService, IsolatedLoader

PLUGIN_MODULE = "objf_plugin"

PLUGIN_SOURCE = textwrap.dedent(
    """
    class Money:
        def __init__(self, amount=0, currency="EUR"):
            self.amount = amount
            self.currency = currency

        def __eq__(self, other):
            return (
                type(other).__name__ == "Money"
                and (self.amount, self.currency) == (other.amount, other.currency)
            )


    class Wallet:
        def __init__(self, money):
            self.money = money


    class Counter:
        created = 0

        def __init__(self):
            Counter.created += 1


    class Outer:
        class Inner:
            pass
    """
)


@pytest.fixture
def plugin_dir(tmp_path):
    """A directory holding ``objf_plugin.py`` and the ``objf_pkg`` package."""
    (tmp_path / f"{PLUGIN_MODULE}.py").write_text(PLUGIN_SOURCE, encoding="utf-8")
    pkg = tmp_path / "objf_pkg"
    pkg.mkdir()
    (pkg / "__init__.py").write_text("", encoding="utf-8")
    (pkg / "shapes.py").write_text("class Square:\n    def __init__(self, side=1):\n        self.side = side\n", encoding="utf-8")
    importlib.invalidate_caches()
    yield tmp_path
    for name in (PLUGIN_MODULE, "objf_pkg", "objf_pkg.shapes"):
        sys.modules.pop(name, None)


@pytest.fixture
def isolated(plugin_dir):
    return IsolatedLoader([plugin_dir])


@pytest.fixture
def importable_plugin(plugin_dir, monkeypatch):
    """Make ``objf_plugin`` importable from the process context as well."""
    monkeypatch.syspath_prepend(str(plugin_dir))
    return importlib.import_module(PLUGIN_MODULE)


@pytest.fixture
def service():
    svc = FactoryService()
    yield svc
    svc.shutdown()
