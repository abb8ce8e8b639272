import pytest

from objfactory import IsolatedLoader, SignatureMatcher, TypeNotFoundError, TypeResolver


class Recorder:
    def record(self):
        pass


@pytest.fixture
def matcher():
    return SignatureMatcher(TypeResolver())


def test_no_signature_means_zero_argument_constructor(matcher):
    assert matcher.get_signature(list, None, None) is None
    assert matcher.get_signature(list, ["ignored"], None) is None


@pytest.mark.parametrize(
    "name, expected",
    [("boolean", bool), ("char", str), ("byte", int), ("short", int), ("int", int), ("long", int), ("float", float), ("double", float)],
)
def test_primitive_names(matcher, name, expected):
    params = [object()]
    original = params[0]

    assert matcher.get_signature(list, params, [name]) == (expected,)
    assert params[0] is original


def test_class_names_are_resolved(matcher):
    params = ["testing"]

    assert matcher.get_signature(list, params, ["builtins.str"]) == (str,)
    assert params == ["testing"]


def test_wrapper_style_name(matcher):
    assert matcher.get_signature(list, [10], ["builtins.int"]) == (int,)


def test_unknown_parameter_type(matcher):
    with pytest.raises(TypeNotFoundError):
        matcher.get_signature(list, ["x"], ["no_such_module_xyz.Type"])


def test_length_mismatch(matcher):
    with pytest.raises(ValueError):
        matcher.get_signature(list, [1, 2], ["int"])


def test_params_may_be_omitted(matcher):
    assert matcher.get_signature(dict, None, ["str", "int"]) == (str, int)


def test_parameter_types_come_from_target_context(importable_plugin, plugin_dir):
    iso = IsolatedLoader([plugin_dir], parent_first=False)
    matcher = SignatureMatcher(TypeResolver())
    wallet = iso.load_type("objf_plugin.Wallet")

    types = matcher.get_signature(wallet, [None], ["objf_plugin.Money"])

    assert types == (iso.load_type("objf_plugin.Money"),)
    assert types[0] is not importable_plugin.Money


def test_mismatched_argument_is_migrated_in_place(importable_plugin, plugin_dir):
    iso = IsolatedLoader([plugin_dir], parent_first=False)
    matcher = SignatureMatcher(TypeResolver())
    wallet = iso.load_type("objf_plugin.Wallet")
    params = [importable_plugin.Money(3, "GBP")]

    matcher.get_signature(wallet, params, ["objf_plugin.Money"])

    assert type(params[0]) is iso.load_type("objf_plugin.Money")
    assert params[0].amount == 3


def test_failed_migration_keeps_original(plugin_dir):
    a = IsolatedLoader([plugin_dir])
    b = IsolatedLoader([plugin_dir])
    matcher = SignatureMatcher(TypeResolver())
    wallet_b = b.load_type("objf_plugin.Wallet")
    money_a = a.load_type("objf_plugin.Money")(1)
    params = [money_a]

    types = matcher.get_signature(wallet_b, params, ["objf_plugin.Money"])

    assert types == (b.load_type("objf_plugin.Money"),)
    assert params[0] is money_a


def test_same_context_argument_is_not_copied(matcher):
    value = "same"
    params = [value]
    matcher.get_signature(list, params, ["str"])
    assert params[0] is value


def test_immutable_params_are_left_alone(importable_plugin, plugin_dir):
    iso = IsolatedLoader([plugin_dir], parent_first=False)
    matcher = SignatureMatcher(TypeResolver())
    money = importable_plugin.Money(1)
    params = (money,)

    matcher.get_signature(iso.load_type("objf_plugin.Wallet"), params, ["objf_plugin.Money"])

    assert params[0] is money


def test_process_objects_without_importable_class_are_not_copied(matcher):
    recorder = Recorder()
    callback = recorder.record
    params = [callback, None]

    matcher.get_signature(list, params, ["builtins.object", "builtins.object"])

    assert params[0] is callback
    assert params[0].__self__ is recorder
    assert params[1] is None
