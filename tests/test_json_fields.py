from hypothesis import given, strategies as st, settings as hypothesis_settings

from context_demo.services.json_fields import get_as_float, get_as_list, get_as_string

field_names = st.text(min_size=1, max_size=12)
non_objects = st.one_of(
    st.none(),
    st.integers(),
    st.floats(allow_nan=False),
    st.text(max_size=5),
    st.lists(st.integers(), max_size=3),
)


def test_get_as_string_plain_field():
    assert get_as_string({"foo": "bar"}, "foo") == "bar"


def test_get_as_string_renders_scalars():
    obj = {"int": 42, "float": 0.5, "true": True, "false": False}
    assert get_as_string(obj, "int") == "42"
    assert get_as_string(obj, "float") == "0.5"
    assert get_as_string(obj, "true") == "true"
    assert get_as_string(obj, "false") == "false"


def test_get_as_string_nested_field():
    obj = {"socialInfo": {"author": "authorFoo"}}
    assert get_as_string(obj, "socialInfo", "author") == "authorFoo"


def test_get_as_string_missing_field():
    assert get_as_string({"foo": "bar"}, "baz") == "<no proper baz>"


def test_get_as_string_null_field():
    assert get_as_string({"foo": None}, "foo") == "<no proper foo>"


def test_get_as_string_object_leaf():
    assert get_as_string({"foo": {"bar": 1}}, "foo") == "<no proper foo>"


def test_get_as_string_missing_parent():
    assert get_as_string({"foo": "bar"}, "socialInfo", "author") == "<no proper socialInfo->author>"


def test_get_as_string_parent_not_object():
    assert get_as_string({"socialInfo": "x"}, "socialInfo", "author") == "<no proper socialInfo->author>"


def test_get_as_string_on_non_object():
    assert get_as_string(None, "foo") == "<no proper foo>"
    assert get_as_string(["foo"], "foo") == "<no proper foo>"


@given(obj=st.dictionaries(field_names, non_objects, max_size=5), field=field_names)
@hypothesis_settings(max_examples=100)
def test_get_as_string_missing_or_mismatched_never_raises(obj, field):
    obj.pop(field, None)
    assert get_as_string(obj, field) == f"<no proper {field}>"


@given(value=non_objects, parent=field_names, child=field_names)
@hypothesis_settings(max_examples=100)
def test_get_as_string_nested_mismatch_names_path(value, parent, child):
    result = get_as_string({parent: value}, parent, child)
    assert result == f"<no proper {parent}->{child}>"


def test_get_as_float():
    assert get_as_float({"value": 1}, "value") == 1.0
    assert get_as_float({"value": "0.25"}, "value") == 0.25
    assert get_as_float({"value": "x"}, "value") is None
    assert get_as_float({"value": True}, "value") is None
    assert get_as_float({}, "value") is None


def test_get_as_list():
    assert get_as_list({"items": [1, 2]}, "items") == [1, 2]
    assert get_as_list({"items": {"a": 1}}, "items") == []
    assert get_as_list(None, "items") == []
