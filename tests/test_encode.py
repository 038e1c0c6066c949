import pytest

from oapi_codec.errors import StyleMismatch, UnsupportedShape
from oapi_codec.style.base import Array, EncodeRequest, Location, Object, ParameterStyle, Scalar
from oapi_codec.style.canonical import to_parameter_value
from oapi_codec.style.encode import encode, style_param


def _encode(value, style, explode, location, name="p"):
    return encode(
        EncodeRequest(
            name=name,
            value=to_parameter_value(value, name),
            style=style,
            explode=explode,
            location=location,
        )
    )


OBJ = {"tags": "x", "limit": "5"}


class TestSimple:
    def test_array_in_path(self):
        assert _encode(["a", "b", "c"], ParameterStyle.SIMPLE, False, Location.PATH) == "a,b,c"

    def test_array_ignores_explode(self):
        assert _encode(["a", "b"], ParameterStyle.SIMPLE, True, Location.PATH) == "a,b"

    def test_object(self):
        assert _encode(OBJ, ParameterStyle.SIMPLE, False, Location.PATH) == "tags,x,limit,5"
        assert _encode(OBJ, ParameterStyle.SIMPLE, True, Location.PATH) == "tags=x,limit=5"

    def test_scalar_is_escaped_for_path(self):
        assert _encode("a b/c", ParameterStyle.SIMPLE, False, Location.PATH) == "a%20b%2Fc"

    def test_members_are_escaped_before_composition(self):
        assert _encode(["a,b", "c"], ParameterStyle.SIMPLE, False, Location.PATH) == "a%2Cb,c"
        assert _encode("a;b", ParameterStyle.MATRIX, False, Location.PATH, "id") == ";id=a%3Bb"

    def test_header_is_not_percent_encoded(self):
        assert _encode("a b", ParameterStyle.SIMPLE, False, Location.HEADER) == "a b"


class TestLabelAndMatrix:
    def test_label(self):
        assert _encode("v", ParameterStyle.LABEL, False, Location.PATH) == ".v"
        assert _encode(["a", "b"], ParameterStyle.LABEL, False, Location.PATH) == ".a,b"
        assert _encode(["a", "b"], ParameterStyle.LABEL, True, Location.PATH) == ".a.b"
        assert _encode(OBJ, ParameterStyle.LABEL, True, Location.PATH) == ".tags=x.limit=5"

    def test_matrix(self):
        assert _encode("v", ParameterStyle.MATRIX, False, Location.PATH, "id") == ";id=v"
        assert _encode(["a", "b"], ParameterStyle.MATRIX, False, Location.PATH, "id") == ";id=a,b"
        assert _encode(["a", "b"], ParameterStyle.MATRIX, True, Location.PATH, "id") == ";id=a;id=b"
        assert _encode(OBJ, ParameterStyle.MATRIX, True, Location.PATH, "id") == ";tags=x;limit=5"


class TestForm:
    def test_scalar(self):
        assert _encode(5, ParameterStyle.FORM, True, Location.QUERY, "limit") == "limit=5"

    def test_array(self):
        assert _encode(["a", "b"], ParameterStyle.FORM, False, Location.QUERY, "tags") == "tags=a,b"
        assert _encode(["a", "b"], ParameterStyle.FORM, True, Location.QUERY, "tags") == "tags=a&tags=b"

    def test_exploded_object_uses_field_names(self):
        assert _encode(OBJ, ParameterStyle.FORM, True, Location.QUERY, "params") == "tags=x&limit=5"

    def test_unexploded_object_uses_parameter_name(self):
        assert _encode(OBJ, ParameterStyle.FORM, False, Location.QUERY, "params") == "params=tags,x,limit,5"

    def test_value_escaping_keeps_separators(self):
        assert _encode(["a&b", "c d"], ParameterStyle.FORM, False, Location.QUERY, "q") == "q=a%26b,c%20d"

    def test_cookie_pairs(self):
        assert _encode(["a", "b"], ParameterStyle.FORM, True, Location.COOKIE, "c") == "c=a; c=b"


class TestDelimitedAndDeepObject:
    def test_space_delimited(self):
        assert _encode(["a", "b"], ParameterStyle.SPACE_DELIMITED, False, Location.QUERY, "q") == "q=a%20b"

    def test_pipe_delimited(self):
        assert _encode(["a", "b"], ParameterStyle.PIPE_DELIMITED, False, Location.QUERY, "q") == "q=a|b"

    def test_deep_object(self):
        encoded = _encode({"color": "red", "minAge": 3}, ParameterStyle.DEEP_OBJECT, True, Location.QUERY, "filter")
        assert encoded == "filter[color]=red&filter[minAge]=3"


class TestStyleMismatch:
    @pytest.mark.parametrize(
        "value, style, location",
        [
            (OBJ, ParameterStyle.DEEP_OBJECT, Location.PATH),
            ("x", ParameterStyle.DEEP_OBJECT, Location.QUERY),
            (["a"], ParameterStyle.DEEP_OBJECT, Location.QUERY),
            (OBJ, ParameterStyle.SPACE_DELIMITED, Location.QUERY),
            ("x", ParameterStyle.SPACE_DELIMITED, Location.QUERY),
            ("x", ParameterStyle.PIPE_DELIMITED, Location.QUERY),
            (["a"], ParameterStyle.PIPE_DELIMITED, Location.HEADER),
            ("x", ParameterStyle.FORM, Location.PATH),
            ("x", ParameterStyle.SIMPLE, Location.QUERY),
            ("x", ParameterStyle.LABEL, Location.HEADER),
            ("x", ParameterStyle.MATRIX, Location.QUERY),
        ],
    )
    def test_invalid_combinations(self, value, style, location):
        with pytest.raises(StyleMismatch) as exc_info:
            _encode(value, style, False, location)
        assert exc_info.value.context["style"] == style.value
        assert exc_info.value.context["location"] == location.value

    def test_delimited_styles_do_not_explode(self):
        with pytest.raises(StyleMismatch):
            _encode(["a"], ParameterStyle.SPACE_DELIMITED, True, Location.QUERY)


class TestUnsupportedShape:
    def test_nested_deep_object(self):
        with pytest.raises(UnsupportedShape):
            _encode({"a": {"b": "c"}}, ParameterStyle.DEEP_OBJECT, True, Location.QUERY)

    def test_array_of_objects(self):
        with pytest.raises(UnsupportedShape):
            _encode([{"a": "b"}], ParameterStyle.FORM, True, Location.QUERY)

    def test_object_holding_array(self):
        with pytest.raises(UnsupportedShape):
            _encode({"a": ["b"]}, ParameterStyle.SIMPLE, False, Location.PATH)


class TestStyleParam:
    def test_defaults_location_from_style(self):
        assert style_param("simple", False, "id", 42) == "42"
        assert style_param("form", True, "tags", ["a", "b"]) == "tags=a&tags=b"

    def test_accepts_prebuilt_values(self):
        value = Array(elements=[Scalar(value="a")])
        assert style_param(ParameterStyle.FORM, False, "tags", value) == "tags=a"

    def test_object_value(self):
        value = Object(entries={"k": Scalar(value="v")})
        assert style_param("simple", True, "o", value, location="header") == "k=v"
