import pytest

from c_ast import Member, Primitive
from naming import anonymous_name, camelize, member_label, module_path, sanitize_identifier, underscore


class TestCase:

    @pytest.mark.parametrize("word, expected", [
        ("my_point", "MyPoint"),
        ("Color", "Color"),
        ("config_opts", "ConfigOpts"),
        ("sys/stat", "Sys::Stat"),
    ])
    def test_camelize(self, word, expected):
        assert camelize(word) == expected

    @pytest.mark.parametrize("word, expected", [
        ("FooBar", "foo_bar"),
        ("HTTPServer", "http_server"),
        ("gtk-window", "gtk_window"),
        ("plain", "plain"),
    ])
    def test_underscore(self, word, expected):
        assert underscore(word) == expected

    def test_sanitize_identifier(self):
        assert sanitize_identifier("foo.bar-baz") == "foo_bar_baz"
        assert sanitize_identifier("3d/math") == "_3d/math"


class TestModulePath:

    def test_install_prefix_is_stripped(self):
        assert module_path("/usr/include/sys/stat.h") == ["Sys", "Stat"]
        assert module_path("/usr/local/include/curl/curl.h") == ["Curl", "Curl"]
        assert module_path("/opt/include/zlib.h") == ["Zlib"]

    def test_relative_header(self):
        assert module_path("my_lib.h") == ["MyLib"]

    def test_camel_case_file_names(self):
        assert module_path("include/SDL/SDLVideo.h") == ["Include", "Sdl", "SdlVideo"]


class TestSyntheticNames:

    def test_counter_is_spelled_out(self):
        assert anonymous_name("struct", 1) == "anonymous_struct_one"
        assert anonymous_name("enum", 21) == "anonymous_enum_twenty_one"

    def test_member_label(self):
        assert member_label(Member("x", Primitive("int")), 0) == "x"
        assert member_label(Member(None, Primitive("int")), 3) == "anonymous_3"
