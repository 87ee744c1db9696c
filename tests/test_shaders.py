import pytest

from splatkit.shaders import ShaderLibrary, ShaderSourceError


def test_load_file_reads_text(tmp_path):
    path = tmp_path / "a.glsl"
    path.write_text("void main() {}\n")
    assert ShaderLibrary().load_file(path) == "void main() {}\n"


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ShaderSourceError):
        ShaderLibrary().load_file(tmp_path / "missing.glsl")


def test_resolve_quoted_include():
    lib = ShaderLibrary()
    lib.register_include("common", "float f;")
    out = lib.resolve_includes('#include "common"\nvoid main();')
    assert out == (
        "// BEGIN include: common\n"
        "float f;\n"
        "// END include: common\n"
        "void main();\n"
    )


def test_resolve_angle_include_in_comment():
    lib = ShaderLibrary()
    lib.register_include("defs", "int x;")
    out = lib.resolve_includes("// #include <defs>\n")
    assert "int x;\n" in out
    assert "#include" not in out


def test_unknown_include_kept():
    lib = ShaderLibrary()
    source = '#include "nothing"\n'
    assert lib.resolve_includes(source) == source


def test_resolve_adds_trailing_newline_and_empty():
    lib = ShaderLibrary()
    assert lib.resolve_includes("a\nb") == "a\nb\n"
    assert lib.resolve_includes("") == ""


def test_register_include_overwrites():
    lib = ShaderLibrary()
    lib.register_include("x", "old")
    lib.register_include("x", "new")
    assert lib.includes == {"x": "new"}


def test_inject_after_version():
    lib = ShaderLibrary()
    src = "#version 300 es\nvoid main();\n"
    out = lib.inject_after_version(src, "#define A 1")
    assert out == "#version 300 es\n\n#define A 1\nvoid main();\n"


def test_inject_without_newline_unchanged():
    lib = ShaderLibrary()
    assert lib.inject_after_version("#version 300 es", "x") == "#version 300 es"