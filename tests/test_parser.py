import pytest

from cpdetect.config import SourceType
from cpdetect.errors import SourceReadError
from cpdetect.parser import NORMALIZERS, get_normalizer


def normalized(source_type: SourceType, code: str) -> list:
    lines = get_normalizer(source_type).normalize_bytes(code.encode("utf-8"), "f")
    return [(line.line_number, line.text) for line in lines]


def test_every_source_type_has_a_normalizer():
    assert set(NORMALIZERS) == set(SourceType)
    for source_type, cls in NORMALIZERS.items():
        assert cls.source_type is source_type
        assert cls.EXTENSIONS


def test_python_comments_and_whitespace():
    code = (
        "import os  # standard library\n"
        "# a full comment line\n"
        "\n"
        "def f(x):\n"
        "    s = \"a # b\"\n"
        "    return   x  +  1\n"
    )

    assert normalized(SourceType.PYTHON, code) == [
        (1, "import os"),
        (4, "def f(x):"),
        (5, "s = \"a # b\""),
        (6, "return x + 1"),
    ]


def test_java_block_and_line_comments():
    code = (
        "/**\n"
        " * Docs.\n"
        " */\n"
        "public class A {\n"
        "    String u = \"http://example.com\"; // trailing\n"
        "    /* inline */ int x = 1;\n"
        "}\n"
    )

    assert normalized(SourceType.JAVA, code) == [
        (4, "public class A {"),
        (5, "String u = \"http://example.com\";"),
        (6, "int x = 1;"),
        (7, "}"),
    ]


def test_c_multiline_comment_keeps_line_numbers():
    code = (
        "int add(int a, int b) { // sum\n"
        "    /* first\n"
        "       second */ return a + b;\n"
        "}\n"
    )

    assert normalized(SourceType.C, code) == [
        (1, "int add(int a, int b) {"),
        (3, "return a + b;"),
        (4, "}"),
    ]


def test_cpp_trailing_comment():
    code = "int main() { return 0; } // done\n"
    assert normalized(SourceType.CPP, code) == [(1, "int main() { return 0; }")]


def test_rust_comment_markers_inside_strings_survive():
    code = (
        "/// doc comment\n"
        "fn main() {\n"
        "    let s = \"// not a comment\";\n"
        "}\n"
    )

    assert normalized(SourceType.RUST, code) == [
        (2, "fn main() {"),
        (3, "let s = \"// not a comment\";"),
        (4, "}"),
    ]


def test_javascript_comments():
    code = (
        "const url = \"http://x\"; // c\n"
        "/* block */\n"
        "function f() { return url; }\n"
    )

    assert normalized(SourceType.JAVASCRIPT, code) == [
        (1, "const url = \"http://x\";"),
        (3, "function f() { return url; }"),
    ]


def test_char_count_and_offset_come_from_original_text():
    content = b"x = 1  # note\r\n\r\ny = 2\n"
    lines = get_normalizer(SourceType.PYTHON).normalize_bytes(content, "f.py")

    assert [(l.text, l.char_count, l.offset) for l in lines] == [
        ("x = 1", 13, 0),
        ("y = 2", 5, 17),
    ]
    assert all(l.path == "f.py" for l in lines)


def test_normalize_reads_file(tmp_path):
    path = tmp_path / "m.py"
    path.write_text("a = 1\n\nb = 2\n")

    lines = get_normalizer(SourceType.PYTHON).normalize(path, "m.py")

    assert [(l.path, l.line_number, l.text) for l in lines] == [("m.py", 1, "a = 1"), ("m.py", 3, "b = 2")]


def test_missing_file_raises_source_read_error(tmp_path):
    with pytest.raises(SourceReadError) as exc:
        get_normalizer(SourceType.PYTHON).normalize(tmp_path / "gone.py", "gone.py")
    assert exc.value.path == "gone.py"
