import pytest

from visualcoder.compiler import compile_graph, generate
from visualcoder.compiler.emitters import Language, UnsupportedLanguage, get_emitter, parse_language
from visualcoder.compiler.emitters.base import CodeWriter, DeclarationTracker
from visualcoder.compiler.emitters.python import format_value, split_post_increments, to_python_op
from visualcoder.compiler.ir import (
    STATEMENT_TYPES,
    ArrayDeclareSize,
    ArrayDeclareValues,
    ClassDefine,
    For,
    FunctionCall,
    FunctionDefine,
    If,
    InvalidIR,
    ObjectCreate,
    Print,
    Program,
    Switch,
    SwitchCase,
    Unknown,
    VariableDeclare,
    VariableUpdate,
)


def _render(language, *body, classes=(), functions=(), block_scoped=False):
    program = Program(classes=list(classes), functions=list(functions), body=list(body))
    return get_emitter(language, block_scoped_declarations=block_scoped).emit(program)


def _lines(source):
    return [line.strip() for line in source.splitlines()]


# ── Skeletons ────────────────────────────────────────────────────────────────

EMPTY_PROGRAMS = {
    "csharp": (
        "using System;\n"
        "using System.Collections.Generic;\n"
        "\n"
        "namespace GeneratedCode {\n"
        "    public class Program {\n"
        "        public static void Main(string[] args) {\n"
        "        }\n"
        "    }\n"
        "}\n"
    ),
    "cpp": (
        "#include <iostream>\n"
        "#include <string>\n"
        "#include <vector>\n"
        "#include <algorithm>\n"
        "\n"
        "using namespace std;\n"
        "\n"
        "int main() {\n"
        "    return 0;\n"
        "}\n"
    ),
    "java": (
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        "    }\n"
        "}\n"
    ),
    "python": (
        "def main():\n"
        "    pass\n"
        "\n"
        "\n"
        'if __name__ == "__main__":\n'
        "    main()\n"
    ),
}


@pytest.mark.parametrize("language", list(EMPTY_PROGRAMS))
def test_empty_program_skeleton(language):
    assert _render(language) == EMPTY_PROGRAMS[language]


# ── Declarations ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("language, first, second", [
    ("csharp", "int x = 5;", "x = 10;"),
    ("cpp",    "int x = 5;", "x = 10;"),
    ("java",   "int x = 5;", "x = 10;"),
    ("python", "x = 5",      "x = 10"),
])
def test_variable_declared_once(language, first, second):
    source = _render(
        language,
        VariableDeclare(name="x", value="5", data_type="int"),
        VariableDeclare(name="x", value="10", data_type="int"),
    )
    lines = _lines(source)

    assert first in lines
    assert second in lines
    assert lines.index(first) < lines.index(second)
    assert sum(1 for line in lines if line.startswith("int x")) == (0 if language == "python" else 1)


@pytest.mark.parametrize("language, expected", [
    ("csharp", ['string s = "hi";', "bool b = true;", "char c = 'a';"]),
    ("cpp",    ['string s = "hi";', "bool b = true;", "char c = 'a';"]),
    ("java",   ['String s = "hi";', "boolean b = true;", "char c = 'a';"]),
    ("python", ['s = "hi"', "b = True", 'c = "a"']),
])
def test_typed_literals(language, expected):
    source = _render(
        language,
        VariableDeclare(name="s", value="hi", data_type="string"),
        VariableDeclare(name="b", value="True", data_type="boolean"),
        VariableDeclare(name="c", value="a", data_type="char"),
    )
    lines = _lines(source)
    for line in expected:
        assert line in lines


def test_already_quoted_string_is_not_quoted_twice():
    source = _render("java", VariableDeclare(name="s", value='"hi"', data_type="String"))
    assert 'String s = "hi";' in _lines(source)


@pytest.mark.parametrize("language, expected", [
    ("csharp", "var y = 3;"),
    ("cpp",    "auto y = 3;"),
    ("java",   "var y = 3;"),
])
def test_missing_type_is_inferred(language, expected):
    assert expected in _lines(_render(language, VariableDeclare(name="y", value="3")))


def test_user_types_pass_through():
    source = _render("csharp", VariableDeclare(name="pet", value="other", data_type="Dog"))
    assert "Dog pet = other;" in _lines(source)


def test_empty_value_declares_without_initialiser():
    assert "int z;" in _lines(_render("java", VariableDeclare(name="z", data_type="int")))
    assert "z = None" in _lines(_render("python", VariableDeclare(name="z", data_type="int")))


def test_block_scoped_declarations():
    body = [
        If(condition="flag", body=[VariableDeclare(name="x", value="1", data_type="int")]),
        VariableDeclare(name="x", value="2", data_type="int"),
    ]

    function_scoped = _lines(_render("csharp", *body))
    block_scoped = _lines(_render("csharp", *body, block_scoped=True))

    assert "x = 2;" in function_scoped
    assert "int x = 2;" not in function_scoped
    assert "int x = 1;" in block_scoped
    assert "int x = 2;" in block_scoped


def test_functions_track_declarations_separately():
    func = FunctionDefine(name="f", body=[VariableDeclare(name="x", value="1", data_type="int")])
    source = _render("java", VariableDeclare(name="x", value="0", data_type="int"), functions=[func])

    lines = _lines(source)
    assert "int x = 0;" in lines
    assert "int x = 1;" in lines


# ── Arrays and objects ───────────────────────────────────────────────────────

@pytest.mark.parametrize("language, values_line, size_line", [
    ("csharp", "int[] nums = { 1, 2, 3 };", "int[] buf = new int[8];"),
    ("cpp",    "int nums[] = {1, 2, 3};",   "int buf[8] = {};"),
    ("java",   "int[] nums = {1, 2, 3};",   "int[] buf = new int[8];"),
    ("python", "nums = [1, 2, 3]",          "buf = [0] * 8"),
])
def test_arrays(language, values_line, size_line):
    source = _render(
        language,
        ArrayDeclareValues(name="nums", data_type="int", values=["1", "2", "3"]),
        ArrayDeclareSize(name="buf", data_type="int", size="8"),
    )
    lines = _lines(source)
    assert values_line in lines
    assert size_line in lines


@pytest.mark.parametrize("language, expected", [
    ("csharp", "object[] xs = { 1 };"),
    ("cpp",    "int xs[] = {1};"),
    ("java",   "Object[] xs = {1};"),
])
def test_untyped_array_element_fallback(language, expected):
    assert expected in _lines(_render(language, ArrayDeclareValues(name="xs", values=["1"])))


def test_array_reassignment():
    first = ArrayDeclareValues(name="nums", data_type="int", values=["1"])
    again = ArrayDeclareValues(name="nums", data_type="int", values=["2"])

    assert "nums = new int[] { 2 };" in _lines(_render("csharp", first, again))
    assert "nums = new int[]{2};" in _lines(_render("java", first, again))
    assert "// Warning: cannot reassign C-style array nums" in _lines(_render("cpp", first, again))


def test_cpp_object_creation():
    lines = _lines(_render(
        "cpp",
        ObjectCreate(var="d", class_name="Dog"),
        ObjectCreate(var="e", class_name="Dog", args=["1", '"rex"']),
    ))
    assert "Dog d;" in lines
    assert 'Dog e(1, "rex");' in lines


def test_object_creation_other_languages():
    stmt = ObjectCreate(var="d", class_name="Dog", args=["3"])
    assert "Dog d = new Dog(3);" in _lines(_render("java", stmt))
    assert "Dog d = new Dog(3);" in _lines(_render("csharp", stmt))
    assert "d = Dog(3)" in _lines(_render("python", stmt))


# ── Unknown statements ───────────────────────────────────────────────────────

@pytest.mark.parametrize("language, placeholder", [
    ("csharp", "// Unsupported node type for C#: teleport"),
    ("cpp",    "// Unsupported node type for C++: teleport"),
    ("java",   "// Unsupported node type for Java: teleport"),
    ("python", "pass  # Unsupported node type for Python: teleport"),
])
def test_unknown_statement_placeholder(language, placeholder, caplog):
    source = _render(language, Print(value="1"), Unknown(source_kind="teleport"), Print(value="2"))

    lines = _lines(source)
    assert lines.count(placeholder) == 1
    printed = [i for i, line in enumerate(lines) if "1" in line or "2" in line]
    assert printed[0] < lines.index(placeholder) < printed[-1]
    assert "teleport" in caplog.text


# ── Full programs ────────────────────────────────────────────────────────────

def _class_program():
    return dict(
        classes=[ClassDefine(name="Dog", base="Animal", members=[
            FunctionDefine(name="bark", body=[Print(value='"Woof"')]),
        ])],
    )


def test_java_class_program():
    source = _render(
        "java",
        ObjectCreate(var="d", class_name="Dog"),
        FunctionCall(name="d.bark"),
        **_class_program(),
    )

    assert source == (
        "class Dog extends Animal {\n"
        "    public void bark() {\n"
        '        System.out.println("Woof");\n'
        "    }\n"
        "}\n"
        "\n"
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        "        Dog d = new Dog();\n"
        "        d.bark();\n"
        "    }\n"
        "}\n"
    )


def test_cpp_class_header():
    lines = _render("cpp", **_class_program()).splitlines()
    start = lines.index("class Dog : public Animal {")
    assert lines[start + 1] == "public:"
    assert lines[start + 2] == "    void bark() {"
    assert "};" in lines


def test_csharp_functions_are_static_members_of_program():
    greet = FunctionDefine(name="greet", params=[("string", "name")],
                           body=[Print(value="name")])

    source = _render("csharp", FunctionCall(name="greet", args=['"Bob"']), functions=[greet])

    assert source == (
        "using System;\n"
        "using System.Collections.Generic;\n"
        "\n"
        "namespace GeneratedCode {\n"
        "    public class Program {\n"
        "        public static void Main(string[] args) {\n"
        '            greet("Bob");\n'
        "        }\n"
        "\n"
        "        public static void greet(string name) {\n"
        "            Console.WriteLine(name);\n"
        "        }\n"
        "    }\n"
        "}\n"
    )


def test_cpp_switch_uses_braced_cases():
    switch = Switch(subject="day",
                    cases=[SwitchCase(value="1", body=[Print(value='"one"')])],
                    default_body=[Print(value='"other"')])

    source = _render("cpp", switch)

    assert (
        "int main() {\n"
        "    switch (day) {\n"
        "        case 1: {\n"
        '            cout << "one" << endl;\n'
        "            break;\n"
        "        }\n"
        "        default: {\n"
        '            cout << "other" << endl;\n'
        "            break;\n"
        "        }\n"
        "    }\n"
        "    return 0;\n"
        "}\n"
    ) in source


def test_java_switch_and_loops():
    source = _render(
        "java",
        Switch(subject="n", cases=[SwitchCase(value="2", body=[Print(value="n")])]),
        For(var="i", bound="10", body=[Print(value="i")]),
    )
    lines = source.splitlines()

    assert "        switch (n) {" in lines
    assert "            case 2:" in lines
    assert "                System.out.println(n);" in lines
    assert "                break;" in lines
    assert "default:" not in source
    assert "        for (int i = 0; i < 10; i++) {" in lines


def test_python_program():
    greet = FunctionDefine(name="greet", params=[("String", "name")], body=[Print(value="name")])
    source = _render(
        "python",
        VariableDeclare(name="x", value="5", data_type="int"),
        If(condition="x > 3 && flag", body=[Print(value='"big"')], else_body=[Print(value="x")]),
        For(var="i", bound="3", body=[Print(value="i")]),
        FunctionCall(name="greet", args=['"Bob"']),
        functions=[greet],
        **_class_program(),
    )

    assert source == (
        "class Dog(Animal):\n"
        "    def bark(self):\n"
        '        print("Woof")\n'
        "\n"
        "\n"
        "def greet(name):\n"
        "    print(name)\n"
        "\n"
        "\n"
        "def main():\n"
        "    x = 5\n"
        "    if x > 3 and flag:\n"
        '        print("big")\n'
        "    else:\n"
        "        print(x)\n"
        "    for i in range(3):\n"
        "        print(i)\n"
        '    greet("Bob")\n'
        "\n"
        "\n"
        'if __name__ == "__main__":\n'
        "    main()\n"
    )


def test_python_switch_becomes_if_chain():
    switch = Switch(subject="day",
                    cases=[SwitchCase(value="1", body=[Print(value='"one"')]),
                           SwitchCase(value="2")],
                    default_body=[Print(value="x")])

    lines = _render("python", switch).splitlines()
    start = lines.index("    if day == 1:")

    assert lines[start:start + 6] == [
        "    if day == 1:",
        '        print("one")',
        "    elif day == 2:",
        "        pass",
        "    else:",
        "        print(x)",
    ]


def test_python_switch_without_cases():
    assert "pass  # empty switch" in _lines(_render("python", Switch(subject="x")))
    only_default = _render("python", Switch(subject="x", default_body=[Print(value="1")]))
    assert "    print(1)" in only_default.splitlines()


def test_python_members_and_empty_class():
    method = FunctionDefine(name="fill", params=[("int", "arr[]"), ("int", "n")])
    source = _render("python", classes=[
        ClassDefine(name="Box", members=[method]),
        ClassDefine(name="Empty"),
    ])
    lines = source.splitlines()

    assert "    def fill(self, arr, n):" in lines
    assert "        pass" in lines
    assert lines[lines.index("class Empty:") + 1] == "    pass"


def test_python_expression_rewrites():
    lines = _lines(_render(
        "python",
        VariableDeclare(name="n", value="arr.length", data_type="int"),
        VariableUpdate(name="y", value="a[i++]"),
        VariableUpdate(name="q", value="a / b"),
        VariableDeclare(name="name", value="Bob Smith", data_type="string"),
    ))

    assert "n = len(arr)" in lines
    assert lines[lines.index("y = a[i]") + 1] == "i += 1"
    assert "q = a // b" in lines
    assert 'name = "Bob Smith"' in lines


# ── Python value helpers ─────────────────────────────────────────────────────

@pytest.mark.parametrize("text, expected", [
    ("a && b", "a and b"),
    ("a || !b", "a or not b"),
    ("a != b", "a != b"),
    ("done == false", "done == False"),
    ('"a && b"', '"a && b"'),
])
def test_to_python_op(text, expected):
    assert to_python_op(text) == expected


def test_split_post_increments():
    assert split_post_increments("a[i++] + b[j--]") == ("a[i] + b[j]", ["i += 1", "j -= 1"])


@pytest.mark.parametrize("value, data_type, expected", [
    ("", None, "None"),
    ("true", None, "True"),
    ("FALSE", "bool", "False"),
    ("3.5", None, "3.5"),
    ("count", None, "count"),
    ("hello world", None, "'hello world'"),
])
def test_python_format_value(value, data_type, expected):
    assert format_value(value, data_type) == expected


# ── Writer and tracker ───────────────────────────────────────────────────────

def test_code_writer_indentation():
    w = CodeWriter(comment_prefix="//")
    w.writeln("a {")
    with w.indented():
        w.comment("note")
        w.blank()
    w.writeln("}")
    w.pop()

    assert w.result() == "a {\n    // note\n\n}"
    assert w.indent == 0


def test_declaration_tracker_scopes():
    tracker = DeclarationTracker(block_scoped=True)
    assert tracker.declare("a")
    with tracker.block():
        assert not tracker.declare("a")
        assert tracker.declare("b")
    assert not tracker.is_declared("b")


# ── Selection and input forms ────────────────────────────────────────────────

def test_parse_language_is_case_insensitive():
    assert parse_language(" JAVA ") is Language.JAVA


def test_unsupported_language():
    with pytest.raises(UnsupportedLanguage):
        generate("rust", Program())


def test_generate_rejects_invalid_ir():
    with pytest.raises(InvalidIR):
        generate("java", {"body": []})


@pytest.mark.parametrize("language", list(Language))
def test_json_ir_renders_like_program(language):
    program = Program(
        classes=_class_program()["classes"],
        body=[
            VariableDeclare(name="x", value="1", data_type="int"),
            Switch(subject="x", cases=[SwitchCase(value="1", body=[Print(value="x")])]),
            Unknown(source_kind="teleport"),
        ],
    )
    assert generate(language, program.to_dict(), False) == generate(language, program, False)


def test_compile_graph_end_to_end(graph):
    graph.node("a", "assign", varName="total", value="0", dataType="int")
    graph.node("loop", "for", varName="i", range="3")
    graph.node("inc", "assign2", varName="total", value="total + i")
    graph.node("p", "print", value="total")
    graph.chain("start", "a", "loop")
    graph.edge("loop", "inc", "loopBody")
    graph.edge("loop", "p", "next")

    lines = compile_graph(graph.nodes, graph.edges, "cpp").splitlines()

    assert lines[lines.index("int main() {"):] == [
        "int main() {",
        "    int total = 0;",
        "    for (int i = 0; i < 3; i++) {",
        "        total = total + i;",
        "    }",
        "    cout << total << endl;",
        "    return 0;",
        "}",
    ]


def test_compile_graph_checks_language_first():
    with pytest.raises(UnsupportedLanguage):
        compile_graph(None, None, "cobol")


def test_python_bare_text_uses_single_quotes():
    lines = _lines(_render("python", Print(value="Hello there"), Print(value='"kept"')))

    assert "print('Hello there')" in lines
    assert 'print("kept")' in lines


@pytest.mark.parametrize("language", list(Language))
def test_every_statement_kind_has_a_hook(language):
    emitter = get_emitter(language, block_scoped_declarations=False)
    for stmt_type in STATEMENT_TYPES:
        assert callable(getattr(emitter, f"emit_{stmt_type.kind}", None)), stmt_type.__name__


def test_code_writer_lines_track_written_output():
    w = CodeWriter()
    w.extend(["a", "b"])
    with w.indented(2):
        w.writeln("c")

    assert w.lines() == ["a", "b", "        c"]
    assert w.result() == "\n".join(w.lines())
