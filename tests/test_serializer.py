# tests/test_serializer.py
import random

import pytest
from sexpfmt import Atom, SList, parse, render, render_text, needs_quote
from sexpfmt.core.errors import AllocationFailure
from sexpfmt.syntax import serializer as serializer_mod


def L(*children):
    return SList(list(children))


def A(s):
    return Atom(s.encode() if isinstance(s, str) else s)


@pytest.mark.parametrize(
    "atom, text",
    [
        ("foo", b"foo"),
        ("a b", b'"a b"'),
        ('say "hi"', b'"say ""hi"""'),
        ("", b'""'),
        ("(x)", b'"(x)"'),
        ("tab\there", b'"tab\there"'),
        (";comment-like", b'";comment-like"'),
        ("a;b", b"a;b"),
        ("kebab-case:42", b"kebab-case:42"),
    ],
)
def test_atom_quoting(atom, text):
    assert render(A(atom)) == text


def test_non_ascii_and_control_bytes_are_quoted():
    assert needs_quote(b"\x01")
    assert needs_quote(b"\x7f")
    assert needs_quote("é".encode())
    assert not needs_quote(b"~!@#$%^&*_+-=[]{}|\\:'<>,.?/")


def test_list_rendering():
    assert render(SList()) == b"()"
    assert render(L(A("a"), L(), L(A("b"), A("c d")))) == b'(a () (b "c d"))'


def test_render_text_decodes():
    assert render_text(L(A("x"), A(""))) == '(x "")'


def test_render_rejects_non_nodes_without_partial_output():
    bad = L(A("ok"), "not a node")
    with pytest.raises(TypeError):
        render(bad)
    with pytest.raises(TypeError):
        render("bare string")


def test_memory_error_becomes_allocation_failure(monkeypatch):
    def boom(atom):
        raise MemoryError

    monkeypatch.setattr(serializer_mod, "render_atom", boom)
    with pytest.raises(AllocationFailure):
        render(L(A("a")))


def test_deep_tree_renders_without_recursion():
    depth = 5000
    node = SList()
    for _ in range(depth):
        node = SList([node])
    out = render(node)
    assert out == b"(" * (depth + 1) + b")" * (depth + 1)


def _random_tree(rng, depth=0):
    if depth > 4 or rng.random() < 0.4:
        n = rng.randrange(0, 6)
        alphabet = b'ab "()\n;\t\x00\xff'
        return Atom(bytes(rng.choice(alphabet) for _ in range(n)))
    return SList([_random_tree(rng, depth + 1) for _ in range(rng.randrange(0, 4))])


def test_round_trip_and_canonical_fixed_point():
    rng = random.Random(1234)
    for _ in range(300):
        tree = _random_tree(rng)
        text = render(tree)
        res = parse(text)
        assert res.tree == tree
        assert res.end == len(text)
        assert render(res.tree) == text


def test_canonical_form_of_messy_input():
    src = b'(  a\n  ; comment\n  "b"   ("c d"  ""  )  )'
    assert render(parse(src).tree) == b'(a b ("c d" ""))'
