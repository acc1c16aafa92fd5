import pytest

from mcmeta.meta.flags import (
    FlagDirective,
    build_meta_flags,
    with_binary,
    with_cas,
    with_compare_cas,
    with_delta,
    with_flag,
    with_hit,
    with_initial_value,
    with_last_access,
    with_mode,
    with_no_bump,
    with_opaque,
    with_quiet,
    with_recache,
    with_set_flag,
    with_set_invalid,
    with_set_ttl,
    with_size,
    with_ttl,
    with_value,
    with_vivify,
)


def test_order_is_preserved():
    assert build_meta_flags([with_cas(), with_ttl()]) == "c t"
    assert build_meta_flags([with_ttl(), with_cas()]) == "t c"


def test_argument_tokens():
    assert with_opaque("abc123").token == "Oabc123"
    assert with_set_flag(42).token == "F42"
    assert with_compare_cas(-7).token == "C-7"
    assert build_meta_flags([with_opaque("abc123"), with_set_flag(42), with_compare_cas(-7)]) == "Oabc123 F42 C-7"


def test_every_constructor_key():
    built = [
        (with_binary(), "b"),
        (with_cas(), "c"),
        (with_flag(), "f"),
        (with_hit(), "h"),
        (with_last_access(), "l"),
        (with_opaque("x"), "Ox"),
        (with_quiet(), "q"),
        (with_size(), "s"),
        (with_ttl(), "t"),
        (with_no_bump(), "u"),
        (with_value(), "v"),
        (with_vivify(30), "N30"),
        (with_recache(15), "R15"),
        (with_set_ttl(3600), "T3600"),
        (with_compare_cas(99), "C99"),
        (with_set_flag(0), "F0"),
        (with_set_invalid(), "I"),
        (with_mode("E"), "ME"),
        (with_initial_value(10), "J10"),
        (with_delta(1), "D1"),
    ]
    for d, token in built:
        assert d.token == token
    assert build_meta_flags(d for d, _ in built).split(" ") == [t for _, t in built]


def test_empty_list_builds_empty_string():
    assert build_meta_flags([]) == ""


def test_duplicates_are_not_filtered():
    assert build_meta_flags([with_cas(), with_cas(), with_quiet()]) == "c c q"


def test_numeric_bounds():
    assert with_set_flag(2**32 - 1).token == f"F{2**32 - 1}"
    assert with_delta(2**64 - 1).token == f"D{2**64 - 1}"
    assert with_compare_cas(-(2**63)).token == f"C{-(2**63)}"
    with pytest.raises(ValueError):
        with_set_flag(2**32)
    with pytest.raises(ValueError):
        with_set_ttl(-1)
    with pytest.raises(ValueError):
        with_compare_cas(2**63)
    with pytest.raises(TypeError):
        with_delta(True)
    with pytest.raises(TypeError):
        with_vivify("30")  # type: ignore[arg-type]


def test_text_arguments_reject_whitespace():
    with pytest.raises(ValueError):
        with_opaque("a b")
    with pytest.raises(ValueError):
        with_opaque("")
    with pytest.raises(ValueError):
        with_mode("E\n")


def test_directive_is_immutable_and_keys_are_closed():
    d = with_cas()
    with pytest.raises(AttributeError):
        d.key = "t"  # type: ignore[misc]
    with pytest.raises(ValueError):
        FlagDirective("Q")


def test_directive_arguments_are_checked():
    with pytest.raises(ValueError):
        FlagDirective("O", "a b")
    with pytest.raises(ValueError):
        FlagDirective("O")
    with pytest.raises(ValueError):
        FlagDirective("c", "junk")
    for arg in ("junk", "1_000", "+5", "007", " 5", str(2**64)):
        with pytest.raises(ValueError):
            FlagDirective("T", arg)
    with pytest.raises(ValueError):
        FlagDirective("F", str(2**32))
    assert FlagDirective("C", "-7") == with_compare_cas(-7)
    assert FlagDirective("O", "abc") == with_opaque("abc")


def test_built_line_splits_back_into_tokens():
    directives = [FlagDirective("O", "x1"), FlagDirective("c"), FlagDirective("T", "30"), with_mode("E")]
    assert build_meta_flags(directives).split(" ") == [d.token for d in directives]
