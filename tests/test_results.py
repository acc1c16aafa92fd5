import pytest

from mcmeta.meta.errors import E_BAD_NUMERIC, E_UNKNOWN_FLAG, MalformedNumericArgumentError, UnknownFlagError
from mcmeta.meta.results import MetaResult, obtain_meta_flags_results


def test_basic_decode():
    mr = obtain_meta_flags_results(["O123", "k456", "t3600", "s10"])
    assert mr == MetaResult(opaque="123", key="456", ttl=3600, size=10)
    assert mr.cas_token is None
    assert not mr.won and not mr.stale and not mr.hit


def test_all_fields():
    mr = obtain_meta_flags_results(["W", "X", "kfoo", "Oop", "c-5", "f7", "h1", "l12", "s3", "t60"])
    assert mr.to_dict() == {
        "won": True,
        "stale": True,
        "key": "foo",
        "opaque": "op",
        "cas_token": -5,
        "flags": 7,
        "hit": True,
        "last_access": 12,
        "size": 3,
        "ttl": 60,
    }


def test_cas_zero_is_present():
    assert obtain_meta_flags_results(["c0"]).cas_token == 0
    assert obtain_meta_flags_results(["c+12"]).cas_token == 12


def test_hit_uses_first_character():
    assert obtain_meta_flags_results(["h1"]).hit is True
    assert obtain_meta_flags_results(["h0"]).hit is False
    assert obtain_meta_flags_results(["h10"]).hit is True


def test_non_numeric_argument_fails():
    with pytest.raises(MalformedNumericArgumentError) as ei:
        obtain_meta_flags_results(["Wh1", "ttoken"])
    assert ei.value.code == E_BAD_NUMERIC
    assert ei.value.flag == "t"
    assert ei.value.argument == "oken"
    assert ei.value.partial is not None and ei.value.partial.won is True


def test_partial_state_before_cas_failure():
    with pytest.raises(MalformedNumericArgumentError) as ei:
        obtain_meta_flags_results(["W", "h1", "t30", "s120", "f7", "cXYZ"])
    p = ei.value.partial
    assert p is not None
    assert (p.won, p.hit, p.ttl, p.size, p.flags) == (True, True, 30, 120, 7)
    # presence is only recorded on a successful parse
    assert p.cas_token is None


def test_unknown_flag():
    with pytest.raises(UnknownFlagError) as ei:
        obtain_meta_flags_results(["W", "Q"])
    assert ei.value.flag == "Q"
    assert ei.value.code == E_UNKNOWN_FLAG
    assert "Invalid flag: Q" in str(ei.value)


def test_empty_token_is_unknown():
    with pytest.raises(UnknownFlagError) as ei:
        obtain_meta_flags_results([""])
    assert ei.value.flag == ""


def test_empty_hit_argument_fails():
    with pytest.raises(MalformedNumericArgumentError):
        obtain_meta_flags_results(["h"])


@pytest.mark.parametrize(
    "token",
    ["t-1", "t 5", "t1_000", "t٣", "s", "f4294967296", "l18446744073709551616", "c9223372036854775808", "c--1"],
)
def test_bad_numeric_text(token):
    with pytest.raises(MalformedNumericArgumentError):
        obtain_meta_flags_results([token])


def test_width_limits():
    mr = obtain_meta_flags_results(["f4294967295", "l18446744073709551615", "c-9223372036854775808"])
    assert mr.flags == 2**32 - 1
    assert mr.last_access == 2**64 - 1
    assert mr.cas_token == -(2**63)


def test_last_occurrence_wins():
    mr = obtain_meta_flags_results(["c1", "f1", "h1", "l1", "s1", "t1", "c2", "f2", "h0", "l2", "s2", "t2"])
    assert (mr.cas_token, mr.flags, mr.hit, mr.last_access, mr.size, mr.ttl) == (2, 2, False, 2, 2, 2)


def test_won_is_order_dependent():
    assert obtain_meta_flags_results(["W", "Z"]).won is False
    assert obtain_meta_flags_results(["Z", "W"]).won is True


def test_independent_parses_are_equal():
    tokens = ["W", "kk", "c3", "t5"]
    assert obtain_meta_flags_results(tokens) == obtain_meta_flags_results(tokens)
    assert obtain_meta_flags_results([]) == MetaResult()


def test_build_then_split_round_trip():
    from mcmeta.meta.flags import build_meta_flags, with_cas, with_opaque, with_ttl

    line = build_meta_flags([with_cas(), with_ttl(), with_opaque("abc")])
    assert line.split(" ") == ["c", "t", "Oabc"]
