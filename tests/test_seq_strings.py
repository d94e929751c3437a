import random

import pytest

from src.lib import seq_strings as ss


def test_strsplit_default_delimiter() -> None:
    assert ss.strsplit("GGGG&CCCC&AAAAA") == ["GGGG", "CCCC", "AAAAA"]


def test_strsplit_no_delimiter_returns_input() -> None:
    assert ss.strsplit("GGGGCCCC") == ["GGGGCCCC"]


def test_strsplit_drops_empty_tokens() -> None:
    assert ss.strsplit("A,,B,", ",") == ["A", "B"]


def test_strjoin() -> None:
    assert ss.strjoin(["GG", "CC"], "&") == "GG&CC"
    assert ss.strjoin(["GG", "CC"]) == "GGCC"


def test_random_string_reproducible() -> None:
    a = ss.random_string(20, "ACGU", random.Random(7))
    b = ss.random_string(20, "ACGU", random.Random(7))
    assert a == b
    assert len(a) == 20
    assert set(a) <= set("ACGU")


def test_random_string_rejects_bad_args() -> None:
    with pytest.raises(ValueError):
        ss.random_string(-1, "ACGU")
    with pytest.raises(ValueError):
        ss.random_string(5, "")


def test_hamming_distance_common_prefix() -> None:
    assert ss.hamming_distance("ACGU", "ACGA") == 1
    assert ss.hamming_distance("ACGU", "AC") == 0


def test_hamming_distance_bound() -> None:
    assert ss.hamming_distance_bound("AAAA", "AUUU", 2) == 1
    assert ss.hamming_distance_bound("AAAA", "UUUU", 0) == 0
    assert ss.hamming_distance_bound("AAAA", "UU", 10) == 2


def test_sequence_conversions() -> None:
    assert ss.seq_to_rna("ACGTacgt") == "ACGUacgu"
    assert ss.seq_toupper("acgu") == "ACGU"
    assert ss.seq_ungapped("AC-G_U~A.") == "ACGUA"


def test_cut_point_insert() -> None:
    assert ss.cut_point_insert("GGGGCCCC", 5) == "GGGG&CCCC"
    assert ss.cut_point_insert("GGGGCCCC", 0) == "GGGGCCCC"
    assert ss.cut_point_insert("GGGGCCCC", -3) == "GGGGCCCC"
    with pytest.raises(ValueError):
        ss.cut_point_insert("GG", 5)


def test_cut_point_remove() -> None:
    assert ss.cut_point_remove("GGGG&CCCC") == ("GGGGCCCC", 5)
    assert ss.cut_point_remove("GGGGCCCC") == ("GGGGCCCC", -1)


def test_cut_point_insert_remove_inverse() -> None:
    joined = ss.cut_point_insert("AAAUUU", 4)
    assert ss.cut_point_remove(joined) == ("AAAUUU", 4)
