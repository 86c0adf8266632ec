"""Tests for whole-token identifier rewriting."""

import pytest

from helpers.fakes import SAMPLE_PSEUDOCODE
from oneiromancer.rewriter import build_pattern, rewrite


class TestRewrite:
    """Test rewrite() behavior on pseudo-code text."""

    @pytest.mark.parametrize("text", ["", "int x;", SAMPLE_PSEUDOCODE])
    def test_empty_map_is_identity(self, text):
        outcome = rewrite(text, {})
        assert outcome.text == text
        assert outcome.substitutions == 0

    def test_whole_token_only(self):
        outcome = rewrite("int cnt = 0; int scnt = 1;", {"cnt": "counter"})
        assert outcome.text == "int counter = 0; int scnt = 1;"
        assert outcome.substitutions == 1

    def test_does_not_touch_longer_tokens(self):
        outcome = rewrite("cntx = cnt + cnt_1 + _cnt;", {"cnt": "counter"})
        assert outcome.text == "cntx = counter + cnt_1 + _cnt;"

    def test_swap_is_atomic(self):
        outcome = rewrite("a + b", {"a": "b", "b": "a"})
        assert outcome.text == "b + a"
        assert outcome.substitutions == 2

    def test_chain_does_not_cascade(self):
        outcome = rewrite("x = y; y = z;", {"x": "y", "y": "z"})
        assert outcome.text == "y = z; z = z;"

    def test_prefix_names_do_not_shadow(self):
        outcome = rewrite("v1 = v10 + v1;", {"v1": "first", "v10": "tenth"})
        assert outcome.text == "first = tenth + first;"
        assert outcome.per_name == {"v1": 2, "v10": 1}

    def test_idempotent_on_disjoint_vocabularies(self):
        renames = {"a1": "buffer", "a2": "length", "v2": "total"}
        once = rewrite(SAMPLE_PSEUDOCODE, renames).text
        assert rewrite(once, renames).text == once

    def test_missing_key_is_noop(self):
        outcome = rewrite("int a;", {"a": "alpha", "missing": "found"})
        assert outcome.text == "int alpha;"
        assert outcome.substitutions == 1
        assert outcome.unmatched == ["missing"]

    def test_regex_metacharacters_are_escaped(self):
        outcome = rewrite("a.b = ab + a+;", {"a.b": "field", "a+": "plus"})
        assert outcome.text == "field = ab + plus;"

    def test_dot_key_does_not_match_arbitrary_character(self):
        outcome = rewrite("axb + a.b", {"a.b": "member"})
        assert outcome.text == "axb + member"

    def test_backslashes_in_replacement_are_literal(self):
        outcome = rewrite("int v1;", {"v1": r"\1\g<0>"})
        assert outcome.text == r"int \1\g<0>;"

    def test_identity_rename_is_not_counted(self):
        outcome = rewrite("int i;", {"i": "i"})
        assert outcome.text == "int i;"
        assert outcome.substitutions == 0
        assert outcome.per_name == {"i": 1}
        assert outcome.unmatched == []

    def test_empty_key_is_ignored(self):
        outcome = rewrite("int v1;", {"": "oops", "v1": "value"})
        assert outcome.text == "int value;"
        assert "" not in outcome.per_name

    def test_strings_and_comments_are_renamed_too(self):
        text = 'v1 = 0; // v1 counter\nputs("v1");'
        outcome = rewrite(text, {"v1": "count"})
        assert outcome.text == 'count = 0; // count counter\nputs("count");'
        assert outcome.substitutions == 3

    def test_non_ascii_letters_extend_a_token(self):
        outcome = rewrite("int \u00e9cnt = cnt; // cnt\u00e9", {"cnt": "counter"})
        assert outcome.text == "int \u00e9cnt = counter; // cnt\u00e9"
        assert outcome.substitutions == 1

    def test_sample_function(self):
        renames = {"a1": "buffer", "a2": "length", "v2": "total", "i": "index"}
        outcome = rewrite(SAMPLE_PSEUDOCODE, renames)
        assert "buffer[index]" in outcome.text
        assert "total += buffer[index];" in outcome.text
        assert "sub_140001000" in outcome.text
        assert "// ebx" in outcome.text
        assert outcome.unmatched == []


class TestBuildPattern:
    """Test pattern construction."""

    def test_no_names(self):
        assert build_pattern([]) is None
        assert build_pattern([""]) is None

    def test_longest_first(self):
        pattern = build_pattern(["v1", "v10"])
        assert "v10|v1" in pattern.pattern
