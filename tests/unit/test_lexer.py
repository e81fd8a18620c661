"""Tests for the line tokenizer and block scanner."""


import pytest

from neuro.core.lexer import Delimiter, TokenType, classify_line, find_block_end, tokenize


class TestClassifyLine:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("function f() {", TokenType.FUNCTION),
            ("pinned function f() {", TokenType.PINNED_FUNCTION),
            ("union type Shade = Red | Blue;", TokenType.UNION_TYPE),
            ("type Person = {", TokenType.TYPE),
            ("export a, b", TokenType.EXPORT),
            ("}", TokenType.CLOSE_BRACE),
            ("   }  ", TokenType.CLOSE_BRACE),
            ("", TokenType.BLANK),
            ("    ", TokenType.BLANK),
            ("// just a comment", TokenType.TEXT),
        ],
    )
    def test_classification(self, line: str, expected: TokenType) -> None:
        assert classify_line(line) == expected

    def test_keywords_match_after_leading_whitespace(self) -> None:
        assert classify_line("   function f() {") == TokenType.FUNCTION

    def test_keyword_must_be_whole_word(self) -> None:
        assert classify_line("typeof x") == TokenType.TEXT
        assert classify_line("functional()") == TokenType.TEXT
        assert classify_line("exports = 1") == TokenType.TEXT

    def test_closing_brace_with_semicolon_is_not_close(self) -> None:
        assert classify_line("};") == TokenType.TEXT

    def test_keywords_are_case_sensitive(self) -> None:
        assert classify_line("Function f() {") == TokenType.TEXT


class TestTokenize:
    def test_one_token_per_line_plus_eof(self) -> None:
        tokens = tokenize("function f() {\n}\n")
        assert [t.type for t in tokens] == [
            TokenType.FUNCTION,
            TokenType.CLOSE_BRACE,
            TokenType.EOF,
        ]

    def test_line_numbers_are_one_indexed(self) -> None:
        tokens = tokenize("\n\nexport a")
        assert tokens[2].line == 3
        assert tokens[2].value == "export a"

    def test_only_newline_separates_lines(self) -> None:
        tokens = tokenize("export a\r\nexport b c\x0cd\n")
        assert [t.value for t in tokens[:-1]] == ["export a\r", "export b c\x0cd"]
        assert tokens[-1].line == 3

    def test_empty_text(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_terminates(self) -> None:
        tokens = tokenize("union type A =\n  B | C;  \n")
        assert not tokens[0].terminates
        assert tokens[1].terminates


class TestFindBlockEnd:
    def _tokens(self, text: str):
        return tokenize(text)

    def test_brace_mode_finds_closing_line(self) -> None:
        tokens = self._tokens("function f() {\n    // c\n}\nexport f")
        assert find_block_end(tokens, 0, Delimiter.BRACE) == 2

    def test_offset_is_relative_to_start(self) -> None:
        tokens = self._tokens("export a\n\ntype T = {\n  a: string;\n}")
        assert find_block_end(tokens, 2, Delimiter.BRACE) == 2

    def test_brace_mode_not_found(self) -> None:
        tokens = self._tokens("function f() {\n    return 1;")
        assert find_block_end(tokens, 0, Delimiter.BRACE) is None

    def test_terminator_mode_single_line(self) -> None:
        tokens = self._tokens("union type Shade = Red | Green;")
        assert find_block_end(tokens, 0, Delimiter.TERMINATOR) == 0

    def test_terminator_mode_multi_line(self) -> None:
        tokens = self._tokens("union type Shade =\n  | Red\n  | Green;\nexport Shade")
        assert find_block_end(tokens, 0, Delimiter.TERMINATOR) == 2

    def test_terminator_mode_not_found(self) -> None:
        tokens = self._tokens("union type Shade = Red | Green")
        assert find_block_end(tokens, 0, Delimiter.TERMINATOR) is None

    def test_first_closing_brace_wins_without_nesting(self) -> None:
        text = "function f() {\n    if (x) {\n}\n    return 1;\n}"
        tokens = self._tokens(text)
        assert find_block_end(tokens, 0, Delimiter.BRACE) == 2

    def test_indented_inner_brace_also_closes(self) -> None:
        text = "function f() {\n    if (x) {\n    }\n}"
        tokens = self._tokens(text)
        assert find_block_end(tokens, 0, Delimiter.BRACE) == 2
