"""Unit tests for cmdlens.tokenizer."""

import pytest
from pydantic import ValidationError

from cmdlens.models import Token, TokenKind
from cmdlens.tokenizer import KNOWN_COMMANDS, join_tokens, tokenize

C = TokenKind.COMMAND
O = TokenKind.OPTION
A = TokenKind.ARGUMENT
P = TokenKind.PIPE
R = TokenKind.REDIRECT
OP = TokenKind.OPERATOR


def _visible(command: str, **kwargs) -> list[tuple[TokenKind, str]]:
    """Return (kind, text) pairs for every non-whitespace token."""
    return [
        (token.kind, token.text)
        for token in tokenize(command, **kwargs)
        if token.kind is not TokenKind.WHITESPACE
    ]


class TestBasicClassification:
    def test_command_and_option(self):
        assert _visible("ls -la") == [(C, "ls"), (O, "-la")]

    def test_long_option(self):
        assert _visible("grep --color=auto main") == [(C, "grep"), (O, "--color=auto"), (A, "main")]

    def test_pipeline_resets_command_start(self):
        assert _visible("ps aux | grep nginx | awk '{print $2}'") == [
            (C, "ps"),
            (A, "aux"),
            (P, "|"),
            (C, "grep"),
            (A, "nginx"),
            (P, "|"),
            (C, "awk"),
            (A, "'{print $2}'"),
        ]

    def test_unknown_leading_word_is_argument(self):
        assert _visible("frobnicate ls") == [(A, "frobnicate"), (A, "ls")]

    def test_known_word_after_first_segment_is_argument(self):
        assert _visible("sudo ls") == [(A, "sudo"), (A, "ls")]

    def test_command_lookup_is_case_sensitive(self):
        assert _visible("LS") == [(A, "LS")]

    def test_urls_and_paths_are_arguments(self):
        assert _visible("curl https://example.com/a?b=1 ./out/file.txt") == [
            (C, "curl"),
            (A, "https://example.com/a?b=1"),
            (A, "./out/file.txt"),
        ]

    def test_consecutive_pipes_are_separate_tokens(self):
        assert _visible("ls | | wc") == [(C, "ls"), (P, "|"), (P, "|"), (C, "wc")]


class TestOperatorsAndRedirects:
    def test_semicolon_resets_command_start(self):
        assert _visible("cd src ; ls -la") == [
            (C, "cd"),
            (A, "src"),
            (OP, ";"),
            (C, "ls"),
            (O, "-la"),
        ]

    def test_background_ampersand_is_operator_and_resets(self):
        assert _visible("sleep 10 & ls") == [(A, "sleep"), (A, "10"), (OP, "&"), (C, "ls")]

    def test_and_or_operators(self):
        assert _visible("make && make install || echo failed") == [
            (C, "make"),
            (OP, "&&"),
            (A, "make"),
            (A, "install"),
            (OP, "||"),
            (A, "echo"),
            (A, "failed"),
        ]

    @pytest.mark.parametrize("redirect", [">", ">>", "<", "<<", "&1", ">2", "<>"])
    def test_redirects(self, redirect):
        assert _visible(f"cat notes.txt {redirect} out.txt")[2] == (R, redirect)

    def test_fd_prefixed_redirect_degrades_to_argument(self):
        assert _visible("make 2> errors.log")[1] == (A, "2>")


class TestQuotes:
    def test_self_closed_quote_is_single_argument(self):
        assert _visible('find . -name "*.js"') == [
            (C, "find"),
            (A, "."),
            (O, "-name"),
            (A, '"*.js"'),
        ]

    def test_quoted_span_keeps_inner_whitespace(self):
        tokens = tokenize('grep "hello   world" notes.txt')
        assert [t.text for t in tokens] == ["grep", " ", '"hello   world"', " ", "notes.txt"]
        assert tokens[2].kind is A

    def test_other_quote_char_does_not_close(self):
        assert _visible('echo "it\'s fine" now') == [(A, "echo"), (A, '"it\'s fine"'), (A, "now")]

    def test_unterminated_quote_runs_to_end(self):
        assert _visible("echo 'never closed here") == [(A, "echo"), (A, "'never closed here")]

    def test_quoted_first_word_clears_command_start(self):
        assert _visible("'my tool' ls") == [(A, "'my tool'"), (A, "ls")]


class TestEdgeCases:
    def test_empty_input(self):
        assert tokenize("") == []

    def test_whitespace_only_input(self):
        assert tokenize(" \t ") == [Token(text=" \t ", kind=TokenKind.WHITESPACE)]

    def test_leading_and_trailing_whitespace_are_tokens(self):
        tokens = tokenize("  ls  ")
        assert [t.kind for t in tokens] == [TokenKind.WHITESPACE, C, TokenKind.WHITESPACE]

    def test_injected_known_commands(self):
        assert _visible("deploy now", known_commands=frozenset({"deploy"})) == [
            (C, "deploy"),
            (A, "now"),
        ]
        assert _visible("ls", known_commands=frozenset()) == [(A, "ls")]

    def test_default_allow_list_covers_common_tools(self):
        assert {"git", "docker", "kubectl", "cargo", "grep"} <= KNOWN_COMMANDS

    def test_tokens_are_immutable(self):
        token = tokenize("ls")[0]
        with pytest.raises(ValidationError):
            token.text = "rm"


@pytest.mark.parametrize(
    "command",
    [
        "",
        "   ",
        "ls -la",
        "  ls   -la  ",
        "ps aux | grep nginx | awk '{print $2}'",
        "echo 'a  b'\tc",
        'echo "unterminated   tail  ',
        "tar -czf backup.tar.gz src/ && echo done ; ls >> log 2>&1",
        "a|b;c",
    ],
)
def test_reconstruction_is_lossless(command):
    assert join_tokens(tokenize(command)) == command


def test_tokenize_is_deterministic():
    command = "git log --oneline | head -n 5 > out.txt"
    assert tokenize(command) == tokenize(command)
