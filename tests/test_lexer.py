import pytest

from btconfig.core.errors import ConfigSyntaxError
from btconfig.core.models import Line
from btconfig.parsing.lexer import ConfigLexer
from btconfig.parsing.normalizer import ConfigNormalizer


def tokenize(text):
    (line,) = ConfigNormalizer().normalize([text])
    return ConfigLexer().tokenize(line)


@pytest.mark.parametrize("text, expected, composite", [
    ("-value", ["-", "value"], False),
    ("--:", ["--", ":"], True),
    ("-key:", ["-", "key", ":"], True),
    ("---key=value", ["---", "key", "=", "value"], False),
    ("-key=", ["-", "key", "=", ""], False),
    ("--=1", ["--", "", "=", "1"], False),
    ('-url="http://x"', ["-", "url", "=", "http://x"], False),
])
def test_token_shapes(text, expected, composite):
    token_line = tokenize(text)
    assert token_line.tokens == expected
    assert token_line.composite is composite


def test_depth_is_length_of_marker_run():
    assert tokenize("----deep=1").depth == 4


def test_colon_inside_value_is_not_a_block_opener():
    token_line = tokenize("-time=12:30")
    assert token_line.tokens == ["-", "time", "=", "12:30"]


def test_assignment_followed_by_colon_stays_a_leaf():
    token_line = tokenize("-key=:")
    assert token_line.tokens == ["-", "key", "=", ":"]
    assert token_line.composite is False


def test_quoted_markers_are_literal():
    token_line = tokenize('-expr="a=b:"')
    assert token_line.tokens == ["-", "expr", "=", "a=b:"]


def test_quoted_colon_bare_value_is_not_a_block():
    token_line = tokenize('-":"')
    assert token_line.tokens == ["-", ":"]
    assert token_line.composite is False


def test_quoted_dash_is_not_depth():
    token_line = tokenize('--"-5"')
    assert token_line.depth == 2
    assert token_line.tokens == ["--", "-5"]


def test_too_many_assignments_is_syntax_error():
    with pytest.raises(ConfigSyntaxError, match="invalid amount of tokens: 6") as info:
        tokenize("-a=b=c")
    assert info.value.tokens == ["-", "a", "=", "b", "=", "c"]


def test_assignment_before_block_marker_is_syntax_error():
    with pytest.raises(ConfigSyntaxError, match="invalid amount of tokens: 5"):
        tokenize("-a=b:")


def test_missing_depth_marker_is_syntax_error():
    with pytest.raises(ConfigSyntaxError, match="depth marker"):
        ConfigLexer().tokenize(Line("key=value"))


def test_only_depth_markers_is_syntax_error():
    with pytest.raises(ConfigSyntaxError, match="nothing but depth markers"):
        ConfigLexer().tokenize(Line("---"))


def test_tokenize_all_keeps_order():
    lines = ConfigNormalizer().normalize(["-a=1", "-b:", "--c=2"])
    token_lines = ConfigLexer().tokenize_all(lines)
    assert [t.tokens[1] for t in token_lines] == ["a", "b", "c"]
