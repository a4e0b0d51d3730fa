import pytest

from pgxkit.identifier import Identifier, quote_identifier


@pytest.mark.parametrize(
    "parts, expected",
    [
        (["foo"], '"foo"'),
        (["select"], '"select"'),
        (["foo", "bar"], '"foo"."bar"'),
        (['you should " not do this'], '"you should "" not do this"'),
        (
            ['you should " not do this', "please don't"],
            '"you should "" not do this"."please don\'t"',
        ),
        (["you should \x00not do this"], '"you should not do this"'),
    ],
)
def test_identifier_sanitize(parts, expected):
    assert Identifier(parts).sanitize() == expected


def test_identifier_from_single_string():
    ident = Identifier("people")
    assert ident == ("people",)
    assert ident.sanitize() == '"people"'


def test_empty_identifier():
    assert Identifier().sanitize() == ""


def test_quote_identifier():
    assert quote_identifier('a"b') == '"a""b"'
    assert quote_identifier("plain") == '"plain"'