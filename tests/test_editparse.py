import pytest

from edwood.editparse import (
    ADDR_NOT_REQUIRED,
    ADDRESS_MISSING,
    BAD_ADDR,
    BAD_ADDR_SYNTAX,
    BAD_RHS,
    CD_COMMAND,
    LEFT_BRACE_MISSING,
    LINEX,
    REGEXP_MISSING,
    WORDX,
    Addr,
    BadDelimiterError,
    Cmd,
    CmdParser,
    CountType,
    DefaultAddress,
    EditParseError,
    InvalidCommandError,
    cmdlookup,
    okdelim,
    parse_commands,
)

PARSE_OK = [
    ("\n", Cmd(cmdc="\n")),
    ("a\n", Cmd(cmdc="a", text="\n")),
    ("a\nabc", Cmd(cmdc="a", text="abc\n")),
    ("a\nabc\n.\n", Cmd(cmdc="a", text="abc\n")),
    ("a/abc/\n", Cmd(cmdc="a", text="abc")),
    ("a/a\\bc/\n", Cmd(cmdc="a", text="a\\bc")),
    ("a/a\\nc/\n", Cmd(cmdc="a", text="a\nc")),
    ("a/ab\\\nc/\n", Cmd(cmdc="a", text="ab\\")),
    ("x/abc/\n", Cmd(re="abc", cmd=Cmd(cmdc="p"), cmdc="x")),
    ("s/abc/def/\n", Cmd(re="abc", text="def", num=1, cmdc="s")),
    ("s/abc/def/g\n", Cmd(re="abc", text="def", num=1, flag="g", cmdc="s")),
    ("s2/abc/def/\n", Cmd(re="abc", text="def", num=2, cmdc="s")),
    (
        "/abc/ s//def/\n",
        Cmd(addr=Addr(typ="/", re="abc"), re="abc", text="def", num=1, cmdc="s"),
    ),
    ("{}\n", Cmd(cmdc="{")),
    ("{\nd\nu\n}\n", Cmd(cmd=Cmd(cmdc="d", next=Cmd(cmdc="u", num=1)), cmdc="{")),
    ("B abc.txt\n", Cmd(cmdc="B", text=" abc.txt")),
    ("u\n", Cmd(num=1, cmdc="u")),
    ("u5\n", Cmd(num=5, cmdc="u")),
    ("u-3\n", Cmd(num=-3, cmdc="u")),
]


@pytest.mark.parametrize("text,expected", PARSE_OK)
def test_parse(text, expected):
    assert CmdParser(text).parse(0) == expected


PARSE_ERRORS = [
    ("a/ab\\", EditParseError, BAD_RHS),
    ("a\\abc\\\n", BadDelimiterError, "bad delimiter \\"),
    ("x/abc/j\n", InvalidCommandError, "unknown command j"),
    ("s//xyz/\n", EditParseError, REGEXP_MISSING),
    ("s/abc/def\\", EditParseError, BAD_RHS),
    ("3.,17d\n", EditParseError, BAD_ADDR_SYNTAX),
    ("5u\n", EditParseError, ADDR_NOT_REQUIRED),
    ("j\n", InvalidCommandError, "unknown command j"),
    ("{j}\n", InvalidCommandError, "unknown command j"),
    ("{\nj\n}\n", InvalidCommandError, "unknown command j"),
    ("}\n", EditParseError, LEFT_BRACE_MISSING),
    ("cd\n", InvalidCommandError, f"unknown command {CD_COMMAND}"),
    ("t 42.\n", EditParseError, BAD_ADDR_SYNTAX),
    ("t\n", EditParseError, BAD_ADDR),
    ("g\n", EditParseError, ADDRESS_MISSING),
    ("g\\abc\\\n", BadDelimiterError, "bad delimiter \\"),
]


@pytest.mark.parametrize("text,kind,message", PARSE_ERRORS)
def test_parse_errors(text, kind, message):
    with pytest.raises(kind) as info:
        CmdParser(text).parse(0)
    assert type(info.value) is kind
    assert str(info.value) == message


@pytest.mark.parametrize(
    "text,end,expected",
    [
        (" foo bar\t\n", LINEX, " foo bar\t"),
        (" foo bar\t\nquux", LINEX, " foo bar\t"),
        (" αβγ テスト\t\n世界", LINEX, " αβγ テスト\t"),
        (" foo bar\t\n", WORDX, " foo bar"),
        (" foo bar\t\nquux", WORDX, " foo bar"),
        (" αβγ テスト\t\n世界", WORDX, " αβγ テスト"),
    ],
)
def test_collecttoken(text, end, expected):
    assert CmdParser(text).collecttoken(end) == expected


SIMPLE_OK = [
    ("", None),
    ("\n", None),
    ("#123\n", Addr(typ="#", num=123)),
    ("#\n", Addr(typ="#", num=1)),
    ("42\n", Addr(typ="l", num=42)),
    ("1234567890\n", Addr(typ="l", num=1234567890)),
    ("/abc\n", Addr(typ="/", re="abc")),
    ("/abc/\n", Addr(typ="/", re="abc")),
    ("/a\\/bc/\n", Addr(typ="/", re="a/bc")),
    ("/a\\nbc/\n", Addr(typ="/", re="a\\nbc")),
    ("/a\\\\bc/\n", Addr(typ="/", re="a\\\\bc")),
    ("?abc\n", Addr(typ="?", re="abc")),
    ("?abc?\n", Addr(typ="?", re="abc")),
    ("?a\\?bc?\n", Addr(typ="?", re="a?bc")),
    ("?a\\nbc?\n", Addr(typ="?", re="a\\nbc")),
    ("?a\\\\bc?\n", Addr(typ="?", re="a\\\\bc")),
    ('"abc\n', Addr(typ='"', re="abc")),
    ('"abc"\n', Addr(typ='"', re="abc")),
    (".\n", Addr(typ=".")),
    ("$\n", Addr(typ="$")),
    ("+\n", Addr(typ="+")),
    ("-\n", Addr(typ="-")),
    ("'\n", Addr(typ="'")),
    ("abc\n", None),
    ('"abc" 42\n', Addr(typ='"', re="abc", next=Addr(typ="l", num=42))),
    (".42\n", Addr(typ=".", next=Addr(typ="+", next=Addr(typ="l", num=42)))),
    (
        "42/abc/\n",
        Addr(typ="l", num=42, next=Addr(typ="+", next=Addr(typ="/", re="abc"))),
    ),
    ("+/abc/\n", Addr(typ="+", next=Addr(typ="/", re="abc"))),
    ("-/abc/\n", Addr(typ="-", next=Addr(typ="/", re="abc"))),
    (".+\n", Addr(typ=".", next=Addr(typ="+", num=0))),
    (".-\n", Addr(typ=".", next=Addr(typ="-", num=0))),
]


@pytest.mark.parametrize("text,expected", SIMPLE_OK)
def test_simpleaddr(text, expected):
    assert CmdParser(text).simpleaddr() == expected


@pytest.mark.parametrize(
    "text,message",
    [
        ("42.\n", BAD_ADDR_SYNTAX),
        ("42$\n", BAD_ADDR_SYNTAX),
        ("42'\n", BAD_ADDR_SYNTAX),
        ('42"\n', REGEXP_MISSING),
        ('"abc" "cdf" "efg"\n', BAD_ADDR_SYNTAX),
    ],
)
def test_simpleaddr_errors(text, message):
    with pytest.raises(EditParseError) as info:
        CmdParser(text).simpleaddr()
    assert str(info.value) == message


@pytest.mark.parametrize(
    "text,expected",
    [
        (
            "3,17\n",
            Addr(typ=",", left=Addr(typ="l", num=3), next=Addr(typ="l", num=17)),
        ),
        ("3,\n", Addr(typ=",", left=Addr(typ="l", num=3), next=None)),
        (",17\n", Addr(typ=",", left=None, next=Addr(typ="l", num=17))),
        (
            "37;/abc/\n",
            Addr(typ=";", left=Addr(typ="l", num=37), next=Addr(typ="/", re="abc")),
        ),
    ],
)
def test_compoundaddr(text, expected):
    assert CmdParser(text).compoundaddr() == expected


@pytest.mark.parametrize("text", ["3.,17\n", "3,17.\n", "3,,17\n", "3;;17\n"])
def test_compoundaddr_errors(text):
    with pytest.raises(EditParseError) as info:
        CmdParser(text).compoundaddr()
    assert str(info.value) == BAD_ADDR_SYNTAX


def test_invalid_command_error_message():
    err = InvalidCommandError("j")
    assert str(err) == "unknown command j"
    assert err.command == "j"


def test_bad_delimiter_error_message():
    err = BadDelimiterError("x")
    assert str(err) == "bad delimiter x"
    assert err.delimiter == "x"


def test_cmdlookup():
    spec = cmdlookup("s")
    assert spec.regexp is True
    assert spec.count is CountType.UNSIGNED
    assert cmdlookup("w").defaddr is DefaultAddress.ALL
    assert cmdlookup("X").defcmd == "f"
    assert cmdlookup("j") is None
    assert cmdlookup("{") is None


@pytest.mark.parametrize("c,ok", [("/", True), ("|", True), ("\\", False), ("a", False), ("Z", False), ("5", False)])
def test_okdelim(c, ok):
    assert okdelim(c) is ok


def test_getnum():
    assert CmdParser("-12x").getnum(True) == -12
    assert CmdParser("-12x").getnum(False) == 1
    assert CmdParser("x").getnum(False) == 1


def test_parse_commands_sequence_and_shared_pattern():
    cmds = parse_commands("/abc/d\ns//x/")
    assert cmds == [
        Cmd(addr=Addr(typ="/", re="abc"), cmdc="d"),
        Cmd(re="abc", text="x", num=1, cmdc="s"),
    ]


def test_parse_commands_empty():
    assert parse_commands("") == []


def test_parse_commands_adds_newline():
    assert parse_commands("x/abc/") == [Cmd(re="abc", cmd=Cmd(cmdc="p"), cmdc="x")]