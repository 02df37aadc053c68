"""

    test_settings.py

    Tests for configuration file reading and the head rule tables

    Copyright (C) 2021 by Miðeind ehf.

    This software is licensed under the MIT License:

        Permission is hereby granted, free of charge, to any person
        obtaining a copy of this software and associated documentation
        files (the "Software"), to deal in the Software without restriction,
        including without limitation the rights to use, copy, modify, merge,
        publish, distribute, sublicense, and/or sell copies of the Software,
        and to permit persons to whom the Software is furnished to do so,
        subject to the following conditions:

        The above copyright notice and this permission notice shall be
        included in all copies or substantial portions of the Software.

        THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
        EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
        MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
        IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY
        CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
        TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE
        SOFTWARE OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.

"""

import logging

import pytest

from semhead import ConfigError, HeadRules, Settings, TreebankTags, Vocabulary
from semhead.basics import LineReader


def test_tag_sets() -> None:
    assert TreebankTags.PUNCTUATION == {"''", "``", "-LRB-", "-RRB-", ".", ":", ","}
    assert TreebankTags.VERBAL == {
        "TO", "MD", "VB", "VBD", "VBP", "VBZ", "VBG", "VBN", "AUX", "AUXG"
    }
    assert TreebankTags.UNAMBIGUOUS_AUXILIARY == {"TO", "MD", "AUX", "AUXG"}


def test_vocabularies() -> None:
    for w in ("will", "wo", "sha", "ca", "'ve", "ve", "na", "hvae", "gotten", "to"):
        assert w in Vocabulary.AUXILIARIES
    assert "is" not in Vocabulary.AUXILIARIES
    for w in ("be", "is", "'s", "s", "ai", "art", "get", "got"):
        assert w in Vocabulary.PASSIVE_AUXILIARIES
    assert "gotten" not in Vocabulary.PASSIVE_AUXILIARIES
    for w in ("is", "wase", "seems", "appeared", "remain", "resembles", "became"):
        assert w in Vocabulary.COPULAR_VERBS
    assert "get" not in Vocabulary.COPULAR_VERBS
    # Word forms are stored in lower case
    assert all(w == w.lower() for w in Vocabulary.COPULAR_VERBS)


def test_settings() -> None:
    assert Settings.loaded
    assert Settings.TREAT_COPULA_AS_HEAD is False
    assert logging.getLogger("semhead").level == logging.NOTSET


def test_head_rules() -> None:
    collins = HeadRules.COLLINS
    assert collins["NP"][0] == (
        "rightdis",
        ("NN", "NNP", "NNPS", "NNS", "NML", "NX", "POS", "JJR"),
    )
    assert len(collins["NP"]) == 5
    # Aliases copy the rules of another category
    assert collins["NX"] == collins["NP"]
    assert collins["TOP"] == collins["ROOT"]
    # Continuation lines
    assert len(collins["ADJP"]) == 5
    assert collins["ADJP"][-1] == ("left", ("ADVP", "NP"))
    assert collins["FRAG"] == (("right", ()),)
    assert collins["VP"][0][1][:5] == ("TO", "VBD", "VBN", "MD", "VBZ")

    semantic = HeadRules.SEMANTIC
    assert semantic["NP"][-1] == ("left", ("POS",))
    assert semantic["NML"] == semantic["NP"]
    assert semantic["NML"] != collins["NP"]
    assert semantic["UCP"] == (("left", ()),)
    assert semantic["WHADJP"] == (
        ("left", ("ADJP", "JJ", "JJR", "WP")),
        ("right", ("RB",)),
        ("right", ()),
    )
    assert semantic["WHADVP"] == (("rightdis", ("WRB", "WHADVP", "RB", "JJ")),)
    assert semantic["S"] == (
        ("left", ("VP", "S", "FRAG", "SBAR", "ADJP", "UCP", "TO")),
        ("right", ("NP",)),
    )
    assert semantic["CONJP"] == (("right", ("CC", "VB", "JJ", "RB", "IN")),)
    assert semantic["EMBED"] == (("right", ("INTJ",)),)
    assert "VP" not in semantic


def test_parse_head_rules() -> None:
    assert HeadRules.parse("XX left A B | right") == (
        "XX",
        (("left", ("A", "B")), ("right", ())),
    )
    assert HeadRules.parse("XX = NP") == ("XX", "NP")
    with pytest.raises(ConfigError):
        HeadRules.parse("XX sideways A")
    with pytest.raises(ConfigError):
        HeadRules.parse("XX")
    with pytest.raises(ConfigError):
        HeadRules.parse("XX left A || right B")
    with pytest.raises(ConfigError):
        HeadRules.parse("XX = ")
    table = dict()
    HeadRules.add(table, "YY leftexcept , .")
    assert table["YY"] == (("leftexcept", (",", ".")),)
    HeadRules.add(table, "ZZ = YY")
    assert table["ZZ"] == table["YY"]
    with pytest.raises(ConfigError):
        HeadRules.add(table, "WW = QQ")


def test_settings_errors() -> None:
    with pytest.raises(ConfigError):
        Settings._handle_settings("frobnicate = true")
    with pytest.raises(ConfigError):
        Settings._handle_settings("debug = maybe")
    with pytest.raises(ConfigError):
        Settings._handle_settings("debug")
    with pytest.raises(ConfigError):
        Settings._handle_settings("treat_copula_as_head = none")
    assert Settings.TREAT_COPULA_AS_HEAD is False


def test_debug_setting() -> None:
    logger = logging.getLogger("semhead")
    Settings._handle_settings("debug = false")
    assert logger.level == logging.NOTSET
    try:
        Settings._handle_settings("Debug = True")
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)


def test_config_error() -> None:
    e = ConfigError("Something is wrong")
    assert str(e) == "Something is wrong"
    e.set_pos("Semhead.conf", 17)
    assert str(e) == "File Semhead.conf, line 17: Something is wrong"
    # The first position sticks
    e.set_pos("Other.conf", 3)
    assert str(e) == "File Semhead.conf, line 17: Something is wrong"


def test_line_reader(tmp_path) -> None:
    # Included files are read in place
    rdr = LineReader("config/Semhead.conf", package_name="semhead")
    lines = [s.strip() for s in rdr.lines()]
    assert "[settings]" in lines
    assert "[head_rules]" in lines
    assert "[copular_verbs]" in lines
    assert "$include HeadRules.conf" not in lines

    inc = tmp_path / "inc.conf"
    inc.write_text("x\n", encoding="utf-8")
    main = tmp_path / "main.conf"
    main.write_text("a \\\n  b\n$include inc.conf\nc\n", encoding="utf-8")
    rdr = LineReader(str(main))
    assert [s.split() for s in rdr.lines()] == [["a", "b"], ["x"], ["c"]]

    with pytest.raises(ConfigError):
        list(LineReader("config/Missing.conf", package_name="semhead").lines())
    main.write_text("a\n$include missing.conf\n", encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        list(LineReader(str(main)).lines())
    assert excinfo.value.line == 2


def test_reread() -> None:
    nouns = HeadRules.COLLINS["NP"]
    Settings.read("config/Semhead.conf", force=True)
    assert Settings.loaded
    assert HeadRules.COLLINS["NP"] == nouns
    assert "became" in Vocabulary.COPULAR_VERBS
    assert TreebankTags.PUNCTUATION == {"''", "``", "-LRB-", "-RRB-", ".", ":", ","}
