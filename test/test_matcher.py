"""

    test_matcher.py

    Tests for the tree pattern matching functionality in matcher.py

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

import pytest

from semhead import Tree, match_pattern


@pytest.fixture(scope="module")
def t() -> Tree:
    """ Provide a module-scoped tree as a test fixture """
    return Tree.from_string(
        "(S (NP (DT The) (NN dog)) (VP (VBD barked) (ADVP (RB loudly))) (. .))"
    )


def test_single_items(t: Tree) -> None:
    assert t.match("S")
    assert not t.match("NP")
    assert t.match(".")
    assert match_pattern(t, "S")
    nn = t[0][1]
    assert nn.match('"dog"')
    assert nn.match('"DOG"')
    assert not nn.match('@"dog"')
    assert nn[0].match('@"Dog"')
    assert not nn[0].match("NN")
    assert t[0].match('"the dog"')


def test_containment(t: Tree) -> None:
    assert t.match("S > { NP VP }")
    assert t.match("S > { VP NP }")
    assert t.match("S > [ NP VP ]")
    assert not t.match("S > [ VP NP ]")
    assert t.match("S > [ NP VP . $ ]")
    assert not t.match("S > [ NP VP $ ]")
    assert t.match("S > [ NP .* $ ]")
    assert t.match("S > NP")
    assert not t.match("S > PP")
    assert t.match("S >> { RB }")
    assert not t.match("S > { RB }")
    assert t.match("S >> [ DT NN ]")
    assert t.match('S >> { @"dog" }')
    assert t.match('S > { "the dog" }')
    assert t.match("S > [ NP > [ DT NN $ ] VP > { ADVP > { RB } } ]")


def test_repeats(t: Tree) -> None:
    assert t.match("S > [ NP+ VP ]")
    assert t.match("S > [ NP? VP ]")
    assert t.match("S > [ VP? NP VP ]")
    assert not t.match("S > [ NP VP+ ADVP ]")
    # Backtracking over .*
    assert t.match("S > [ .* NP VP ]")
    assert t.match("S > [ .* VP . $ ]")
    assert t.match("S > [ .* . $ ]")
    assert not t.match("S > [ .* NP $ ]")


def test_negation(t: Tree) -> None:
    assert t.match("S > [ !VP VP ]")
    assert not t.match("S > [ !NP VP ]")
    assert t.match("S > [ NP !ADVP* $ ]")
    assert not t[1].match("VP > [ VBD !ADVP* $ ]")
    assert t.match("S > { !NP }")


def test_alternatives(t: Tree) -> None:
    assert t.match("( NP | S )")
    assert not t.match("( NP | VP )")
    assert t.match("S > [ ( VBD | NP ) ( VP | PP ) ]")
    assert t.match('S > [ NP ( PP | VP > [ VBD > { ( @"barked" | @"howled" ) } ] ) ]')
    assert not t.match('S > [ NP ( PP | VP > [ VBD > { @"howled" } ] ) ]')


def test_captures(t: Tree) -> None:
    c = t.match_captures("S > [ NP=subj VP=pred > [ VBD=verb .* ] .* ]")
    assert c is not None
    assert c["subj"] is t[0]
    assert c["pred"] is t[1]
    assert c["verb"].word == "barked"
    c = t.match_captures("S=top")
    assert c == {"top": t}
    c = t.match_captures("S > [ ( VP | NP=first ) ]")
    assert c is not None
    assert c["first"] is t[0]
    # Captures from failed branches are not retained
    c = t.match_captures("S > [ .* ( VP=x > { PP } | VP=y ) ]")
    assert c is not None
    assert "x" not in c
    assert c["y"] is t[1]
    assert t.match_captures("S > [ VP=v ]") is None
    assert t.match_captures("S") == {}


def test_macros(t: Tree) -> None:
    context = {
        "past": lambda node: node.label == "VBD",
        "np": "NP",
        "subject": lambda node: "NP",
    }
    assert t[1].match("VP > { %past }", context)
    assert not t[0].match("NP > { %past }", context)
    assert t.match("S > { %np }", context)
    assert t.match("S > [ %subject VP ]", context)
    with pytest.raises(ValueError):
        t.match("S > { %nonexistent }", context)
    with pytest.raises(ValueError):
        t.match("S > { %np }")


def test_search(t: Tree) -> None:
    assert len(list(t.all_matches("NP"))) == 1
    assert len(list(t.all_matches("."))) == 14
    adv = t.first_match("ADVP")
    assert adv is not None
    assert adv.text == "loudly"
    assert t.first_match("PP") is None
    assert t.first_match("NP > { DT }") is t[0]


def test_malformed_patterns(t: Tree) -> None:
    for pattern in (
        "S > [ NP VP",
        "S > NP VP ]",
        "S > { NP* }",
        "S > [ NP $ VP ]",
        "S > { NP $ }",
        "( | NP )",
        "( NP | )",
        "S > [ ( NP VP | VP ) ]",
        "S >",
        "!",
        'S > [ "dog ]',
        "S > [ =subj ]",
    ):
        with pytest.raises(ValueError):
            t.match(pattern)
