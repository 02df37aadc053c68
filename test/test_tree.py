"""

    test_tree.py

    Tests for the Tree class and the bracketed tree reader

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

from semhead import Tree, basic_category, read_trees


BILL = "(ROOT (S (NP (NNP Bill)) (VP (VBZ is) (ADJP (JJ big))) (. .)))"


def test_read() -> None:
    t = Tree.from_string(BILL)
    assert t.label == "ROOT"
    assert len(t) == 1
    s = t[0]
    assert s.label == "S"
    assert s.is_phrasal
    assert s.text == "Bill is big ."
    assert s.preterminal_yield == ["NNP", "VBZ", "JJ", "."]
    assert [leaf.label for leaf in s.leaves] == ["Bill", "is", "big", "."]
    np = s["NP"]
    assert np is s[0]
    assert np.is_phrasal
    nnp = np[0]
    assert nnp.is_preterminal
    assert not nnp.is_phrasal
    assert nnp.tag == "NNP"
    assert nnp.word == "Bill"
    leaf = nnp[0]
    assert leaf.is_leaf
    assert not leaf.is_preterminal
    assert not leaf.is_phrasal
    assert leaf.word == "Bill"
    assert leaf.tag is None
    assert leaf.children == []
    assert len(leaf) == 0
    assert s["VP"]["ADJP"].text == "big"
    assert s[2].label == "."
    assert s[2].word == "."
    # Phrasal nodes have neither a tag nor a word
    assert s.tag is None
    assert s.word is None


def test_multiline_and_wrapper() -> None:
    t = Tree.from_string(
        """
        ( (S
            (NP-SBJ (PRP It))
            (VP (VBZ works))
            (. .)) )
        """
    )
    # The empty outer label becomes ROOT
    assert t.label == "ROOT"
    assert t[0].label == "S"
    assert t[0][0].label == "NP-SBJ"
    assert t[0][0].basic_category == "NP"
    assert t.text == "It works ."


def test_read_trees() -> None:
    trees = list(read_trees("(NP (DT the) (NN dog)) (NP (DT a) (NN cat))"))
    assert len(trees) == 2
    assert trees[0].text == "the dog"
    assert trees[1].text == "a cat"
    assert list(read_trees("   ")) == []


def test_malformed() -> None:
    with pytest.raises(ValueError):
        Tree.from_string("(NP (DT the)")
    with pytest.raises(ValueError):
        Tree.from_string("(NP (DT the)))")
    with pytest.raises(ValueError):
        Tree.from_string("(NP )")
    with pytest.raises(ValueError):
        Tree.from_string("dog")
    with pytest.raises(ValueError):
        # Two trees
        Tree.from_string("(NN dog) (NN cat)")
    with pytest.raises(ValueError):
        # No tree
        Tree.from_string("")


def test_rendering() -> None:
    t = Tree.from_string(BILL)
    assert str(t) == BILL
    assert t.bracket_form == BILL
    np = Tree.from_string("(NP (DT the) (NN dog))")
    assert np.view == "NP\n+-DT: 'the'\n+-NN: 'dog'"
    assert repr(np) == "<Tree with label NP and length 2>"
    assert repr(np[0][0]) == "<Tree for leaf 'the'>"


def test_dict() -> None:
    t = Tree.from_string(BILL)
    d = t.to_dict()
    assert d["l"] == "ROOT"
    assert d["p"][0]["l"] == "S"
    assert d["p"][0]["p"][0]["p"][0]["p"][0] == {"w": "Bill"}
    t2 = Tree.from_dict(d)
    assert t2.bracket_form == t.bracket_form
    with pytest.raises(ValueError):
        Tree.from_dict({"l": "NP"})


def test_navigation() -> None:
    t = Tree.from_string(BILL)
    # ROOT, S, NP, NNP, Bill, VP, VBZ, is, ADJP, JJ, big, ., .
    assert len(list(t.descendants)) == 12
    assert [pt.tag for pt in t.preterminals] == ["NNP", "VBZ", "JJ", "."]
    with pytest.raises(KeyError):
        t[0]["PP"]
    with pytest.raises(IndexError):
        t[0][0][0][0][0]
    with pytest.raises(IndexError):
        t[0][5]


def test_basic_category() -> None:
    assert basic_category("NP") == "NP"
    assert basic_category("NP-SBJ") == "NP"
    assert basic_category("NP-SBJ-1") == "NP"
    assert basic_category("NP=2") == "NP"
    assert basic_category("PP-LOC-CLR") == "PP"
    assert basic_category("S|<NP>") == "S"
    assert basic_category("-NONE-") == "-NONE-"
    assert basic_category("-LRB-") == "-LRB-"
    assert basic_category(",") == ","
    assert basic_category("") == ""
    assert basic_category(None) is None


def test_match_tag() -> None:
    leaf = Tree("dog")
    assert not leaf.match_tag("dog")
    np_sbj = Tree("NP-SBJ", [Tree("PRP", [Tree("It")])])
    assert np_sbj.match_tag("NP")
    assert np_sbj.match_tag("NP-SBJ")
    assert not np_sbj.match_tag("NP-TMP")
    assert not np_sbj.match_tag("N")
    np = Tree("NP", [Tree("PRP", [Tree("It")])])
    assert np.match_tag("NP")
    assert not np.match_tag("NP-SBJ")
    np_gap = Tree("NP=2", [Tree("PRP", [Tree("It")])])
    assert np_gap.match_tag("NP")
    none = Tree("-NONE-", [Tree("*T*")])
    assert none.match_tag("-NONE-")
