"""

    Semhead: Semantic head finding for English constituency trees

    Tree module

    Copyright (C) 2021 Miðeind ehf.

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

    This module implements Tree, a class for Penn Treebank style
    constituency trees, and read_trees(), a reader for trees in
    the usual bracketed format:

        (ROOT
            (S
                (NP (NNP Bill))
                (VP (VBZ is)
                    (ADJP (JJ big)))
                (. .)))

    A leaf is a Tree whose children are None; its label is the word form.
    A preterminal is a Tree with a single leaf child; its label is the
    part-of-speech tag. All other internal nodes are phrasal.

    Trees can be queried for pattern matches. The pattern
    matching functionality is implemented in matcher.py.

"""

from typing import (
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
    cast,
)

import re
from itertools import chain

from typing_extensions import TypedDict

from .basics import basic_category
from .matcher import Captures, ContextDict, match_captures, match_pattern


class TreeNode(TypedDict, total=False):

    """ A dictionary representing a node in a Tree.
        This scheme is intended for external consumption,
        such as export in JSON format to clients. """

    # Category label of an internal node
    l: str
    # Word form of a leaf
    w: str
    # Child nodes
    p: List["TreeNode"]


class Tree:

    """ A node in a constituency parse tree """

    def __init__(self, label: str, children: Optional[Iterable["Tree"]] = None) -> None:
        self._label = label
        self._children: Optional[List[Tree]] = (
            None if children is None else list(children)
        )

    def __str__(self) -> str:
        """ Return the bracketed form of this subtree """
        return self.bracket_form

    def __repr__(self) -> str:
        """ Return a compact representation of this subtree """
        if self.is_leaf:
            return "<Tree for leaf '{0}'>".format(self._label)
        return "<Tree with label {0} and length {1}>".format(self._label, len(self))

    @classmethod
    def from_string(cls, txt: str) -> "Tree":
        """ Construct a Tree from its bracketed string representation """
        trees = list(read_trees(txt))
        if len(trees) != 1:
            raise ValueError(
                "Expected exactly one tree in string, found {0}".format(len(trees))
            )
        return trees[0]

    @classmethod
    def from_dict(cls, d: TreeNode) -> "Tree":
        """ Construct a Tree from its dictionary representation """
        if "w" in d:
            return cls(d["w"])
        if "l" not in d or "p" not in d:
            raise ValueError("Tree node dictionary must have either 'w' or 'l' and 'p'")
        return cls(d["l"], [cls.from_dict(child) for child in d["p"]])

    def to_dict(self) -> TreeNode:
        """ Return a dictionary representation of this subtree """
        if self._children is None:
            return TreeNode(w=self._label)
        return TreeNode(l=self._label, p=[child.to_dict() for child in self._children])

    @property
    def label(self) -> str:
        """ The label of this node: a category, a tag or a word form """
        return self._label

    @property
    def basic_category(self) -> str:
        """ The label of this node, with any functional annotations
            such as -SBJ, -TMP or =2 removed """
        return cast(str, basic_category(self._label))

    @property
    def children(self) -> List["Tree"]:
        """ The children of this node; empty for a leaf """
        return self._children if self._children is not None else []

    @property
    def is_leaf(self) -> bool:
        """ Is this a leaf, i.e. a word? """
        return self._children is None

    @property
    def is_preterminal(self) -> bool:
        """ Is this a part-of-speech node having a single leaf child? """
        ch = self._children
        return ch is not None and len(ch) == 1 and ch[0].is_leaf

    @property
    def is_phrasal(self) -> bool:
        """ Is this an internal node above the preterminal level? """
        ch = self._children
        return bool(ch) and not self.is_preterminal

    @property
    def tag(self) -> Optional[str]:
        """ The part-of-speech tag of a preterminal, or None otherwise """
        return self._label if self.is_preterminal else None

    @property
    def word(self) -> Optional[str]:
        """ The word form of a leaf or a preterminal, or None otherwise """
        if self._children is None:
            return self._label
        if self.is_preterminal:
            return self._children[0]._label
        return None

    @property
    def leaves(self) -> Iterator["Tree"]:
        """ Generate all leaves (words) under this node, in order """
        if self._children is None:
            yield self
            return
        for ch in self._children:
            yield from ch.leaves

    @property
    def preterminals(self) -> Iterator["Tree"]:
        """ Generate all preterminals under this node, including
            this node itself if it is a preterminal """
        if self.is_preterminal:
            yield self
            return
        for ch in self.children:
            yield from ch.preterminals

    @property
    def preterminal_yield(self) -> List[str]:
        """ Return a list of the tags of all preterminals under this node """
        return [pt._label for pt in self.preterminals]

    @property
    def text(self) -> str:
        """ Return the words under this node, separated by spaces """
        return " ".join(leaf._label for leaf in self.leaves)

    @property
    def descendants(self) -> Iterator["Tree"]:
        """ Generator for all descendants of this tree, in-order """
        for child in self.children:
            yield child
            yield from child.descendants

    @property
    def deep_children(self) -> Iterator[List["Tree"]]:
        """ Generator of the child lists of this tree and its subtrees """
        yield self.children
        for ch in self.children:
            yield from ch.deep_children

    def match_tag(self, item: Union[str, List[str]]) -> bool:
        """ Return True if the given item matches the label of this subtree
            either fully or partially. NP matches NP, NP-SBJ and NP=2,
            while NP-SBJ matches NP-SBJ and NP-SBJ-1 but not NP. """
        if self._children is None:
            # Leaves are matched by their word form, not by tags
            return False
        if isinstance(item, str):
            if item == self._label:
                return True
            item = item.split("-")
        tags = self._label.split("-")
        # Compare the first part using the basic category, so that
        # gap indices (NP=2) and similar annotations don't get in the way
        tags[0] = self.basic_category.split("-")[0] if tags[0] else tags[0]
        return tags[0 : len(item)] == item

    def _view(self, level: int) -> str:
        """ Return a string containing an indented map of this subtree """
        if level == 0:
            indent = ""
        else:
            indent = "  " * (level - 1) + "+-"
        if self.is_preterminal:
            return "{0}{1}: '{2}'".format(indent, self._label, self.word)
        if self._children is None:
            return "{0}'{1}'".format(indent, self._label)
        return (
            indent
            + self._label
            + "".join("\n" + child._view(level + 1) for child in self._children)
        )

    @property
    def view(self) -> str:
        """ Return a nicely formatted string showing this subtree """
        return self._view(0)

    def _bracket_form(self) -> str:
        """ Return a bracketed representation of the tree """
        result: List[str] = []

        def push(node: "Tree") -> None:
            """ Append information about a node to the result list """
            if node._children is None:
                # Leaf: append the word
                result.append(node._label)
                return
            result.append("(" + node._label)
            # Recursively add the children of this node
            for child in node._children:
                result.append(" ")
                push(child)
            result.append(")")

        push(self)
        return "".join(result)

    @property
    def bracket_form(self) -> str:
        """ Return a bracketed representation of the tree """
        return self._bracket_form()

    def __getitem__(self, index: Union[str, int]) -> "Tree":
        """ Return the appropriate child subtree """
        if isinstance(index, str):
            # Handle tree['NP']: the first child having a matching tag
            for ch in self.children:
                if ch.match_tag(index):
                    return ch
            raise KeyError("Subtree has no {0} child".format(index))
        # Handle tree[1]
        if self._children is None:
            raise IndexError("Leaf has no children")
        return self._children[index]

    def __len__(self) -> int:
        """ Return the number of children of this subtree """
        return len(self._children) if self._children is not None else 0

    def all_matches(
        self, pattern: str, context: Optional[ContextDict] = None
    ) -> Iterator["Tree"]:
        """ Return all subtree roots, including self, that match the given pattern """
        for subtree in chain([self], self.descendants):
            if match_pattern(subtree, pattern, context):
                yield subtree

    def first_match(
        self, pattern: str, context: Optional[ContextDict] = None
    ) -> Optional["Tree"]:
        """ Return the first subtree root, including self, that matches the given
            pattern. If no subtree matches, return None. """
        try:
            return next(self.all_matches(pattern, context))
        except StopIteration:
            return None

    def match(self, pattern: str, context: Optional[ContextDict] = None) -> bool:
        """ Return True if this subtree matches the given pattern """
        return match_pattern(self, pattern, context)

    def match_captures(
        self, pattern: str, context: Optional[ContextDict] = None
    ) -> Optional[Captures]:
        """ Match this subtree against the given pattern and return a dict
            of the nodes captured by name (Item=name) in the pattern, or
            None if there is no match """
        return match_captures(self, pattern, context)


# Whitespace and parentheses delimit words and labels
_TOKEN = re.compile(r"[^\s()]*")


def read_trees(txt: str) -> Iterator[Tree]:
    """ Generate the trees contained in a string of bracketed trees.
        An outer node without a label, as in '( (S ...) )', is
        given the label ROOT. """
    # Current character pointer
    p: int = 0
    end: int = len(txt)

    def skipspace() -> None:
        """ Advance the p index past any whitespace """
        nonlocal p
        while p < end and txt[p].isspace():
            p += 1

    def skipstring() -> str:
        """ Advance the p index past a label or a word, and return it """
        nonlocal p
        m = _TOKEN.match(txt, p)
        assert m is not None
        p = m.end()
        return m.group(0)

    # A stack of open nodes, each with its label and the children found so far
    stack: List[Tuple[str, List[Tree]]] = []

    while True:
        skipspace()
        if p >= end:
            break
        c = txt[p]
        if c == "(":
            # Left parenthesis: open a node and read its label, which may be empty
            p += 1
            skipspace()
            stack.append((skipstring(), []))
        elif c == ")":
            # Right parenthesis: the innermost open node is done
            p += 1
            if not stack:
                raise ValueError("Unbalanced right parenthesis at position {0}".format(p - 1))
            label, children = stack.pop()
            if not children:
                raise ValueError("Empty constituent '({0})' in tree".format(label))
            node = Tree(label or "ROOT", children)
            if stack:
                stack[-1][1].append(node)
            else:
                yield node
        else:
            # A word: add a leaf to the innermost open node
            word = skipstring()
            if not stack:
                raise ValueError("Word '{0}' found outside of a tree".format(word))
            stack[-1][1].append(Tree(word))

    if stack:
        raise ValueError("String is unbalanced or not properly terminated")
