"""

    Semhead: Semantic head finding for English constituency trees

    Head finder module

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

    This module implements HeadFinder, a table-driven selector of the
    head child of each internal node in a constituency tree, and
    ModCollinsHeadFinder, which drives it with the modified Collins
    head rules from the configuration file.

    A head rule table maps a basic category (such as NP or VP) to an
    ordered tuple of directives. Each directive is a direction and a tuple
    of categories:

        left / right        For each listed category in turn, scan the
                            children from the left (right) edge and return
                            the first child having that category.
        leftdis / rightdis  Scan the children from the left (right) edge
                            and return the first child having any of the
                            listed categories.
        leftexcept / rightexcept
                            Return the first child from the left (right)
                            edge that has none of the listed categories.

    The directives are tried in order. The last one is a last resort: if
    it fails, the first child from its edge that is not punctuation is
    chosen, or failing that, the edge child itself.

    The head finder also offers utilities that percolate heads down a
    tree: head_preterminal(), head_terminal(), head_map() and
    dependencies().

"""

from typing import (
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)

import logging

from .basics import HeadFinderError
from .settings import DIRECTIONS, HeadRule, HeadRules, HeadRuleTable, TreebankTags
from .tree import Tree


logger = logging.getLogger(__name__)

# A dependency between two words, identified by their leaf indices:
# (governor, dependent)
Dependency = Tuple[int, int]


class HeadFinder:

    """ Selects the head child of internal tree nodes,
        driven by a head rule table """

    def __init__(
        self,
        rules: HeadRuleTable,
        categories_to_avoid: Iterable[str] = (),
        default_rule: Optional[HeadRule] = None,
    ) -> None:
        for category, directives in rules.items():
            if not directives:
                raise HeadFinderError(
                    "Empty head rule list for category '{0}'".format(category)
                )
            for directive in directives:
                self._check_directive(directive)
        if default_rule is not None:
            self._check_directive(default_rule)
        self._rules: HeadRuleTable = dict(rules)
        self._default_rule = default_rule
        avoid = tuple(categories_to_avoid)
        # The default directives of the last resort
        self._default_left_rule: HeadRule
        self._default_right_rule: HeadRule
        if avoid:
            self._default_left_rule = ("leftexcept", avoid)
            self._default_right_rule = ("rightexcept", avoid)
        else:
            self._default_left_rule = ("left", ())
            self._default_right_rule = ("right", ())

    @staticmethod
    def _check_directive(directive: HeadRule) -> None:
        if directive[0] not in DIRECTIONS:
            raise HeadFinderError(
                "Invalid head rule direction '{0}'".format(directive[0])
            )

    def rules(self, category: str) -> Optional[Tuple[HeadRule, ...]]:
        """ Return the head rule directives for a basic category,
            or None if there are none """
        return self._rules.get(category)

    def determine_head(self, t: Tree, parent: Optional[Tree] = None) -> Tree:
        """ Return the head child of the given tree node. The parent,
            if given, is used by context-sensitive head rules.
            A leaf is its own head. """
        if t.is_leaf:
            return t
        children = t.children
        if not children:
            raise HeadFinderError(
                "Internal node '{0}' has no children".format(t.label)
            )
        head = self.find_marked_head(t)
        if head is not None:
            return head
        if len(children) == 1:
            # Unary node: the only child must be the head
            return children[0]
        return self.determine_nontrivial_head(t, parent)

    def find_marked_head(self, t: Tree) -> Optional[Tree]:
        """ Return a head that has been explicitly marked in the tree.
            Override in derived classes for trees that carry such marks. """
        return None

    def determine_nontrivial_head(
        self, t: Tree, parent: Optional[Tree] = None
    ) -> Tree:
        """ Determine the head of a node having two or more children,
            using the head rule table """
        category = t.basic_category
        if category.startswith("@"):
            # Category introduced by binarization
            category = category[1:]
        children = t.children
        directives = self._rules.get(category)
        head: Optional[Tree] = None
        if directives is None:
            if self._default_rule is None:
                raise HeadFinderError(
                    "No head rule defined for '{0}' in {1}".format(category, t)
                )
            head = self.traverse_locate(children, self._default_rule, True)
        else:
            last = len(directives) - 1
            for i, directive in enumerate(directives):
                head = self.traverse_locate(children, directive, i == last)
                if head is not None:
                    break
        # The last resort always yields a head
        assert head is not None
        logger.debug("Head of %s is %s", t.label, head.label)
        return head

    def traverse_locate(
        self, children: Sequence[Tree], directive: HeadRule, last_resort: bool
    ) -> Optional[Tree]:
        """ Apply a single directive to a list of children, returning the
            head child or None if the directive finds nothing. If last_resort
            is True, a head is always returned. """
        direction, categories = directive
        if direction == "left":
            index = self.find_left_head(children, categories)
        elif direction == "leftdis":
            index = self.find_leftdis_head(children, categories)
        elif direction == "leftexcept":
            index = self.find_leftexcept_head(children, categories)
        elif direction == "right":
            index = self.find_right_head(children, categories)
        elif direction == "rightdis":
            index = self.find_rightdis_head(children, categories)
        elif direction == "rightexcept":
            index = self.find_rightexcept_head(children, categories)
        else:
            raise HeadFinderError("Invalid head rule direction '{0}'".format(direction))

        if index < 0:
            if not last_resort:
                # Let the next directive have a go
                return None
            # Try to find anything but punctuation from the
            # directive's edge, then fall back to the edge child itself.
            # post_operation_fix() is applied only once, by the
            # recursive call, if at all.
            if direction.startswith("left"):
                index, default = 0, self._default_left_rule
            else:
                index, default = len(children) - 1, self._default_right_rule
            head = self.traverse_locate(children, default, False)
            return head if head is not None else children[index]

        index = self.post_operation_fix(index, children)
        return children[index]

    def post_operation_fix(self, index: int, children: Sequence[Tree]) -> int:
        """ Adjust the index of a head found by a directive.
            The generic head finder leaves it unchanged. """
        return index

    @staticmethod
    def find_left_head(children: Sequence[Tree], categories: Sequence[str]) -> int:
        for category in categories:
            for index, child in enumerate(children):
                if child.basic_category == category:
                    return index
        return -1

    @staticmethod
    def find_leftdis_head(children: Sequence[Tree], categories: Sequence[str]) -> int:
        for index, child in enumerate(children):
            if child.basic_category in categories:
                return index
        return -1

    @staticmethod
    def find_leftexcept_head(
        children: Sequence[Tree], categories: Sequence[str]
    ) -> int:
        for index, child in enumerate(children):
            if child.basic_category not in categories:
                return index
        return -1

    @staticmethod
    def find_right_head(children: Sequence[Tree], categories: Sequence[str]) -> int:
        for category in categories:
            for index in range(len(children) - 1, -1, -1):
                if children[index].basic_category == category:
                    return index
        return -1

    @staticmethod
    def find_rightdis_head(
        children: Sequence[Tree], categories: Sequence[str]
    ) -> int:
        for index in range(len(children) - 1, -1, -1):
            if children[index].basic_category in categories:
                return index
        return -1

    @staticmethod
    def find_rightexcept_head(
        children: Sequence[Tree], categories: Sequence[str]
    ) -> int:
        for index in range(len(children) - 1, -1, -1):
            if children[index].basic_category not in categories:
                return index
        return -1

    # Head percolation

    def head_index(self, t: Tree, parent: Optional[Tree] = None) -> int:
        """ Return the index of the head child of an internal node """
        if t.is_leaf:
            raise HeadFinderError("A leaf has no head child")
        head = self.determine_head(t, parent)
        for index, child in enumerate(t.children):
            if child is head:
                return index
        # Should not happen: the head is always one of the children
        raise HeadFinderError("Head of '{0}' is not among its children".format(t.label))

    def head_preterminal(
        self, t: Tree, parent: Optional[Tree] = None
    ) -> Optional[Tree]:
        """ Follow the heads down from t to a preterminal and return it.
            Returns None if the head path ends in a leaf that
            has no preterminal above it. """
        node = t
        while not node.is_preterminal:
            if node.is_leaf:
                return None
            node, parent = self.determine_head(node, parent), node
        return node

    def head_terminal(self, t: Tree, parent: Optional[Tree] = None) -> Tree:
        """ Follow the heads down from t to a leaf and return it """
        node = t
        while not node.is_leaf:
            node, parent = self.determine_head(node, parent), node
        return node

    def head_map(self, t: Tree, parent: Optional[Tree] = None) -> Dict[Tree, Tree]:
        """ Return a dict mapping each internal node of the tree
            to its head child """
        result: Dict[Tree, Tree] = dict()
        stack: List[Tuple[Tree, Optional[Tree]]] = [(t, parent)]
        while stack:
            node, par = stack.pop()
            if node.is_leaf:
                continue
            result[node] = self.determine_head(node, par)
            stack.extend((child, node) for child in node.children)
        return result

    def dependencies(self, t: Tree) -> Set[Dependency]:
        """ Return the unlabelled word-to-word dependencies implied by the
            heads of the tree, as a set of (governor, dependent) tuples of
            leaf indices """
        heads = self.head_map(t)
        leaf_index = {leaf: index for index, leaf in enumerate(t.leaves)}
        lexical_heads: Dict[Tree, int] = dict()

        def lexical_head(node: Tree) -> int:
            """ Return the leaf index of the lexical head of a node """
            if node not in lexical_heads:
                lexical_heads[node] = (
                    leaf_index[node] if node.is_leaf else lexical_head(heads[node])
                )
            return lexical_heads[node]

        result: Set[Dependency] = set()
        for node, head in heads.items():
            governor = lexical_head(head)
            for child in node.children:
                if child is not head:
                    result.add((governor, lexical_head(child)))
        return result


class ModCollinsHeadFinder(HeadFinder):

    """ A head finder using the modified Collins head rules,
        optionally with some of them replaced """

    def __init__(self, replacements: Optional[HeadRuleTable] = None) -> None:
        rules = dict(HeadRules.COLLINS)
        if replacements:
            rules.update(replacements)
        super().__init__(
            rules, categories_to_avoid=sorted(TreebankTags.PUNCTUATION)
        )
