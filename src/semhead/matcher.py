"""

    Semhead: Semantic head finding for English constituency trees

    Matcher module

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

    This module exports the functions match_pattern() and match_captures(),
    which determine whether a Tree instance matches a pattern string.
    match_captures() also returns the nodes that were captured by name.

    The match patterns are as follows:
    ----------------------------------

    `.` matches any tree node.

    `"literal"` matches a subtree covering exactly the given literal text,
        albeit compared case-neutrally. Note that this pattern may match
        a preterminal or phrasal node. If you want to match a single leaf
        (word) only, use `@"literal"`.

    `@"literal"` matches a leaf whose word is exactly the given literal
        text, albeit compared case-neutrally.

    `LABEL` matches an internal node with the given label. NP matches
        NP as well as NP-SBJ, NP-TMP and NP=2, while NP-SBJ only
        matches NP-SBJ (and NP-SBJ-1, etc.).

    `%macro` is resolved by looking up the key 'macro' in the context
    dictionary, which is an optional parameter to match_pattern(). The corresponding
    value can be either a string, in which case the string is used as the pattern,
    or a callable (function) which is then called with a tree node as an argument.
    If the function returns a bool, that is the result of the match. Otherwise, it
    should return a string, which is used as the pattern.

    `Any=name` matches like Any, and captures the matching node under
        the given name. Captured nodes are returned by match_captures().

    `!Any` matches a single node that does not match Any.

    `Any1 Any2 Any3` matches the given sequence as-is, in-order

    `Any+` matches one or more sequential instances of Any

    `Any*` matches zero or more sequential instances of Any

    `Any?` matches zero or one sequential instances of Any

    `.*` matches any number of any nodes (as an example)

    `(Any1 | Any2 | ...)` matches if anything within the parentheses matches.
        Each alternative may have a capture name and a containment
        operator of its own.

    `Any1 > { Any2 Any3 ... }` matches if Any1 matches and has immediate children
        that include Any2, Any3 *and* other given arguments (irrespective of order).
        This is a set-like operator.

    `Any1 >> { Any2 Any3 ... }` matches if Any1 matches and has children at any
        sublevel that include Any2, Any3 *and* other given arguments
        (irrespective of order). This is a set-like operator.

    `Any1 > [ Any2 Any3 ...]` matches if Any1 matches and has immediate children
        that include Any2, Any3 *and* other given arguments in the order specified.
        This is a list-like operator.

    `Any1 >> [ Any2 Any3 ...]` matches if Any1 matches and has children at any sublevel
        that include Any2, Any3 *and* other given arguments in the order specified.
        This is a list-like operator.

    `[ Any1 Any2 ]` matches any node sequence that starts with the two given items.
        It does not matter whether the sequence contains more items.

    `[ Any1 Any2 $ ]` matches only sequences where Any1 and Any2 match and there are
        no further nodes in the sequence

    `[ Any1 .* Any2 $ ]` matches only sequences that start with Any1 and end with Any2

    Sequences are matched with backtracking, so `[ .* CC RB .* ]` finds
    a CC that is immediately followed by an RB anywhere in the sequence.

    NOTE: The repeating operators * + ? are meaningless within { sets }; their
        presence will cause an exception.


    Examples:
    ---------

    Conjunction phrases such as 'but not', capturing the adverb:

    `CONJP > [ .* CC > [ @"but" $ ] RB=head > [ @"not" $ ] .* ]`

    Verb phrases having a passive participle at any depth:

    `VP >> { VBN }`

"""

from typing import (
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
    cast,
    TYPE_CHECKING,
)

import re

if TYPE_CHECKING:
    from .tree import Tree

ContextFunc = Callable[["Tree"], Union[bool, str]]
ContextDict = Dict[str, Union[str, ContextFunc]]
Captures = Dict[str, "Tree"]
ItemList = List[Union["_NestedList", str]]


class _NestedList(list):

    """ Quick-and-dirty container for nested lists """

    def __init__(self, kind: str, content: ItemList) -> None:
        self._kind = kind
        super().__init__()
        if kind == "(":
            # Validate a ( x | y | z ...) construct
            if not content or content[0] == "|" or content[-1] == "|":
                raise ValueError("Empty alternative in pattern")
            if any(
                content[i] == "|" and content[i + 1] == "|"
                for i in range(len(content) - 1)
            ):
                raise ValueError("Empty alternative in pattern")
        super().extend(content)

    @property
    def kind(self) -> str:
        return self._kind

    def alternatives(self) -> List[ItemList]:
        """ Split the content of a ( x | y | z ...) construct
            into the item lists of the alternatives """
        result: List[ItemList] = [[]]
        for item in self:
            if isinstance(item, str) and item == "|":
                result.append([])
            else:
                result[-1].append(item)
        return result

    def __repr__(self) -> str:
        return "<Nested('{0}') ".format(self._kind) + super().__repr__() + ">"


# Reserved strings in matching expressions
_NOT_ITEMS = frozenset((">", "*", "+", "?", "[", "(", "{", "]", ")", "}", "$", "|", "!"))


class _Term:

    """ A single matching item within a sequence or a set,
        together with its modifiers """

    __slots__ = ("item", "name", "negated", "repeat", "op", "arg")

    def __init__(
        self,
        item: Union[str, List["_Term"]],
        name: Optional[str] = None,
        negated: bool = False,
        repeat: Optional[str] = None,
        op: Optional[str] = None,
        arg: Optional[Tuple[str, List["_Term"]]] = None,
    ) -> None:
        # Either a string item or a list of alternative terms
        self.item = item
        # Capture name, from Item=name
        self.name = name
        # True for !Item
        self.negated = negated
        # One of '*', '+', '?' or None
        self.repeat = repeat
        # Containment operator, '>' or '>>', and its argument,
        # which is a ('[' or '{', terms) tuple
        self.op = op
        self.arg = arg

    def __repr__(self) -> str:
        return "<Term {0!r}{1}{2}>".format(
            self.item,
            "=" + self.name if self.name else "",
            self.repeat or "",
        )


# The end-of-sequence marker '$'
_END = _Term("$")


class _CompiledPattern:

    """ This class encapsulates a matching pattern that has
        been parsed into a list of matching terms """

    _NEST = {"(": ")", "[": "]", "{": "}"}
    _FINISHERS = frozenset(_NEST.values())

    _pattern_cache: Dict[str, "_CompiledPattern"] = dict()

    @classmethod
    def compile(cls, pattern: str) -> "_CompiledPattern":
        """ Check whether we've parsed this pattern before, and if so,
            re-use the result """
        if pattern in cls._pattern_cache:
            return cls._pattern_cache[pattern]
        # Not already in cache: compile the pattern and cache it
        cp = cls._pattern_cache[pattern] = cls(pattern)
        return cp

    def __init__(self, pattern: str) -> None:
        self._terms = self._make_terms(self._compile(pattern), "{")

    @property
    def terms(self) -> List[_Term]:
        """ Return the top-level matching terms """
        return self._terms

    def _compile(self, pattern: str) -> ItemList:
        """ Compile a matching pattern into a nested list of matching items """

        NEST = self._NEST
        FINISHERS = self._FINISHERS

        def nest(items: List[str]) -> ItemList:
            """ Convert any embedded subpatterns, delimited by NEST entries,
                into nested lists """
            len_items = len(items)
            i = 0
            while i < len_items:
                # Look for symbols that open a nested structure
                item1 = items[i]
                finisher = NEST.get(item1)
                if finisher is not None:
                    # item1 is an opening symbol for a nested structure,
                    # finishing with the finisher symbol
                    j = i + 1
                    stack = 0
                    while j < len_items:
                        item2 = items[j]
                        if item2 == finisher:
                            if stack > 0:
                                # Finishing a nested occurrence of the
                                # same opening symbol
                                stack -= 1
                            else:
                                # Finishing the sequence started by the
                                # current opening symbol
                                nested = _NestedList(item1, nest(items[i + 1 : j]))
                                # Check for nesting errors
                                for n in nested:
                                    if isinstance(n, str) and n in FINISHERS:
                                        raise ValueError(
                                            "Mismatched '{0}' in pattern".format(n)
                                        )
                                # Assemble the resulting nested list
                                items = (
                                    items[0:i]
                                    + cast(List[str], [nested])
                                    + items[j + 1 :]
                                )
                                len_items = len(items)
                                # ...and continue the outer loop
                                break
                        elif item2 == item1:
                            # Nested occurrence of the same opening symbol
                            stack += 1
                        j += 1
                    else:
                        # Did not find the starting symbol again
                        raise ValueError("Mismatched '{0}' in pattern".format(item1))
                elif isinstance(item1, str) and item1 in FINISHERS:
                    raise ValueError("Mismatched '{0}' in pattern".format(item1))
                i += 1
            return cast(ItemList, items)

        def gen1() -> Iterator[str]:
            """ First generator: yield non-null strings from a
                regex split of the pattern """
            for item in re.split(r"\s+|([\.\|\(\)\{\}\[\]\*\+\?\>\$\!])", pattern):
                if item:
                    yield item

        def gen2() -> Iterator[str]:
            gen = gen1()
            while True:
                try:
                    item = next(gen)
                except StopIteration:
                    # Generators should not raise StopIteration,
                    # so we just break out of the loop normally
                    break
                if item.startswith(('"', '@"')):
                    # String literal item: merge with subsequent items
                    # until we encounter a matching end quote.
                    # Literals have one of the forms "literal" or @"literal".
                    # The latter only matches leaves, while
                    # the former can match an entire subtree.
                    s = item
                    try:
                        while len(s) < 2 + (item[0] == "@") or not s.endswith('"'):
                            s += " " + next(gen)
                    except StopIteration:
                        raise ValueError("Malformed literal in pattern")
                    yield s
                else:
                    yield item

        return nest(list(gen2()))

    def _make_terms(self, items: ItemList, kind: str) -> List[_Term]:
        """ Convert a nested item list into a list of terms,
            attaching modifiers to the items they apply to.
            The kind is '[' for sequences and '{' for sets. """
        terms: List[_Term] = []
        len_items = len(items)
        i = 0
        while i < len_items:
            item = items[i]
            i += 1
            negated = False
            if item == "!":
                negated = True
                if i >= len_items:
                    raise ValueError("Missing item after '!' in pattern")
                item = items[i]
                i += 1
            if item == "$":
                if kind != "[" or negated:
                    raise ValueError("Spurious '$' in pattern")
                if i < len_items:
                    raise ValueError("'$' must be at the end of a sequence")
                terms.append(_END)
                continue
            base: Union[str, List[_Term]]
            name: Optional[str] = None
            if isinstance(item, _NestedList):
                if item.kind != "(":
                    raise ValueError("Spurious '{0}' in pattern".format(item.kind))
                base = []
                for alt in item.alternatives():
                    alt_terms = self._make_terms(alt, "(")
                    if len(alt_terms) != 1:
                        raise ValueError("Each alternative must be a single item")
                    base.append(alt_terms[0])
            else:
                if item in _NOT_ITEMS:
                    raise ValueError("Spurious '{0}' in pattern".format(item))
                base = item
                if "=" in item and not item.startswith(('"', '@"')):
                    # Item=name: capture the matching node
                    base, name = item.split("=", maxsplit=1)
                    if not base or not name:
                        raise ValueError("Malformed capture '{0}' in pattern".format(item))
            op: Optional[str] = None
            arg: Optional[Tuple[str, List[_Term]]] = None
            if i < len_items and items[i] == ">":
                i += 1
                op = ">"
                if i < len_items and items[i] == ">":
                    # '>>' operator: arbitrary depth containment
                    i += 1
                    op = ">>"
                if i >= len_items:
                    raise ValueError("Missing argument to '{0}' operator".format(op))
                arg = self._unpack(items[i])
                i += 1
            repeat: Optional[str] = None
            if i < len_items and items[i] in ("*", "+", "?"):
                if kind == "{":
                    raise ValueError(
                        "Repeat operator '{0}' is not allowed within a set".format(
                            items[i]
                        )
                    )
                repeat = cast(str, items[i])
                i += 1
            terms.append(_Term(base, name, negated, repeat, op, arg))
        return terms

    def _unpack(self, item: Union[_NestedList, str]) -> Tuple[str, List[_Term]]:
        """ Unpack an argument for the '>' or '>>' containment operators.
            These are usually lists or sets but may be single items, in
            which case they are interpreted as a set having
            that single item only. """
        if isinstance(item, _NestedList) and item.kind in {"[", "{"}:
            return item.kind, self._make_terms(item, item.kind)
        return "{", self._make_terms([item], "{")  # Single item: assume set


def single_match(item: str, tree: "Tree", context: ContextDict) -> bool:
    """ Does the subtree match with item, in and of itself? """
    if context and item.startswith("%"):
        # The item has the form %identifier (it's a macro-type item):
        # Look it up in the context dictionary, which can either return a
        # string directly, or a function to call with the tree
        # as an argument. This function can either return a bool result, or
        # a string that we use for the item.
        result: Union[None, str, bool, ContextFunc] = context.get(item[1:])
        if callable(result):
            # The macro resolves to a function: call it with the tree as an argument
            result = result(tree)
            if isinstance(result, bool):
                # The function yielded a bool result: return it
                return result
        if result is None:
            raise ValueError("Macro '{0}' not found in context".format(item[1:]))
        if not isinstance(result, str):
            raise ValueError(
                "Macro '{0}' must yield a callable or string".format(item[1:])
            )
        # Use the string retrieved from the context as the item to match
        item = result
    elif item.startswith("%"):
        raise ValueError("Macro '{0}' not found in context".format(item[1:]))
    if item in _NOT_ITEMS:
        raise ValueError("Spurious '{0}' in pattern".format(item))
    if item == ".":
        # Wildcard: always matches
        return True
    if item.startswith('@"'):
        # @ + double quote: literal string, matching a leaf only
        if not tree.is_leaf:
            return False
        # Note that this is a case-neutral compare
        return item[2:-1].casefold() == tree.label.casefold()
    if item.startswith('"'):
        # Double quote: literal string
        # Note that this is a case-neutral compare
        return item[1:-1].casefold() == tree.text.casefold()
    # Check the label of an internal node
    # NP matches NP as well as NP-SBJ, etc.,
    # while NP-SBJ only matches NP-SBJ
    return tree.match_tag(item)


def match_term(
    term: _Term, tree: "Tree", context: ContextDict, captures: Captures
) -> Optional[Captures]:
    """ Match a single tree node against a term, returning the
        (possibly extended) captures on success or None on failure """
    result: Optional[Captures]
    if isinstance(term.item, list):
        # A list of alternatives: the first one that matches wins
        result = None
        for alt in term.item:
            result = match_term(alt, tree, context, captures)
            if result is not None:
                break
    else:
        result = captures if single_match(term.item, tree, context) else None
    if result is not None and term.op is not None:
        # Containment: Not a match unless the children match as well
        result = contained(tree, term, context, result)
    if term.negated:
        # Negated items never capture anything
        return captures if result is None else None
    if result is not None and term.name:
        result = dict(result)
        result[term.name] = tree
    return result


def contained(
    tree: "Tree", term: _Term, context: ContextDict, captures: Captures
) -> Optional[Captures]:
    """ Match the children of the tree with the containment argument
        of the term, either directly (op = '>') or at any deeper
        level (op = '>>') """
    assert term.arg is not None
    kind, subterms = term.arg
    f_run = run_sequence if kind == "[" else run_set
    if term.op == ">>":
        # Deep containment: iterate through deep_children, which is
        # a generator of child lists
        for children in tree.deep_children:
            result = f_run(children, subterms, context, captures)
            if result is not None:
                return result
        return None
    # Shallow containment: match the direct children
    return f_run(tree.children, subterms, context, captures)


def run_sequence(
    nodes: Sequence["Tree"], terms: List[_Term], context: ContextDict, captures: Captures
) -> Optional[Captures]:
    """ Match the nodes with the terms, in sequence, backtracking
        over the repeat operators as needed """
    len_nodes = len(nodes)
    len_terms = len(terms)

    def step(i: int, pc: int, caps: Captures) -> Optional[Captures]:
        """ Match nodes[i:] against terms[pc:] """
        if pc >= len_terms:
            # All terms matched; any further nodes are fine
            return caps
        term = terms[pc]
        if term is _END:
            # Only matches at the end of the node list
            return caps if i >= len_nodes else None
        if term.repeat is None:
            # Plain item-for-item match
            if i < len_nodes:
                result = match_term(term, nodes[i], context, caps)
                if result is not None:
                    return step(i + 1, pc + 1, result)
            return None
        if term.repeat == "?":
            if i < len_nodes:
                result = match_term(term, nodes[i], context, caps)
                if result is not None:
                    result = step(i + 1, pc + 1, result)
                    if result is not None:
                        return result
            return step(i, pc + 1, caps)
        # '*' or '+': consume as many matching nodes as possible,
        # then back off one node at a time until the rest matches
        consumed = [caps]
        j = i
        while j < len_nodes:
            result = match_term(term, nodes[j], context, consumed[-1])
            if result is None:
                break
            consumed.append(result)
            j += 1
        least = 1 if term.repeat == "+" else 0
        for k in range(len(consumed) - 1, least - 1, -1):
            result = step(i + k, pc + 1, consumed[k])
            if result is not None:
                return result
        return None

    return step(0, 0, captures)


def run_set(
    nodes: Sequence["Tree"], terms: List[_Term], context: ContextDict, captures: Captures
) -> Optional[Captures]:
    """ Match the nodes set-wise (unordered) with the terms.
        If every term is matched by at least one node, return
        the captures, otherwise None. """
    for term in terms:
        for node in nodes:
            result = match_term(term, node, context, captures)
            if result is not None:
                captures = result
                break
        else:
            # No node matched this term
            return None
    return captures


def match_captures(
    tree: "Tree", pattern: str, context: Optional[ContextDict] = None
) -> Optional[Captures]:
    """ Return the nodes captured by a pattern match on a Tree instance,
        or None if the tree doesn't match """
    cp = _CompiledPattern.compile(pattern)
    return run_set([tree], cp.terms, context or {}, {})


def match_pattern(
    tree: "Tree", pattern: str, context: Optional[ContextDict] = None
) -> bool:
    """ Return the result of a pattern match on a Tree instance """
    return match_captures(tree, pattern, context) is not None
