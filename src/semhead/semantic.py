"""

    Semhead: Semantic head finding for English constituency trees

    Semantic head finder module

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

    This module implements SemanticHeadFinder, a head finder that prefers
    content words over function words as heads:

    * In verb phrases with an auxiliary ('has been eating', 'was hit'),
      the main verb phrase is the head, not the auxiliary.

    * Unless copulas are configured to be heads, the complement of a
      copular verb is the head: in 'Bill is big', 'big' heads the VP.
      This does not apply to existential sentences ('There is a man')
      nor to the SQ of wh-questions.

    * In coordinations, the first conjunct is the head: 'a, b and c'
      is headed by 'a'.

    * A few fixed patterns pick the adverb of conjunction phrases such
      as 'but not' and 'and yet', and the complement of copular
      wh-questions such as 'What is wrong'.

    Everything else is decided by the modified Collins head rules,
    with the replacements from the [semantic_head_rules] section
    of the configuration file.

"""

from typing import (
    Callable,
    Dict,
    FrozenSet,
    Optional,
    Sequence,
)

import logging

from .headfinder import ModCollinsHeadFinder
from .matcher import ContextDict
from .settings import HeadRule, HeadRules, Settings, TreebankTags, Vocabulary
from .tree import Tree


logger = logging.getLogger(__name__)

# Conjunction phrases where the adverb is the head:
# 'but not', 'and not', 'but also', 'but rather', 'and yet'
CONJP_PATTERNS = (
    'CONJP > [ .* CC > [ ( @"but" | @"and" ) $ ] RB=head > [ @"not" $ ] ]',
    'CONJP > [ .* CC > [ @"but" $ ] '
    '( RB=head > [ ( @"also" | @"rather" ) $ ] '
    '| ADVP=head > [ RB > [ ( @"also" | @"rather" ) $ ] $ ] ) ]',
    'CONJP > [ .* CC > [ @"and" $ ] '
    '( RB=head > [ @"yet" $ ] | ADVP=head > [ RB > [ @"yet" $ ] $ ] ) ]',
)

# Copular wh-questions with a flat structure. In 'What is wrong', the
# ADJP is the head. In 'Who am I to judge', the WHNP is the head, unless
# an ADJP follows the copula, as in 'Why is the dog pink'.
COPULA_QUESTION_PATTERNS = (
    "SBARQ > [ .* WHNP .* %copula .* ADJP=head ]",
    "SBARQ > [ .* WHNP=head .* %copula NP !ADJP* $ ]",
)

# Tags of participles; VBD is included because of frequent tagging mistakes
PARTICIPLE_TAGS = frozenset(("VBN", "VBG", "VBD"))

AUXILIARY_RULE: HeadRule = ("left", ("VP", "ADJP"))
COPULA_COMPLEMENTS = ("VP", "ADJP", "NP", "WHADJP", "WHNP")


def vp_contains_participle(t: Tree) -> bool:
    """ Does the verb phrase have a participle as an immediate child? """
    return any(
        kid.is_preterminal and kid.label in PARTICIPLE_TAGS for kid in t.children
    )


class SemanticHeadFinder(ModCollinsHeadFinder):

    """ A head finder that chooses semantic rather than syntactic heads.
        The configuration is copied at construction time, so later
        changes to the settings don't affect existing instances. """

    def __init__(self, treat_copula_as_head: Optional[bool] = None) -> None:
        super().__init__(HeadRules.SEMANTIC)
        if treat_copula_as_head is None:
            treat_copula_as_head = Settings.TREAT_COPULA_AS_HEAD
        self._makes_copula_head = treat_copula_as_head
        self._auxiliaries: FrozenSet[str] = frozenset(Vocabulary.AUXILIARIES)
        self._passive_auxiliaries: FrozenSet[str] = frozenset(
            Vocabulary.PASSIVE_AUXILIARIES
        )
        # With copulas as heads, no verb is treated as copular
        self._copular_verbs: FrozenSet[str] = (
            frozenset() if treat_copula_as_head else frozenset(Vocabulary.COPULAR_VERBS)
        )
        self._verbal_tags: FrozenSet[str] = frozenset(TreebankTags.VERBAL)
        self._unambiguous_auxiliary_tags: FrozenSet[str] = frozenset(
            TreebankTags.UNAMBIGUOUS_AUXILIARY
        )
        self._punctuation: FrozenSet[str] = frozenset(TreebankTags.PUNCTUATION)
        self._context: ContextDict = {"copula": self._is_copula}

    @property
    def makes_copula_head(self) -> bool:
        """ True if copular verbs are heads like other verbs """
        return self._makes_copula_head

    def _is_copula(self, t: Tree) -> bool:
        """ Is the node a verb preterminal with a copular word form? """
        return (
            t.is_preterminal
            and t.basic_category.startswith("VB")
            and (t.word or "").lower() in self._copular_verbs
        )

    def is_verbal_auxiliary(self, t: Tree) -> bool:
        """ Is the node a preterminal containing an auxiliary verb
            (be, do, have, get, will...)? """
        return self._is_verbal_auxiliary(t, self._auxiliaries, True)

    def _is_verbal_auxiliary(
        self, t: Tree, vocabulary: FrozenSet[str], allow_tag_only: bool
    ) -> bool:
        if not t.is_preterminal:
            return False
        tag = t.label
        word = (t.word or "").lower()
        logger.debug("Checking %s head is %s/%s", t.label, word, tag)
        return (allow_tag_only and tag in self._unambiguous_auxiliary_tags) or (
            tag in self._verbal_tags and word in vocabulary
        )

    def _has_verbal_auxiliary(
        self, children: Sequence[Tree], vocabulary: FrozenSet[str], allow_tag_only: bool
    ) -> bool:
        """ Is any of the children a preterminal verb whose word is in the
            vocabulary? Phrasal children are never looked into. """
        return any(
            self._is_verbal_auxiliary(kid, vocabulary, allow_tag_only)
            for kid in children
        )

    def _has_passive_progressive_auxiliary(self, children: Sequence[Tree]) -> bool:
        """ Do the children contain a form of 'be' or 'get' and a verb
            phrase headed by a participle? Coordinated participle VPs,
            as in 'was hit and killed', also count. """
        found_auxiliary = False
        found_participle_vp = False
        for kid in children:
            if self._is_verbal_auxiliary(kid, self._passive_auxiliaries, False):
                found_auxiliary = True
            elif kid.is_phrasal:
                if not kid.label.startswith("VP"):
                    continue
                found_participle_in_vp = False
                for kidkid in kid.children:
                    if kidkid.is_preterminal:
                        tag = kidkid.label
                        if tag in PARTICIPLE_TAGS:
                            found_participle_vp = True
                            break
                        if tag == "CC" and found_participle_in_vp:
                            # (VP (VP ... VBN ...) (CC and) ...)
                            found_participle_vp = True
                            break
                    elif kidkid.is_phrasal:
                        # Note: the label examined is that of the outer
                        # VP, not of kidkid
                        category = kid.label
                        if category == "VP":
                            found_participle_in_vp = vp_contains_participle(kidkid)
                        elif category in ("CONJP", "PRN") and found_participle_in_vp:
                            found_participle_vp = True
                            break
            if found_auxiliary and found_participle_vp:
                break
        logger.debug(
            "Passive or progressive auxiliary: %s", found_auxiliary and found_participle_vp
        )
        return found_auxiliary and found_participle_vp

    @staticmethod
    def _is_existential(t: Tree, parent: Optional[Tree]) -> bool:
        """ Is t part of an existential construction? This is the case
            for a VP having an EX ('there') among its left sisters, and
            for an SQ whose parent has an EX outside of its verbs. """
        if parent is None:
            return False
        category = t.basic_category
        if category == "VP":
            for kid in parent.children:
                if kid is t or kid.label == "VP":
                    break
                if "EX" in kid.preterminal_yield:
                    return True
        elif category.startswith("SQ"):
            for kid in parent.children:
                if kid.label.startswith("VB"):
                    continue
                if "EX" in kid.preterminal_yield:
                    return True
        return False

    @staticmethod
    def _is_wh_question(t: Tree, parent: Optional[Tree]) -> bool:
        """ Is t an SQ within an SBARQ that has a WH phrase child? """
        if not t.label.startswith("SQ") or parent is None:
            return False
        if parent.label != "SBARQ":
            return False
        return any(kid.label.startswith("WH") for kid in parent.children)

    def _pattern_head(self, t: Tree, patterns: Sequence[str]) -> Optional[Tree]:
        """ Return the head captured by the first matching pattern, if any """
        for pattern in patterns:
            captures = t.match_captures(pattern, self._context)
            if captures is not None:
                return captures["head"]
        return None

    def _conjp_head(self, t: Tree, parent: Optional[Tree]) -> Optional[Tree]:
        return self._pattern_head(t, CONJP_PATTERNS)

    def _sbarq_head(self, t: Tree, parent: Optional[Tree]) -> Optional[Tree]:
        if self._makes_copula_head:
            return None
        return self._pattern_head(t, COPULA_QUESTION_PATTERNS)

    def _verbal_head(self, t: Tree, parent: Optional[Tree]) -> Optional[Tree]:
        """ Find the head of a VP, SQ or SINV having an auxiliary or
            a copular verb, or return None if there is neither """
        category = t.basic_category
        children = t.children

        if self._has_verbal_auxiliary(
            children, self._auxiliaries, True
        ) or self._has_passive_progressive_auxiliary(children):
            head = self.traverse_locate(children, AUXILIARY_RULE, False)
            logger.debug("Head of %s with an auxiliary is %s", t.label, head)
            if head is not None:
                return head

        if (
            self._has_verbal_auxiliary(children, self._copular_verbs, False)
            and not self._is_existential(t, parent)
            and not self._is_wh_question(t, parent)
        ):
            # Questions invert the order of subject and complement
            direction = "right" if category == "SQ" else "left"
            # Temporal and adverbial phrases are never complements
            candidates = [
                kid
                for kid in children
                if "-TMP" not in kid.label and "-ADV" not in kid.label
            ]
            head = self.traverse_locate(
                candidates, (direction, COPULA_COMPLEMENTS), False
            )
            if category == "SQ" and head is not None and head.label.startswith("NP"):
                # In SQ, an NP is only a (predicative) head
                # if there is another NP to its left
                found_another_np = False
                for kid in children:
                    if kid is head:
                        break
                    if kid.label.startswith("NP"):
                        found_another_np = True
                        break
                if not found_another_np:
                    head = None
            logger.debug("Head of %s with a copula is %s", t.label, head)
            if head is not None:
                return head

        return None

    # Categories that get special treatment before the head rule table
    _SPECIAL_CATEGORIES: Dict[
        str, Callable[["SemanticHeadFinder", Tree, Optional[Tree]], Optional[Tree]]
    ] = {
        "CONJP": _conjp_head,
        "SBARQ": _sbarq_head,
        "VP": _verbal_head,
        "SQ": _verbal_head,
        "SINV": _verbal_head,
    }

    def determine_nontrivial_head(
        self, t: Tree, parent: Optional[Tree] = None
    ) -> Tree:
        logger.debug(
            "At %s, parent is %s", t.label, parent.label if parent is not None else None
        )
        special = self._SPECIAL_CATEGORIES.get(t.basic_category)
        if special is not None:
            head = special(self, t, parent)
            if head is not None:
                return head
        return super().determine_nontrivial_head(t, parent)

    def _should_skip(self, t: Tree, original_was_interjection: bool) -> bool:
        """ Can the node be passed over when looking for a previous conjunct?
            Punctuation can, as can interjections, unless the original
            head was itself an interjection. """
        label = t.label
        return (
            t.is_preterminal
            and (
                label in self._punctuation
                or (not original_was_interjection and label == "UH")
            )
        ) or (label == "INTJ" and not original_was_interjection)

    def _find_previous_head(
        self, index: int, children: Sequence[Tree], original_was_interjection: bool
    ) -> int:
        """ Step left from index across a run of punctuation containing a
            comma or a colon, and return the index of the first node beyond
            it. Returns -1 if there is no such run or no such node. """
        seen_separator = False
        for i in range(index - 1, -1, -1):
            kid = children[i]
            label = kid.basic_category
            if label in (",", ":"):
                seen_separator = True
            elif (
                kid.is_preterminal
                and (
                    label in self._punctuation
                    or (not original_was_interjection and label == "UH")
                )
            ) or (label == "INTJ" and not original_was_interjection):
                continue
            else:
                return i if seen_separator else -1
        return -1

    def post_operation_fix(self, index: int, children: Sequence[Tree]) -> int:
        """ If the head is preceded by a coordinating conjunction, move it
            back to the first conjunct. For 'a, b and c', 'a' is the head. """
        if index < 2:
            return index
        if children[index - 1].basic_category not in ("CC", "CONJP"):
            return index
        original_was_interjection = children[index].basic_category == "UH"
        new_index = index - 2
        # Don't move onto an interjection unless it is conjoined with another
        # interjection, as in 'Oh and don't forget to call!'
        while new_index >= 0 and self._should_skip(
            children[new_index], original_was_interjection
        ):
            new_index -= 1
        # Continue back across separators for three or more conjuncts
        while new_index >= 2:
            previous = self._find_previous_head(
                new_index, children, original_was_interjection
            )
            if previous < 0:
                break
            new_index = previous
        if new_index >= 0:
            logger.debug("Coordination: head moved from %d to %d", index, new_index)
            return new_index
        return index
