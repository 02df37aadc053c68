"""
    Semhead: Semantic head finding for English constituency trees

    Settings module

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

    This module reads and interprets the Semhead.conf
    configuration file. The file can include other files using the $include
    directive, making it easier to arrange configuration sections into logical
    and manageable pieces.

    Sections are identified like so: [ section_name ]

    Comments start with # signs.

    Sections are interpreted by section handlers.

"""

from typing import (
    Callable,
    Dict,
    List,
    Optional,
    Set,
    Tuple,
    Union,
)

import logging
import threading

from .basics import ConfigError, LineReader


# A head rule: a search direction and a tuple of categories, for example
# ("rightdis", ("NN", "NNP", "NNPS")). The directions are described in
# headfinder.py.
HeadRule = Tuple[str, Tuple[str, ...]]
HeadRuleTable = Dict[str, Tuple[HeadRule, ...]]

DIRECTIONS = frozenset(
    ("left", "right", "leftdis", "rightdis", "leftexcept", "rightexcept")
)


class TreebankTags:

    """ Wrapper around the part-of-speech tag sets, initialized from the config file """

    # Tags that are never chosen as heads if anything else is available
    PUNCTUATION: Set[str] = set()
    # Tags that can carry an auxiliary or copular verb
    VERBAL: Set[str] = set()
    # Tags that denote an auxiliary whatever the word form
    UNAMBIGUOUS_AUXILIARY: Set[str] = set()

    @staticmethod
    def add(tagset: Set[str], s: str) -> None:
        """ Add whitespace-separated tags to a tag set """
        tagset.update(s.split())


class Vocabulary:

    """ Wrapper around the verb word form lists, initialized from the config file """

    # Forms of will, have, do, to... that make a verbal preterminal an auxiliary
    AUXILIARIES: Set[str] = set()
    # Forms of be and get that introduce passive and progressive VPs
    PASSIVE_AUXILIARIES: Set[str] = set()
    # Forms of be, seem, become, remain... that link a subject and a complement
    COPULAR_VERBS: Set[str] = set()

    @staticmethod
    def add(vocabulary: Set[str], s: str) -> None:
        """ Add whitespace-separated word forms to a vocabulary.
            Word forms are stored in lower case. """
        vocabulary.update(w.lower() for w in s.split())


class HeadRules:

    """ Wrapper around the head rule tables, initialized from the config file """

    # The modified Collins head rules, keyed by basic category
    COLLINS: HeadRuleTable = dict()
    # Replacements for the above that the semantic head finder installs
    SEMANTIC: HeadRuleTable = dict()

    @staticmethod
    def parse(s: str) -> Tuple[str, Union[str, Tuple[HeadRule, ...]]]:
        """ Parse a head rule line of the form
                CAT dir cat1 cat2 ... | dir cat3 ...
            or an alias line of the form
                CAT = OTHER
            Returns the category and either the parsed rules
            or the name of the aliased category. """
        if "=" in s:
            a = s.split("=", maxsplit=1)
            cat = a[0].strip()
            other = a[1].strip()
            if not cat or not other or len(cat.split()) != 1:
                raise ConfigError("Head rule alias should have the form CAT = OTHER")
            return cat, other
        a = s.split(maxsplit=1)
        if len(a) != 2:
            raise ConfigError(
                "Head rule for '{0}' must specify at least one direction".format(a[0])
            )
        cat = a[0]
        rules: List[HeadRule] = []
        for part in a[1].split("|"):
            p = part.split()
            if not p:
                raise ConfigError("Empty head rule for '{0}'".format(cat))
            if p[0] not in DIRECTIONS:
                raise ConfigError("Unknown head rule direction '{0}'".format(p[0]))
            rules.append((p[0], tuple(p[1:])))
        return cat, tuple(rules)

    @staticmethod
    def add(table: HeadRuleTable, s: str) -> None:
        """ Add a head rule line to the given table """
        cat, rules = HeadRules.parse(s)
        if isinstance(rules, str):
            if rules not in table:
                raise ConfigError(
                    "Head rule alias refers to unknown category '{0}'".format(rules)
                )
            table[cat] = table[rules]
        else:
            table[cat] = rules


class Settings:

    """ Global settings """

    _lock = threading.Lock()
    loaded: bool = False
    # If True, copular verbs are heads like any other verb
    TREAT_COPULA_AS_HEAD: bool = False

    # Configuration settings from the Semhead.conf file

    @staticmethod
    def _handle_settings(s: str) -> None:
        """ Handle config parameters in the settings section """
        a = s.lower().split("=", maxsplit=1)
        if len(a) != 2:
            raise ConfigError("Expected a 'parameter = value' line")
        par = a[0].strip().lower()
        sval = a[1].strip()
        if sval == "true":
            val = True
        elif sval == "false":
            val = False
        else:
            raise ConfigError("Invalid parameter value: {0} = {1}".format(par, sval))
        if par == "debug":
            if val:
                logging.getLogger("semhead").setLevel(logging.DEBUG)
        elif par == "treat_copula_as_head":
            Settings.TREAT_COPULA_AS_HEAD = val
        else:
            raise ConfigError("Unknown configuration parameter '{0}'".format(par))

    @staticmethod
    def _handle_punctuation_tags(s: str) -> None:
        """ Handle the punctuation tags section """
        TreebankTags.add(TreebankTags.PUNCTUATION, s)

    @staticmethod
    def _handle_verbal_tags(s: str) -> None:
        """ Handle the verbal tags section """
        TreebankTags.add(TreebankTags.VERBAL, s)

    @staticmethod
    def _handle_unambiguous_auxiliary_tags(s: str) -> None:
        TreebankTags.add(TreebankTags.UNAMBIGUOUS_AUXILIARY, s)

    @staticmethod
    def _handle_auxiliaries(s: str) -> None:
        Vocabulary.add(Vocabulary.AUXILIARIES, s)

    @staticmethod
    def _handle_passive_auxiliaries(s: str) -> None:
        Vocabulary.add(Vocabulary.PASSIVE_AUXILIARIES, s)

    @staticmethod
    def _handle_copular_verbs(s: str) -> None:
        Vocabulary.add(Vocabulary.COPULAR_VERBS, s)

    @staticmethod
    def _handle_head_rules(s: str) -> None:
        """ Handle a line in the generic head rules section """
        HeadRules.add(HeadRules.COLLINS, s)

    @staticmethod
    def _handle_semantic_head_rules(s: str) -> None:
        """ Handle a line in the semantic head rules section. Aliases
            may refer to categories in either table. """
        cat, rules = HeadRules.parse(s)
        if isinstance(rules, str):
            table = HeadRules.SEMANTIC if rules in HeadRules.SEMANTIC else HeadRules.COLLINS
            if rules not in table:
                raise ConfigError(
                    "Head rule alias refers to unknown category '{0}'".format(rules)
                )
            HeadRules.SEMANTIC[cat] = table[rules]
        else:
            HeadRules.SEMANTIC[cat] = rules

    @staticmethod
    def _clear() -> None:
        """ Reset all configured tables before a (re)read """
        TreebankTags.PUNCTUATION.clear()
        TreebankTags.VERBAL.clear()
        TreebankTags.UNAMBIGUOUS_AUXILIARY.clear()
        Vocabulary.AUXILIARIES.clear()
        Vocabulary.PASSIVE_AUXILIARIES.clear()
        Vocabulary.COPULAR_VERBS.clear()
        HeadRules.COLLINS.clear()
        HeadRules.SEMANTIC.clear()
        Settings.TREAT_COPULA_AS_HEAD = False

    @staticmethod
    def read(fname: str, force: bool = False) -> None:
        """ Read configuration file """

        with Settings._lock:

            if Settings.loaded and not force:
                return

            CONFIG_HANDLERS: Dict[str, Callable[[str], None]] = {
                "settings": Settings._handle_settings,
                "punctuation_tags": Settings._handle_punctuation_tags,
                "verbal_tags": Settings._handle_verbal_tags,
                "unambiguous_auxiliary_tags": Settings._handle_unambiguous_auxiliary_tags,
                "auxiliaries": Settings._handle_auxiliaries,
                "passive_auxiliaries": Settings._handle_passive_auxiliaries,
                "copular_verbs": Settings._handle_copular_verbs,
                "head_rules": Settings._handle_head_rules,
                "semantic_head_rules": Settings._handle_semantic_head_rules,
            }
            handler: Optional[Callable[[str], None]] = None  # Current section handler

            Settings._clear()
            rdr: Optional[LineReader] = None
            try:
                rdr = LineReader(fname, package_name=__name__)
                for s in rdr.lines():
                    # Ignore comments
                    ix = s.find("#")
                    if ix >= 0:
                        s = s[0:ix]
                    s = s.strip()
                    if not s:
                        # Blank line: ignore
                        continue
                    if s[0] == "[" and s[-1] == "]":
                        # New section
                        section = s[1:-1].strip().lower()
                        if section in CONFIG_HANDLERS:
                            handler = CONFIG_HANDLERS[section]
                            continue
                        raise ConfigError("Unknown section name '{0}'".format(section))
                    if handler is None:
                        raise ConfigError("No handler for config line '{0}'".format(s))
                    # Call the correct handler depending on the section
                    try:
                        handler(s)
                    except ConfigError as e:
                        # Add file name and line number information to the exception
                        # if it's not already there
                        e.set_pos(rdr.fname(), rdr.line())
                        raise e

            except ConfigError as e:
                # Add file name and line number information to the exception
                # if it's not already there
                if rdr:
                    e.set_pos(rdr.fname(), rdr.line())
                raise e

            Settings.loaded = True
