"""

    Semhead: Semantic head finding for English constituency trees

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

    This module exposes the Semhead API, i.e. the identifiers that are
    directly accessible via the semhead module object after importing it.

"""

# Expose the Semhead API

from .basics import ConfigError, HeadFinderError, basic_category
from .tree import Tree, TreeNode, read_trees
from .matcher import Captures, ContextDict, match_captures, match_pattern
from .headfinder import Dependency, HeadFinder, ModCollinsHeadFinder
from .semantic import SemanticHeadFinder
from .settings import HeadRule, HeadRules, Settings, TreebankTags, Vocabulary
from .version import __version__

__author__ = "Miðeind ehf."
__copyright__ = "(C) 2021 Miðeind ehf."

__all__ = (
    "ConfigError",
    "HeadFinderError",
    "basic_category",
    "Tree",
    "TreeNode",
    "read_trees",
    "Captures",
    "ContextDict",
    "match_captures",
    "match_pattern",
    "Dependency",
    "HeadFinder",
    "ModCollinsHeadFinder",
    "SemanticHeadFinder",
    "HeadRule",
    "HeadRules",
    "Settings",
    "TreebankTags",
    "Vocabulary",
    "__version__",
    "__author__",
    "__copyright__",
)

Settings.read("config/Semhead.conf")
