# -*- coding: utf-8 -*-
#
# SPDX-License-Identifier: LicenseRef-scancode-public-domain
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
"""
Aho-Corasick substring search used to find which entries of a heuristic rule
table occur in a license phrase.

Derived from an Aho-Corasick implementation by Wojciech Muła
(wojciech_mula@poczta.onet.pl, http://0x80.pl), public domain, and modified:
 - case insensitive search
 - a key is stored with an associated value, like in a mapping
 - matches report the original key and value rather than positions only
"""

from collections import deque
import logging

TRACE = False

logger = logging.getLogger(__name__)


def logger_debug(*args):
    pass


if TRACE:

    def logger_debug(*args):
        return logger.debug(' '.join(isinstance(a, str) and a or repr(a) for a in args))

    import sys
    logging.basicConfig(stream=sys.stdout)
    logger.setLevel(logging.DEBUG)


# used to distinguish from None
nil = object()


class SubstringAutomaton(object):
    """
    A trie of key strings converted to an Aho-Corasick automaton to find all
    the keys that occur in a searched string in a single pass.
    """

    def __init__(self, ignore_case=True):
        self.root = Node('')
        self.ignore_case = ignore_case

        # every char of every key: needed for the root failure links
        self._known_chars = set()

        # set to True once the trie is an automaton: no more additions
        self._converted = False

    def add(self, key, value=None):
        """
        Add a `key` string with an associated `value`. If the key already exists
        its value is replaced. Empty keys are ignored.
        """
        if self._converted:
            raise Exception('This automaton is complete and cannot be further modified.')
        if not key:
            return

        stored_key = self.ignore_case and key.lower() or key
        self._known_chars.update(stored_key)

        node = self.root
        for char in stored_key:
            child = node.children.get(char)
            if child is None:
                child = Node(char)
                node.children[char] = child
            node = child

        node.output = Match(key, value)

    def make_automaton(self):
        """
        Convert this trie to an Aho-Corasick automaton by adding failure links.
        """
        queue = deque()

        # root children fail to the root; chars that do not start any key loop
        # back to the root
        for char in self._known_chars:
            node = self.root.children.get(char)
            if node is not None and node is not self.root:
                node.fail = self.root
                queue.append(node)
            else:
                self.root.children[char] = self.root

        # breadth-first walk to add the failure links of deeper nodes
        while queue:
            current = queue.popleft()
            for node in current.children.values():
                queue.append(node)
                state = current.fail
                while node.char not in state.children:
                    state = state.fail
                node.fail = state.children.get(node.char, self.root)

        self._converted = True
        if TRACE:
            logger_debug('make_automaton: with', len(self._known_chars), 'known chars')

    def iter(self, string):
        """
        Yield a Match for each occurrence of a key in a `string`, including
        overlapping and nested occurrences.

        For example:
        >>> a = SubstringAutomaton()
        >>> a.add('GPL', 'GPL-3.0-or-later')
        >>> a.add('LGPL', 'LGPL-3.0-or-later')
        >>> a.make_automaton()
        >>> [m.key for m in a.iter('gnu lgpl')]
        ['LGPL', 'GPL']
        """
        if not self._converted:
            raise Exception('make_automaton() must be called before searching.')
        if not string:
            return

        string = self.ignore_case and string.lower() or string

        known_chars = self._known_chars
        state = self.root
        for char in string:
            if char not in known_chars:
                state = self.root
                continue

            while char not in state.children:
                state = state.fail
            state = state.children.get(char, self.root)

            match = state
            while match is not nil:
                if match.output is not nil:
                    yield match.output
                match = match.fail

    def matches(self, string):
        """
        Return a list of unique Match found in a `string` in the order they first
        occur.
        """
        seen = set()
        found = []
        for match in self.iter(string):
            if match.key in seen:
                continue
            seen.add(match.key)
            found.append(match)
        return found


class Node(object):
    """
    Node of the trie and automaton.
    """
    __slots__ = ['char', 'output', 'fail', 'children']

    def __init__(self, char, output=nil):
        self.char = char

        # the Match for a key ending at this node or nil
        self.output = output

        # failure link used by the automaton search
        self.fail = nil

        # mapping of char->node
        self.children = {}

    def __repr__(self):
        if self.output is not nil:
            return 'Node(%r, %r)' % (self.char, self.output)
        else:
            return 'Node(%r)' % self.char


class Match(object):
    """
    A key added to an automaton and its value.
    """
    __slots__ = 'key', 'value'

    def __init__(self, key, value=None):
        self.key = key
        self.value = value

    def __repr__(self):
        return '%s(%r, %r)' % (self.__class__.__name__, self.key, self.value)

    def __eq__(self, other):
        return (
            isinstance(other, Match)
            and self.key == other.key
            and self.value == other.value)

    def __hash__(self):
        return hash((self.key, self.value,))
