#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
"""
Map informal license names such as "Apache 2", "GPL v3" or "MIT License" to
canonical license identifiers.

A phrase is resolved through a layered pipeline where the first success wins:
exact match, trailing "+" re-match, transforms, transpositions then transforms,
last resorts, transpositions then last resorts. Every identifier found is
upgraded from a deprecated GNU identifier to its "-only" or "-or-later" form.
"""

import logging

from boolean.boolean import TOKEN_SYMBOL

from license_normalizer.errors import InvalidLicenseError
from license_normalizer.errors import PARSE_INVALID_LICENSE_ID
from license_normalizer.errors import PARSE_MISSING_OPERAND
from license_normalizer.errors import parse_error
from license_normalizer.rules import get_default_rules
from license_normalizer.vocabulary import get_spdx_vocabulary

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


SPECIAL_VALUES = frozenset(['NONE', 'NOASSERTION'])

LICENSEREF_PREFIX = 'LICENSEREF-'
DOCUMENTREF_PREFIX = 'DOCUMENTREF-'

# deprecated GNU identifiers and the suffix they gain when upgraded
GNU_UPGRADES = {
    'GPL-1.0': '-only',
    'GPL-2.0': '-only',
    'GPL-3.0': '-or-later',
    'LGPL-1.0': '-only',
    'LGPL-2.0': '-only',
    'LGPL-2.1': '-only',
    'LGPL-3.0': '-or-later',
    'AGPL-1.0': '-only',
    'AGPL-2.0': '-only',
    'AGPL-3.0': '-or-later',
}


def upgrade(identifier):
    """
    Return the modern form of a deprecated GNU `identifier` or the `identifier`
    unchanged.

    For example:
    >>> upgrade('GPL-2.0')
    'GPL-2.0-only'
    >>> upgrade('GPL-2.0+')
    'GPL-2.0-or-later'
    >>> upgrade('LGPL-3.0')
    'LGPL-3.0-or-later'
    >>> upgrade('GPL-2.0-only')
    'GPL-2.0-only'
    """
    or_later = identifier.endswith('+')
    base = or_later and identifier[:-1] or identifier
    suffix = GNU_UPGRADES.get(base)
    if not suffix:
        return identifier
    if or_later:
        return base + '-or-later'
    return base + suffix


def is_passthrough(word):
    """
    Return True if a `word` is a special value or a reference that is never
    normalized.
    """
    upper = word.upper()
    return (
        upper in SPECIAL_VALUES
        or upper.startswith(LICENSEREF_PREFIX)
        or upper.startswith(DOCUMENTREF_PREFIX)
    )


def passthrough(word):
    """
    Return the normalized form of a passthrough `word`: special values are
    upper-cased and references are kept verbatim.
    """
    upper = word.upper()
    if upper in SPECIAL_VALUES:
        return upper
    return word


class Normalizer(object):
    """
    Resolve license phrases against a Vocabulary using heuristic Rules.

    For example:
    >>> n = Normalizer()
    >>> n.normalize('Apache 2')
    'Apache-2.0'
    >>> n.normalize('GPL v3')
    'GPL-3.0-or-later'
    >>> n.normalize_words(['MIT', 'License'])
    'MIT'
    """

    def __init__(self, vocabulary=None, rules=None):
        self.vocabulary = vocabulary or get_spdx_vocabulary()
        self.rules = rules or get_default_rules()

    def lookup(self, phrase):
        """
        Return the canonical license identifier for an exact phrase or None.
        """
        return self.vocabulary.license(phrase.strip())

    def normalize(self, phrase):
        """
        Return the canonical license identifier for a license `phrase` string or
        raise an InvalidLicenseError.
        """
        phrase = phrase and phrase.strip() or ''
        if not phrase:
            raise parse_error(PARSE_INVALID_LICENSE_ID, token_string=phrase)

        if is_passthrough(phrase) and len(phrase.split()) == 1:
            return passthrough(phrase)

        for tier in (
            self.exact,
            self.trailing_plus,
            self.transformed,
            self.transposed,
            self.last_resort,
            self.transposed_last_resort,
        ):
            identifier = tier(phrase)
            if identifier:
                if TRACE:
                    logger_debug('normalize:', phrase, '->', identifier, 'by', tier.__name__)
                return identifier

        raise parse_error(PARSE_INVALID_LICENSE_ID, token_string=phrase)

    def exact(self, phrase):
        identifier = self.lookup(phrase)
        if identifier:
            return upgrade(identifier)

    def trailing_plus(self, phrase):
        base = phrase[:-1].strip()
        if phrase.endswith('+') and base:
            identifier = self.lookup(base)
            if identifier:
                return upgrade(identifier + '+')

    def transformed(self, phrase):
        """
        Return an identifier for the first transform of `phrase` that is an exact
        identifier or None. For a phrase with a trailing "+", each transform is
        also tried on the phrase without its "+".
        """
        base = None
        if phrase.endswith('+'):
            base = phrase[:-1]

        for transform in self.rules.transforms:
            transformed = transform(phrase).strip()
            if transformed != phrase:
                identifier = self.lookup(transformed)
                if identifier:
                    return upgrade(identifier)

            if base:
                transformed = transform(base).strip()
                if transformed != base:
                    identifier = self.lookup(transformed)
                    if identifier:
                        return upgrade(identifier + '+')

    def transposed(self, phrase):
        """
        Return an identifier found by correcting `phrase` with transpositions,
        the longest first, then an exact lookup or transforms. Return None
        otherwise.
        """
        for rule in self.rules.transpositions.matching(phrase):
            corrected = rule.apply(phrase).strip()
            if not corrected:
                continue
            identifier = self.exact(corrected) or self.transformed(corrected)
            if identifier:
                return identifier

    def last_resort(self, phrase):
        """
        Return the identifier of the longest last-resort substring contained in
        `phrase` or None. Identifiers unknown to the vocabulary are skipped.
        """
        for rule in self.rules.last_resorts.matching(phrase.upper()):
            identifier = self.lookup(rule.target)
            if identifier:
                return upgrade(identifier)

    def transposed_last_resort(self, phrase):
        for rule in self.rules.transpositions.matching(phrase):
            corrected = rule.apply(phrase).strip()
            if not corrected:
                continue
            identifier = self.last_resort(corrected)
            if identifier:
                return identifier

    def normalize_words(self, words, positions=None):
        """
        Return a string of canonical license identifiers separated by spaces for
        a `words` list of strings, or raise a ParseError.

        Words are consumed greedily from left to right: at each offset the
        longest span of words that normalizes to an identifier wins. A word that
        does not start any such span is reported as an invalid license, at its
        position from the optional `positions` list of word positions.
        """
        if positions is None:
            positions = [-1] * len(words)
        located = [(w, p) for w, p in zip(words, positions) if w and w.strip()]
        words = [w for w, _p in located]
        positions = [p for _w, p in located]
        if not words:
            raise parse_error(PARSE_MISSING_OPERAND)

        if len(words) == 1 and is_passthrough(words[0]):
            return passthrough(words[0])

        results = []
        start = 0
        while start < len(words):
            if is_passthrough(words[start]):
                results.append(passthrough(words[start]))
                start += 1
                continue

            # a span never extends over a special value or reference
            limit = start + 1
            while limit < len(words) and not is_passthrough(words[limit]):
                limit += 1

            for end in range(limit, start, -1):
                identifier = self.normalize_span(words[start:end])
                if identifier:
                    results.append(identifier)
                    start = end
                    break
            else:
                raise parse_error(
                    PARSE_INVALID_LICENSE_ID,
                    token_type=TOKEN_SYMBOL,
                    token_string=words[start],
                    position=positions[start],
                )

        normalized = ' '.join(results)
        if TRACE:
            logger_debug('normalize_words:', words, '->', normalized)
        return normalized

    def normalize_span(self, words):
        """
        Return the identifier for a span of `words` or None.
        """
        candidate = ' '.join(words)
        try:
            return self.normalize(candidate)
        except InvalidLicenseError:
            pass

        if candidate.endswith('+'):
            try:
                identifier = self.normalize(candidate[:-1])
            except InvalidLicenseError:
                return
            return upgrade(identifier + '+')
