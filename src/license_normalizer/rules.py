#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
"""
Heuristic rule tables used to normalize informal license names.

There are three tables:

- TRANSFORMS: an ordered list of string transforms. Each transform is applied
  alone to a license phrase and the result is looked up in the vocabulary.

- TRANSPOSITIONS: (source, replacement) pairs used to correct long-form names,
  common misspellings and suffixes. A source is matched case-insensitively.

- LAST_RESORTS: (substring, identifier) pairs used when nothing more precise
  matched: a phrase containing the substring maps to the identifier.

The last two tables are plain data: the Rules object sorts them by descending
source length (then ascending source) so that the longest, most specific
entry is always tried first.
"""

import re
import threading

from license_normalizer._automaton import SubstringAutomaton

whitespace = re.compile(r'\s+').sub
digit = re.compile(r',?\s*(\d)').sub
trailing_digit_with_sep = re.compile(r',?\s*(\d)$').sub
version = re.compile(r',?\s*(V\.?|Version)\s*(\d)', re.IGNORECASE).sub
trailing_version = re.compile(r',?\s*(V\.?|Version)\s*(\d)$', re.IGNORECASE).sub
trailing_digit = re.compile(r'(\d)$').sub
bsd_clause_count = re.compile(r'(-|\s)?(\d)$', re.IGNORECASE).sub
bsd_clause_word = re.compile(r'(-|\s)clause(-|\s)(\d)', re.IGNORECASE).sub
new_bsd = re.compile(r'\b(Modified|New|Revised)(-|\s)?BSD((-|\s)License)?', re.IGNORECASE).sub
simplified_bsd = re.compile(r'\bSimplified(-|\s)?BSD((-|\s)License)?', re.IGNORECASE).sub
free_net_bsd = re.compile(r'\b(Free|Net)(-|\s)?BSD((-|\s)Licen[sc]e)?', re.IGNORECASE).search
clear_bsd = re.compile(r'\bClear(-|\s)?BSD((-|\s)License)?', re.IGNORECASE).sub
old_bsd = re.compile(r'\b(Old|Original)(-|\s)?BSD((-|\s)License)?', re.IGNORECASE).sub
cc_space_digit = re.compile(r'\s+(\d)').sub
cc_version = re.compile(r'\d\.\d').search


def capitalize_first(s):
    """
    zlib -> Zlib
    """
    return s[:1].upper() + s[1:]


def add_gpl_suffix(s):
    """
    GPL-3.0 -> GPL-3.0-or-later, GPL-2.0 -> GPL-2.0-only
    """
    if '3.0' in s:
        return s + '-or-later'
    return s + '-only'


def complete_trailing_dash(s):
    """
    GPL-2.0- -> GPL-2.0-only
    """
    if s.endswith('-'):
        return s + 'only'
    return s


def free_or_net_bsd(s):
    """
    FreeBSD -> BSD-2-Clause-FreeBSD, NetBSD License -> BSD-2-Clause-NetBSD
    """
    match = free_net_bsd(s)
    if match:
        variant = match.group(1)
        variant = variant[:1].upper() + variant[1:].lower()
        return 'BSD-2-Clause-' + variant + 'BSD'
    return s


def cc_by_prefix(s):
    """
    BY-NC-4.0 -> CC-BY-NC-4.0
    """
    if s.upper().startswith('BY-'):
        return 'CC-' + s
    return s


CC_ATTRIBUTION_TOKENS = (
    ('Attribution', 'BY'),
    ('NonCommercial', 'NC'),
    ('NoDerivatives', 'ND'),
    ('ShareAlike', 'SA'),
)


def cc_attribution(s):
    """
    Attribution-NonCommercial -> CC-BY-NC-4.0
    """
    result = s
    for words, token in CC_ATTRIBUTION_TOKENS:
        result = result.replace(words, token)
    result = cc_space_digit(r'-\g<1>', result)
    result = result.replace(' International', '')
    if result != s and not result.startswith('CC-'):
        result = 'CC-' + result
        if not cc_version(result):
            result = result + '-4.0'
    return result


TRANSFORMS = (
    # MIT -> MIT
    str.upper,
    str.strip,
    # M.I.T. -> MIT
    lambda s: s.replace('.', ''),
    # Apache- 2.0 -> Apache-2.0
    lambda s: whitespace('', s),
    # CC BY 4.0 -> CC-BY-4.0
    lambda s: whitespace('-', s),
    # LGPLv2.1 -> LGPL-2.1
    lambda s: s.replace('v', '-', 1),
    # Apache 2.0 -> Apache-2.0
    lambda s: digit(r'-\g<1>', s),
    # GPL 2 -> GPL-2.0
    lambda s: trailing_digit_with_sep(r'-\g<1>.0', s),
    # Apache Version 2.0 -> Apache-2.0
    lambda s: version(r'-\g<2>', s),
    # Apache Version 2 -> Apache-2.0
    lambda s: trailing_version(r'-\g<2>.0', s),
    capitalize_first,
    # MPL/2.0 -> MPL-2.0
    lambda s: s.replace('/', '-'),
    add_gpl_suffix,
    complete_trailing_dash,
    # GPL2 -> GPL-2.0
    lambda s: trailing_digit(r'-\g<1>.0', s),
    # BSD 3 -> BSD-3-Clause
    lambda s: bsd_clause_count(r'-\g<2>-Clause', s),
    # BSD clause 3 -> BSD-3-Clause
    lambda s: bsd_clause_word(r'-\g<3>-Clause', s),
    lambda s: new_bsd('BSD-3-Clause', s),
    lambda s: simplified_bsd('BSD-2-Clause', s),
    free_or_net_bsd,
    lambda s: clear_bsd('BSD-3-Clause-Clear', s),
    lambda s: old_bsd('BSD-4-Clause', s),
    cc_by_prefix,
    cc_attribution,
)


TRANSPOSITIONS = (
    ('The Apache Software License, Version 2.0', 'Apache-2.0'),
    ('The Apache License, Version 2.0', 'Apache-2.0'),
    ('Apache Software License, Version 2.0', 'Apache-2.0'),
    ('Apache License, Version 2.0', 'Apache-2.0'),
    ('The Apache Software License', 'Apache'),
    ('Apache Software License', 'Apache'),
    ('The MIT License', 'MIT'),
    ('GNU Lesser General Public License v3.0', 'LGPL-3.0'),
    ('GNU Lesser General Public License v3', 'LGPL-3.0'),
    ('GNU Lesser General Public License v2.1', 'LGPL-2.1'),
    ('GNU Lesser General Public License v2.0', 'LGPL-2.0'),
    ('GNU Lesser General Public License v2', 'LGPL-2.0'),
    # a Lesser GPL without version is the 2.1
    ('GNU Lesser General Public License', 'LGPL-2.1'),
    ('Lesser General Public License', 'LGPL-2.1'),
    ('GNU Affero General Public License', 'AGPL'),
    ('Affero General Public License', 'AGPL'),
    ('GNU General Public License', 'GPL'),
    ('GNU Public License', 'GPL'),
    ('Mozilla Public License', 'MPL'),
    ('Universal Permissive License', 'UPL'),
    ('Eclipse Public License', 'EPL'),
    (' or later', '+'),
    ('-or-later', '+'),
    (' International', ''),
    ('GNU LGPL', 'LGPL'),
    ('GNU GPL', 'GPL'),
    ('GNU/GPL', 'GPL'),
    ('GNU GLP', 'GPL'),
    ('GNU/GPLv', 'GPLv'),
    (' License', ''),
    ('-License', ''),
    ('WTFGPL', 'WTFPL'),
    ('APGL', 'AGPL'),
    ('GLP', 'GPL'),
    # APLv2 -> Apache-2
    ('APLv', 'Apache-'),
    ('APL', 'Apache'),
    ('ISD', 'ISC'),
    ('IST', 'ISC'),
    ('MTI', 'MIT'),
    ('GNU', 'GPL'),
    ('GUN', 'GPL'),
    ('WTH', 'WTF'),
    ('Claude', 'Clause'),
    ('+', ''),
)


LAST_RESORTS = (
    ('MIT +NO-FALSE-ATTRIBS', 'MITNFA'),
    ('PUBLIC DOMAIN', 'Unlicense'),
    ('PUBLIC-DOMAIN', 'Unlicense'),
    ('PUBLICDOMAIN', 'Unlicense'),
    ('ECLIPSE PUBLIC LICENSE 2', 'EPL-2.0'),
    ('ECLIPSE PUBLIC LICENSE, VERSION 2', 'EPL-2.0'),
    ('ECLIPSE PUBLIC LICENSE V2', 'EPL-2.0'),
    ('EPL-2', 'EPL-2.0'),
    ('EPL 2', 'EPL-2.0'),
    ('EPL2', 'EPL-2.0'),
    ('ECLIPSE PUBLIC LICENSE 1', 'EPL-1.0'),
    ('EPL-1', 'EPL-1.0'),
    ('EPL 1', 'EPL-1.0'),
    ('EPL1', 'EPL-1.0'),
    ('ASL-2', 'Apache-2.0'),
    ('ASL 2', 'Apache-2.0'),
    ('ASL2', 'Apache-2.0'),
    ('ALV2', 'Apache-2.0'),
    ('AL2', 'Apache-2.0'),
    ('ASL', 'Apache-2.0'),
    ('2 CLAUSE', 'BSD-2-Clause'),
    ('2-CLAUSE', 'BSD-2-Clause'),
    ('3 CLAUSE', 'BSD-3-Clause'),
    ('3-CLAUSE', 'BSD-3-Clause'),
    ('AFFERO', 'AGPL-3.0-or-later'),
    ('AGPL', 'AGPL-3.0-or-later'),
    ('LGPL2.1+', 'LGPL-2.1-or-later'),
    ('LGPL2.1', 'LGPL-2.1-only'),
    ('LGPLV2.1', 'LGPL-2.1-only'),
    ('LGPLV1', 'LGPL-1.0-only'),
    ('LGPL-1', 'LGPL-1.0-only'),
    ('LGPLV2', 'LGPL-2.0-only'),
    ('LGPL-2', 'LGPL-2.0-only'),
    ('LGPL', 'LGPL-3.0-or-later'),
    ('GPLV1', 'GPL-1.0-only'),
    ('GPL-1', 'GPL-1.0-only'),
    ('GPLV2', 'GPL-2.0-only'),
    ('GPL-2', 'GPL-2.0-only'),
    ('GPL', 'GPL-3.0-or-later'),
    ('GNU', 'GPL-3.0-or-later'),
    ('APACHE', 'Apache-2.0'),
    ('ARTISTIC_2', 'Artistic-2.0'),
    ('ARTISTIC_1', 'Artistic-1.0'),
    ('ARTISTIC-2', 'Artistic-2.0'),
    ('ARTISTIC-1', 'Artistic-1.0'),
    ('ARTISTIC 2', 'Artistic-2.0'),
    ('ARTISTIC 1', 'Artistic-1.0'),
    ('ARTISTIC', 'Artistic-2.0'),
    ('BEER', 'Beerware'),
    ('BOOST', 'BSL-1.0'),
    ('BSD', 'BSD-2-Clause'),
    ('CC0', 'CC0-1.0'),
    ('CDDL', 'CDDL-1.1'),
    ('ECLIPSE', 'EPL-1.0'),
    ('EPL', 'EPL-1.0'),
    ('FUCK', 'WTFPL'),
    ('MIT', 'MIT'),
    ('MPL', 'MPL-2.0'),
    ('UNLI', 'Unlicense'),
    ('UPL', 'UPL-1.0'),
    ('WTF', 'WTFPL'),
    ('X11', 'X11'),
    ('ZLIB', 'Zlib'),
    ('ISCL', 'ISC'),
    ('ICS', 'ISC'),
    ('ISC', 'ISC'),
    ('OPEN FONT', 'OFL-1.1'),
    ('OFL', 'OFL-1.1'),
    ('PHP-3', 'PHP-3.01'),
    ('PHP', 'PHP-3.01'),
    ('PYTHON SOFTWARE FOUNDATION', 'PSF-2.0'),
    ('PSF-2', 'PSF-2.0'),
    ('PSF', 'PSF-2.0'),
    ('PYTHON', 'Python-2.0'),
    ('PERL_5', 'Artistic-1.0-Perl'),
    ('PERL5', 'Artistic-1.0-Perl'),
    ('PERL 5', 'Artistic-1.0-Perl'),
    ('ZPL', 'ZPL-2.1'),
    ('EUROPEAN UNION PUBLIC', 'EUPL-1.2'),
    ('EUPL', 'EUPL-1.2'),
    ('WXWINDOWS', 'wxWindows'),
    ('WXWIDGETS', 'wxWindows'),
)


def by_specificity(pair):
    """
    Sort key for a (source, target) pair: longest source first, then ascending.
    """
    source, _target = pair
    return -len(source), source


class Rule(object):
    """
    A heuristic table entry: a `source` string and its `target` replacement or
    identifier, with a precompiled case-insensitive replacement function.
    """
    __slots__ = 'source', 'target', 'rank', '_sub'

    def __init__(self, source, target, rank):
        self.source = source
        self.target = target
        self.rank = rank
        self._sub = re.compile(re.escape(source), re.IGNORECASE).sub

    def apply(self, string):
        """
        Return a `string` with every occurrence of this rule source replaced by
        its target, ignoring case.
        """
        return self._sub(lambda _m: self.target, string)

    def __repr__(self):
        return 'Rule(%r, %r)' % (self.source, self.target)


class RuleTable(object):
    """
    An immutable table of Rule sorted by specificity and indexed in a substring
    automaton to find the rules applicable to a string.
    """

    def __init__(self, pairs):
        pairs = sorted(pairs, key=by_specificity)
        self.rules = tuple(Rule(source, target, rank)
                           for rank, (source, target) in enumerate(pairs))

        self.automaton = SubstringAutomaton(ignore_case=True)
        for rule in reversed(self.rules):
            # with case-insensitive duplicates, keep the most specific rule
            self.automaton.add(rule.source, rule)
        self.automaton.make_automaton()

    def matching(self, string):
        """
        Return a list of the Rule whose source occurs in `string` ignoring case,
        most specific first.
        """
        rules = [match.value for match in self.automaton.matches(string)]
        return sorted(rules, key=lambda r: r.rank)


class Rules(object):
    """
    The set of heuristic tables used by a Normalizer.
    """

    def __init__(self, transforms=TRANSFORMS, transpositions=TRANSPOSITIONS,
                 last_resorts=LAST_RESORTS):
        self.transforms = tuple(transforms)
        self.transpositions = RuleTable(transpositions)
        self.last_resorts = RuleTable(last_resorts)


_default_rules = None
_default_rules_lock = threading.Lock()


def get_default_rules():
    """
    Return the default Rules, built once.
    """
    global _default_rules
    if _default_rules is None:
        with _default_rules_lock:
            if _default_rules is None:
                _default_rules = Rules()
    return _default_rules
