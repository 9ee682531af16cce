#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
from unittest import TestCase

from boolean.boolean import TOKEN_SYMBOL

from license_normalizer.errors import InvalidLicenseError
from license_normalizer.errors import MissingOperandError
from license_normalizer.normalize import Normalizer
from license_normalizer.normalize import upgrade
from license_normalizer.rules import RuleTable
from license_normalizer.rules import Rules
from license_normalizer.rules import TRANSPOSITIONS
from license_normalizer.rules import add_gpl_suffix
from license_normalizer.rules import cc_attribution
from license_normalizer.rules import cc_by_prefix
from license_normalizer.rules import free_or_net_bsd
from license_normalizer.rules import get_default_rules
from license_normalizer.vocabulary import build_vocabulary


class UpgradeTest(TestCase):

    def test_upgrade_only(self):
        for identifier in ('GPL-1.0', 'GPL-2.0', 'LGPL-2.0', 'LGPL-2.1', 'AGPL-1.0'):
            assert identifier + '-only' == upgrade(identifier)

    def test_upgrade_or_later(self):
        for identifier in ('GPL-3.0', 'LGPL-3.0', 'AGPL-3.0'):
            assert identifier + '-or-later' == upgrade(identifier)

    def test_upgrade_plus(self):
        assert 'GPL-2.0-or-later' == upgrade('GPL-2.0+')
        assert 'LGPL-2.1-or-later' == upgrade('LGPL-2.1+')
        assert 'GPL-3.0-or-later' == upgrade('GPL-3.0+')

    def test_upgrade_leaves_other_identifiers_unchanged(self):
        for identifier in ('MIT', 'Apache-2.0+', 'GPL-2.0-only', 'GPL-3.0-or-later', 'LGPL-2.1-only'):
            assert identifier == upgrade(identifier)

    def test_upgrade_is_idempotent(self):
        for identifier in ('GPL-2.0', 'GPL-2.0+', 'LGPL-3.0', 'MIT'):
            assert upgrade(identifier) == upgrade(upgrade(identifier))


class NormalizerTest(TestCase):

    def setUp(self):
        self.normalizer = Normalizer()

    def check(self, expected, phrase):
        assert expected == self.normalizer.normalize(phrase), phrase

    def test_normalize_exact(self):
        self.check('MIT', 'MIT')
        self.check('MIT', ' mit ')
        self.check('Zlib', 'zlib')
        self.check('Apache-2.0', 'apache-2.0')

    def test_normalize_exact_upgrades_deprecated(self):
        self.check('GPL-3.0-or-later', 'GPL-3.0')
        self.check('GPL-2.0-only', 'gpl-2.0')
        self.check('GPL-2.0-or-later', 'GPL-2.0+')
        self.check('LGPL-2.1-only', 'LGPL-2.1')

    def test_normalize_trailing_plus(self):
        self.check('Apache-2.0+', 'Apache-2.0+')
        self.check('GPL-2.0-or-later', 'GPL-2.0 +')

    def test_normalize_transforms(self):
        self.check('Apache-2.0', 'Apache 2')
        self.check('Apache-2.0', 'Apache 2.0')
        self.check('GPL-3.0-or-later', 'GPL v3')
        self.check('GPL-2.0-only', 'GPLv2')
        self.check('GPL-2.0-only', 'GPL 2')
        self.check('LGPL-2.1-only', 'LGPLv2.1')
        self.check('MIT', 'M.I.T.')
        self.check('CC-BY-4.0', 'CC BY 4.0')
        self.check('BSD-3-Clause', 'BSD 3-Clause')

    def test_normalize_transforms_with_trailing_plus(self):
        self.check('GPL-2.0-or-later', 'GPL v2+')
        self.check('GPL-3.0-or-later', 'GPLv3+')

    def test_normalize_bsd_variants(self):
        self.check('BSD-3-Clause', 'New BSD License')
        self.check('BSD-2-Clause', 'Simplified BSD')
        self.check('BSD-2-Clause-FreeBSD', 'FreeBSD')

    def test_normalize_transpositions(self):
        self.check('Apache-2.0', 'Apache License, Version 2.0')
        self.check('Apache-2.0', 'Apache License 2.0')
        self.check('MIT', 'MIT License')
        self.check('ISC', 'ISC License')
        self.check('GPL-3.0-or-later', 'GNU General Public License v3')
        self.check('LGPL-2.1-only', 'GNU Lesser General Public License v2.1')
        self.check('MPL-2.0', 'Mozilla Public License 2.0')
        self.check('EPL-2.0', 'Eclipse Public License 2.0')

    def test_normalize_last_resorts(self):
        self.check('BSD-2-Clause', 'BSD')
        self.check('Apache-2.0', 'Apache')
        self.check('Apache-2.0', 'Apache Software License')
        self.check('Artistic-2.0', 'Artistic License')
        self.check('Unlicense', 'Unlicensed')
        self.check('Unlicense', 'Public Domain')
        self.check('WTFPL', 'WTF')
        self.check('Beerware', 'BEER')

    def test_normalize_transpositions_then_last_resorts(self):
        for expected, phrase in (
            ('MIT', 'MTIX'),
            ('ISC', 'ISTware'),
            ('GPL-3.0-or-later', 'GUNware'),
        ):
            assert self.normalizer.last_resort(phrase) is None, phrase
            assert self.normalizer.transposed(phrase) is None, phrase
            assert expected == self.normalizer.transposed_last_resort(phrase), phrase
            self.check(expected, phrase)

    def test_normalize_passthrough(self):
        self.check('NONE', 'none')
        self.check('NOASSERTION', 'NoAssertion')
        self.check('LicenseRef-my-license', 'LicenseRef-my-license')
        self.check('DocumentRef-doc:LicenseRef-x', 'DocumentRef-doc:LicenseRef-x')

    def test_normalize_invalid(self):
        with self.assertRaises(InvalidLicenseError):
            self.normalizer.normalize('')
        with self.assertRaises(InvalidLicenseError):
            self.normalizer.normalize('   ')
        try:
            self.normalizer.normalize('NOTAREALLICENSE')
            self.fail('InvalidLicenseError should be raised')
        except InvalidLicenseError as e:
            assert 'NOTAREALLICENSE' == e.token_string

    def test_normalize_with_small_vocabulary(self):
        vocabulary = build_vocabulary({'licenses': ['MIT', 'Foo-2.0'], 'deprecated': ['GPL-2.0']})
        normalizer = Normalizer(vocabulary=vocabulary)
        assert 'Foo-2.0' == normalizer.normalize('Foo 2')
        assert 'GPL-2.0-only' == normalizer.normalize('GPL-2.0')
        with self.assertRaises(InvalidLicenseError):
            normalizer.normalize('ISC')


class NormalizeWordsTest(TestCase):

    def setUp(self):
        self.normalizer = Normalizer()

    def test_normalize_words_single_phrase(self):
        assert 'Apache-2.0' == self.normalizer.normalize_words(['Apache', '2'])
        assert 'MIT' == self.normalizer.normalize_words(['MIT', 'License'])
        assert 'BSD-3-Clause' == self.normalizer.normalize_words(['New', 'BSD', 'License'])

    def test_normalize_words_trailing_plus(self):
        assert 'GPL-2.0-or-later' == self.normalizer.normalize_words(['GPL', 'v2+'])

    def test_normalize_words_passthrough(self):
        assert 'NONE' == self.normalizer.normalize_words(['none'])
        assert 'LicenseRef-foo' == self.normalizer.normalize_words(['LicenseRef-foo'])

    def test_normalize_words_reference_is_its_own_span(self):
        assert 'LicenseRef-foo MIT' == self.normalizer.normalize_words(['LicenseRef-foo', 'mit'])

    def test_normalize_words_splits_into_several_identifiers(self):
        words = ['Unicode-3.0', 'Unicode-DFS-2016']
        expected = 'Unicode-3.0 Unicode-DFS-2016'
        assert expected == self.normalizer.normalize_words(words)

    def test_normalize_words_reports_leftover_word(self):
        try:
            self.normalizer.normalize_words(['Unicode-3.0', 'Qux'], positions=[4, 16])
            self.fail('InvalidLicenseError should be raised')
        except InvalidLicenseError as e:
            assert 'Qux' == e.token_string
            assert 16 == e.position
            assert TOKEN_SYMBOL == e.token_type

    def test_normalize_words_empty(self):
        with self.assertRaises(MissingOperandError):
            self.normalizer.normalize_words([])

    def test_normalize_words_reports_first_invalid_word(self):
        try:
            self.normalizer.normalize_words(['NOTAREALLICENSE'])
            self.fail('InvalidLicenseError should be raised')
        except InvalidLicenseError as e:
            assert 'NOTAREALLICENSE' == e.token_string


class RulesTest(TestCase):

    def test_default_rules_are_built_once(self):
        assert get_default_rules() is get_default_rules()

    def test_rule_tables_are_sorted_by_specificity(self):
        rules = Rules()
        sources = [r.source for r in rules.transpositions.rules]
        lengths = [len(s) for s in sources]
        assert sorted(lengths, reverse=True) == lengths
        assert 'The Apache Software License, Version 2.0' == sources[0]

    def test_rule_table_matching_is_case_insensitive_longest_first(self):
        table = RuleTable(TRANSPOSITIONS)
        sources = [r.source for r in table.matching('the mit license')]
        assert ['The MIT License', ' License'] == sources

    def test_rule_table_ties_are_sorted_by_source(self):
        table = RuleTable([('BB', 'b'), ('AA', 'a'), ('A', 'x')])
        assert ['AA', 'BB', 'A'] == [r.source for r in table.matching('AABB')]
        assert 'AA' == table.matching('xxaabbxx')[0].source
        assert [] == table.matching('nothing here')

    def test_rule_apply_replaces_all_ignoring_case(self):
        table = RuleTable([(' License', '')])
        rule, = table.matching('MIT LICENSE and ISC license')
        assert 'MIT and ISC' == rule.apply('MIT LICENSE and ISC license')

    def test_last_resorts_longest_wins(self):
        rules = Rules()
        assert 'LGPL-2.1-only' == rules.last_resorts.matching('LGPLV2.1')[0].target
        assert 'GPL-2.0-only' == rules.last_resorts.matching('GNU GPLV2')[0].target
        assert 'EPL-2.0' == rules.last_resorts.matching('ECLIPSE PUBLIC LICENSE V2')[0].target

    def test_add_gpl_suffix(self):
        assert 'GPL-3.0-or-later' == add_gpl_suffix('GPL-3.0')
        assert 'GPL-2.0-only' == add_gpl_suffix('GPL-2.0')

    def test_free_or_net_bsd(self):
        assert 'BSD-2-Clause-NetBSD' == free_or_net_bsd('NetBSD License')
        assert 'BSD-2-Clause-FreeBSD' == free_or_net_bsd('free bsd')
        assert 'BSD' == free_or_net_bsd('BSD')

    def test_creative_commons_transforms(self):
        assert 'CC-BY-SA-4.0' == cc_by_prefix('BY-SA-4.0')
        assert 'MIT' == cc_by_prefix('MIT')
        assert 'CC-BY-NC-4.0' == cc_attribution('Attribution-NonCommercial')
        assert 'CC-BY-SA-3.0' == cc_attribution('Attribution-ShareAlike 3.0')
        assert 'MIT' == cc_attribution('MIT')
