#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
from unittest import TestCase

from license_normalizer.categories import Categories
from license_normalizer.categories import Category
from license_normalizer.categories import LicenseInfo
from license_normalizer.categories import expression_categories
from license_normalizer.categories import get_categories
from license_normalizer.categories import get_license_info
from license_normalizer.categories import has_copyleft
from license_normalizer.categories import is_commercial
from license_normalizer.categories import is_copyleft
from license_normalizer.categories import is_fully_permissive
from license_normalizer.categories import is_permissive
from license_normalizer.categories import license_category
from license_normalizer.errors import InvalidLicenseError


class LicenseCategoryTest(TestCase):

    def test_license_category(self):
        assert Category.PERMISSIVE == license_category('MIT')
        assert Category.PERMISSIVE == license_category('apache-2.0')
        assert Category.COPYLEFT == license_category('GPL-3.0-only')
        assert Category.COPYLEFT == license_category('GPL-2.0-or-later')
        assert Category.COPYLEFT_LIMITED == license_category('MPL-2.0')
        assert Category.PUBLIC_DOMAIN == license_category('Unlicense')
        assert Category.SOURCE_AVAILABLE == license_category('BUSL-1.1')

    def test_license_category_other_keys(self):
        assert Category.COPYLEFT == license_category('GPL-2.0')
        assert Category.COPYLEFT_LIMITED == license_category('LGPL-2.1')
        assert Category.PERMISSIVE == license_category('bsd-new')

    def test_license_category_strips_suffixes(self):
        assert Category.PERMISSIVE == license_category('Apache-2.0-or-later')
        assert Category.PERMISSIVE == license_category('MIT-only')

    def test_license_category_unknown(self):
        assert Category.UNKNOWN == license_category('NOT-A-LICENSE')
        assert Category.UNKNOWN == license_category('')
        assert Category.UNKNOWN == license_category(None)

    def test_is_permissive(self):
        assert is_permissive('MIT')
        assert is_permissive('Unlicense')
        assert not is_permissive('GPL-3.0-only')

    def test_is_copyleft(self):
        assert is_copyleft('GPL-3.0-only')
        assert is_copyleft('LGPL-2.1-only')
        assert not is_copyleft('MIT')

    def test_is_commercial(self):
        assert is_commercial('LicenseRef-scancode-commercial-license')
        assert is_commercial('proprietary-license')
        assert not is_commercial('MIT')

    def test_get_license_info(self):
        expected = LicenseInfo(
            key='gpl-2.0',
            spdx_key='GPL-2.0-only',
            category=Category.COPYLEFT,
            is_exception=False,
            is_deprecated=False,
        )
        assert expected == get_license_info('GPL-2.0-only')
        assert expected == get_license_info('gpl-2.0')
        assert get_license_info('Classpath-exception-2.0').is_exception
        assert get_license_info('NOT-A-LICENSE') is None

    def test_categories_are_loaded_once(self):
        assert get_categories() is get_categories()

    def test_categories_from_entries(self):
        categories = Categories([
            {'license_key': 'foo', 'spdx_license_key': 'Foo-1.0',
             'other_spdx_license_keys': ['Foo', 'LicenseRef-foo'], 'category': 'Copyleft'},
            {'license_key': 'bar', 'spdx_license_key': 'Bar-1.0', 'category': ''},
        ])
        assert Category.COPYLEFT == categories.category('foo-1.0')
        assert Category.COPYLEFT == categories.category('FOO')
        assert Category.UNKNOWN == categories.category('LicenseRef-foo')
        assert Category.UNKNOWN == categories.category('Bar-1.0')
        assert 'foo' == categories.info('Foo-1.0').key


class ExpressionCategoriesTest(TestCase):

    def test_expression_categories(self):
        assert [Category.PERMISSIVE] == expression_categories('MIT OR Apache-2.0')
        expected = [Category.PERMISSIVE, Category.COPYLEFT]
        assert expected == expression_categories('MIT OR GPL-3.0-only')

    def test_expression_categories_invalid_expression(self):
        with self.assertRaises(InvalidLicenseError):
            expression_categories('MIT OR NOTAREALLICENSE')

    def test_has_copyleft(self):
        assert not has_copyleft('MIT OR Apache-2.0')
        assert has_copyleft('MIT OR GPL-3.0-only')
        assert has_copyleft('MIT AND LGPL-2.1-only')
        assert has_copyleft('GPL v3 OR MIT License')
        assert not has_copyleft('MIT AND')

    def test_is_fully_permissive(self):
        assert is_fully_permissive('MIT OR Apache-2.0')
        assert is_fully_permissive('MIT AND BSD-3-Clause')
        assert not is_fully_permissive('MIT OR GPL-3.0-only')
        assert not is_fully_permissive('NONE')
        assert not is_fully_permissive('((MIT')
