#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
"""
License categories such as Permissive or Copyleft for license identifiers and
expressions, using the vendored license categories data file derived from the
ScanCode LicenseDB.
"""

from collections import namedtuple
import json
import logging
import threading
from os.path import join

from boolean.boolean import ParseError

from license_normalizer.errors import ExpressionError
from license_normalizer.vocabulary import data_dir

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


vendored_categories_location = join(data_dir, 'license-categories.json')


class Category(object):
    PERMISSIVE = 'Permissive'
    COPYLEFT = 'Copyleft'
    COPYLEFT_LIMITED = 'Copyleft Limited'
    COMMERCIAL = 'Commercial'
    PROPRIETARY_FREE = 'Proprietary Free'
    PUBLIC_DOMAIN = 'Public Domain'
    PATENT_LICENSE = 'Patent License'
    SOURCE_AVAILABLE = 'Source-available'
    FREE_RESTRICTED = 'Free Restricted'
    CLA = 'CLA'
    UNSTATED = 'Unstated License'
    UNKNOWN = 'Unknown'


PERMISSIVE_CATEGORIES = frozenset([Category.PERMISSIVE, Category.PUBLIC_DOMAIN])
COPYLEFT_CATEGORIES = frozenset([Category.COPYLEFT, Category.COPYLEFT_LIMITED])
COMMERCIAL_CATEGORIES = frozenset([Category.COMMERCIAL, Category.PROPRIETARY_FREE])


LicenseInfo = namedtuple('LicenseInfo', 'key spdx_key category is_exception is_deprecated')


class Categories(object):
    """
    A lookup table of license categories by lowercase license key.
    """

    def __init__(self, entries=tuple()):
        self.entries = tuple(entries)
        self.by_key = {}
        self.info_by_key = {}

        for entry in self.entries:
            category = entry.get('category') or Category.UNKNOWN
            license_key = entry.get('license_key') or ''
            spdx_key = entry.get('spdx_license_key') or ''

            keys = [spdx_key]
            keys.extend(k for k in entry.get('other_spdx_license_keys') or []
                        if not k.startswith('LicenseRef-'))
            keys.append(license_key)

            for key in keys:
                if key:
                    self.by_key[key.lower()] = category

            info = LicenseInfo(
                key=license_key,
                spdx_key=spdx_key,
                category=category,
                is_exception=bool(entry.get('is_exception')),
                is_deprecated=bool(entry.get('is_deprecated')),
            )
            # the first entry wins for a key
            for key in (spdx_key, license_key):
                if key:
                    self.info_by_key.setdefault(key.lower(), info)

    def category(self, license):
        """
        Return the category of a `license` identifier or Category.UNKNOWN. The
        lookup is retried without an "-only" or "-or-later" suffix.
        """
        if not license:
            return Category.UNKNOWN

        category = self.by_key.get(license.lower())
        if category:
            return category

        for suffix in ('-only', '-or-later'):
            if license.endswith(suffix):
                license = license[:-len(suffix)]
        return self.by_key.get(license.lower(), Category.UNKNOWN)

    def info(self, license):
        if not license:
            return
        return self.info_by_key.get(license.lower())


def load_categories(location=vendored_categories_location):
    """
    Return a Categories loaded from the JSON file at `location`: a list of
    mappings with "license_key", "spdx_license_key", "other_spdx_license_keys",
    "category", "is_exception" and "is_deprecated" attributes.
    """
    with open(location) as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise ExpressionError('License categories data must be a list: %(location)r' % locals())
    if TRACE:
        logger_debug('load_categories: loaded', len(entries), 'entries from', location)
    return Categories(entries)


_categories = None
_categories_lock = threading.Lock()


def get_categories():
    global _categories
    if _categories is None:
        with _categories_lock:
            if _categories is None:
                _categories = load_categories()
    return _categories


def license_category(license):
    """
    Return the category of a `license` identifier.

    For example:
    >>> license_category('MIT')
    'Permissive'
    >>> license_category('GPL-3.0-only')
    'Copyleft'
    >>> license_category('MPL-2.0')
    'Copyleft Limited'
    """
    return get_categories().category(license)


def is_permissive(license):
    return license_category(license) in PERMISSIVE_CATEGORIES


def is_copyleft(license):
    return license_category(license) in COPYLEFT_CATEGORIES


def is_commercial(license):
    return license_category(license) in COMMERCIAL_CATEGORIES


def get_license_info(license):
    """
    Return a LicenseInfo for a `license` identifier or ScanCode license key or
    None if not found.
    """
    return get_categories().info(license)


def expression_licenses(expression, licensing=None):
    """
    Return a list of the unique licenses of an `expression` in order of
    appearance.
    """
    if licensing is None:
        from license_normalizer import get_licensing
        licensing = get_licensing()
    return licensing.license_keys(expression, unique=True)


def expression_categories(expression, licensing=None):
    """
    Return a list of the unique categories of the licenses of an `expression`
    in order of appearance. Raise a ParseError on an invalid expression.

    For example:
    >>> expression_categories('MIT OR GPL-3.0-only')
    ['Permissive', 'Copyleft']
    """
    categories = []
    for license in expression_licenses(expression, licensing):
        category = license_category(license)
        if category not in categories:
            categories.append(category)
    return categories


def has_copyleft(expression, licensing=None):
    """
    Return True if any license of an `expression` is copyleft. Return False for
    an invalid expression.
    """
    try:
        licenses = expression_licenses(expression, licensing)
    except (ParseError, ExpressionError) as e:
        if TRACE:
            logger_debug('has_copyleft: invalid expression:', expression, e)
        return False
    return any(is_copyleft(lic) for lic in licenses)


def is_fully_permissive(expression, licensing=None):
    """
    Return True if an `expression` has licenses and all are permissive. Return
    False for an invalid expression.
    """
    try:
        licenses = expression_licenses(expression, licensing)
    except (ParseError, ExpressionError) as e:
        if TRACE:
            logger_debug('is_fully_permissive: invalid expression:', expression, e)
        return False
    return bool(licenses) and all(is_permissive(lic) for lic in licenses)
