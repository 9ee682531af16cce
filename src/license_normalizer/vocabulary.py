#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
"""
The controlled vocabulary of license and exception identifiers.

A Vocabulary is an immutable, case-insensitive mapping of known license and
exception spellings to their canonical identifiers. The default vocabulary is
built from the vendored SPDX license list data file and is loaded only once.
"""

import json
import logging
import threading
from os.path import abspath
from os.path import dirname
from os.path import join
from types import MappingProxyType

from license_normalizer.errors import ExpressionError

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


data_dir = join(dirname(abspath(__file__)), 'data')
vendored_spdx_licenses_location = join(data_dir, 'spdx-licenses.json')


class Vocabulary(object):
    """
    An immutable set of license and exception identifiers, queried by exact
    case-insensitive key.

    For example:
    >>> vocabulary = Vocabulary(licenses=['MIT', 'GPL-2.0-only'],
    ...     deprecated=['GPL-2.0'], exceptions=['Classpath-exception-2.0'])
    >>> vocabulary.license('mit')
    'MIT'
    >>> vocabulary.license('gpl-2.0')
    'GPL-2.0'
    >>> vocabulary.is_deprecated('GPL-2.0')
    True
    >>> vocabulary.exception('CLASSPATH-EXCEPTION-2.0')
    'Classpath-exception-2.0'
    >>> vocabulary.license('Classpath-exception-2.0') is None
    True
    """

    def __init__(self, licenses=tuple(), deprecated=tuple(), exceptions=tuple(), version=None):
        by_key = {}
        for license_id in licenses:
            by_key[clean_key(license_id).lower()] = clean_key(license_id)

        deprecated_by_key = {}
        for license_id in deprecated:
            license_id = clean_key(license_id)
            keyl = license_id.lower()
            deprecated_by_key[keyl] = license_id
            # a current identifier always wins over a deprecated spelling
            by_key.setdefault(keyl, license_id)

        exceptions_by_key = {}
        for exception_id in exceptions:
            exceptions_by_key[clean_key(exception_id).lower()] = clean_key(exception_id)

        self.version = version
        self.licenses = MappingProxyType(by_key)
        self.deprecated = MappingProxyType(deprecated_by_key)
        self.exceptions = MappingProxyType(exceptions_by_key)

    def license(self, key):
        """
        Return the canonical license identifier for a `key` string or None.
        Deprecated identifiers are known licenses.
        """
        if not key:
            return
        return self.licenses.get(key.lower())

    def exception(self, key):
        """
        Return the canonical exception identifier for a `key` string or None.
        """
        if not key:
            return
        return self.exceptions.get(key.lower())

    def is_deprecated(self, key):
        return bool(key) and key.lower() in self.deprecated

    def __contains__(self, key):
        return self.license(key) is not None or self.exception(key) is not None

    def __len__(self):
        return len(self.licenses) + len(self.exceptions)

    def __repr__(self):
        return '%s(version=%r, licenses=%d, exceptions=%d)' % (
            self.__class__.__name__, self.version, len(self.licenses), len(self.exceptions))


def clean_key(key):
    """
    Return a `key` string stripped from whitespaces or raise an ExpressionError.
    """
    if not isinstance(key, str):
        raise ExpressionError('An identifier must be a string: %(key)r' % locals())
    key = key.strip()
    if not key or len(key.split()) != 1:
        raise ExpressionError(
            'An identifier cannot be empty or contain spaces: %(key)r' % locals())
    return key


def build_vocabulary(data):
    """
    Return a new Vocabulary from a `data` mapping with "licenses", "deprecated"
    and "exceptions" lists of identifiers and an optional
    "license_list_version" string.
    """
    if not isinstance(data, dict):
        raise ExpressionError('Vocabulary data must be a mapping: %(data)r' % locals())
    return Vocabulary(
        licenses=data.get('licenses') or [],
        deprecated=data.get('deprecated') or [],
        exceptions=data.get('exceptions') or [],
        version=data.get('license_list_version'),
    )


def load_vocabulary_data(location=vendored_spdx_licenses_location):
    """
    Return the vocabulary data mapping loaded from the JSON file at `location`.
    """
    with open(location) as f:
        return json.load(f)


_spdx_vocabulary = None
_spdx_vocabulary_lock = threading.Lock()


def get_spdx_vocabulary():
    """
    Return the default SPDX Vocabulary, loaded once from the vendored data.
    """
    global _spdx_vocabulary
    if _spdx_vocabulary is None:
        with _spdx_vocabulary_lock:
            if _spdx_vocabulary is None:
                vocabulary = build_vocabulary(load_vocabulary_data())
                if TRACE:
                    logger_debug('get_spdx_vocabulary: loaded', vocabulary)
                _spdx_vocabulary = vocabulary
    return _spdx_vocabulary
