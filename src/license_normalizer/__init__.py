#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
"""
This module defines a mini language to parse, normalize and render license
expressions such as SPDX license expressions.

Informal license names such as "Apache 2", "GPL v3" or "MIT License" are
normalized to canonical SPDX identifiers before parsing. Expressions are built
on top of the boolean.py boolean logic engine and can be rendered back to a
canonical string with the minimal parentheses needed to keep their meaning.

The main entry point is the Licensing object. The module-level functions use a
default Licensing built once with the vendored SPDX license list.
"""

from collections import namedtuple
import logging
import re
import threading

import boolean
from boolean import Expression as LicenseExpression

# imported here to avoid leaking boolean.py constants to callers
from boolean.boolean import ParseError
from boolean.boolean import TOKEN_SYMBOL
from boolean.boolean import TOKEN_AND
from boolean.boolean import TOKEN_OR
from boolean.boolean import TOKEN_LPAR
from boolean.boolean import TOKEN_RPAR

from license_normalizer.errors import ExpressionError
from license_normalizer.errors import PARSE_EMPTY_EXPRESSION
from license_normalizer.errors import PARSE_INVALID_EXCEPTION_ID
from license_normalizer.errors import PARSE_INVALID_LICENSE_ID
from license_normalizer.errors import PARSE_INVALID_SPECIAL_VALUE
from license_normalizer.errors import PARSE_MISSING_OPERAND
from license_normalizer.errors import PARSE_NESTING_TOO_DEEP
from license_normalizer.errors import PARSE_UNBALANCED_PARENS
from license_normalizer.errors import PARSE_UNEXPECTED_TOKEN
from license_normalizer.errors import parse_error
from license_normalizer.normalize import Normalizer
from license_normalizer.normalize import SPECIAL_VALUES
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


# token types that are not boolean.py tokens
TOKEN_WITH = 10
TOKEN_PLUS = 11
TOKEN_LICENSEREF = 12
TOKEN_DOCUMENTREF = 13
TOKEN_END = 14

Token = namedtuple('Token', 'type string position')

# mapping of lowercase operator strings to a token type
OPERATORS = {'and': TOKEN_AND, 'or': TOKEN_OR, 'with': TOKEN_WITH}

# word types ever passed to the normalizer
WORD_TOKENS = frozenset([TOKEN_SYMBOL, TOKEN_LICENSEREF, TOKEN_DOCUMENTREF])

LICENSEREF_PREFIX = 'LicenseRef-'
DOCUMENTREF_PREFIX = 'DocumentRef-'


_tokenizer = re.compile(r'''
    (?P<space>\s+)
    |(?P<lpar>\()
    |(?P<rpar>\))
    |(?P<plus>\+)
    |(?P<word>[^\s()+]+)
    ''',
    re.VERBOSE | re.UNICODE
)


def tokenize(expression):
    """
    Yield Token for an `expression` string. Whitespace separates words and
    parens and plus signs are always tokens of their own. A last TOKEN_END
    token is always yielded.

    For example:
    >>> [t.type for t in tokenize('GPL-2.0+ with Classpath-exception-2.0')]
    [8, 11, 10, 8, 14]
    """
    expression = expression or ''
    for match in _tokenizer.finditer(expression):
        kind = match.lastgroup
        string = match.group()
        position = match.start()

        if kind == 'space':
            continue

        if kind == 'lpar':
            yield Token(TOKEN_LPAR, string, position)

        elif kind == 'rpar':
            yield Token(TOKEN_RPAR, string, position)

        elif kind == 'plus':
            yield Token(TOKEN_PLUS, string, position)

        else:
            upper = string.upper()
            operator = OPERATORS.get(string.lower())
            if operator:
                yield Token(operator, string, position)
            elif upper.startswith(LICENSEREF_PREFIX.upper()):
                yield Token(TOKEN_LICENSEREF, string, position)
            elif upper.startswith(DOCUMENTREF_PREFIX.upper()):
                yield Token(TOKEN_DOCUMENTREF, string, position)
            else:
                yield Token(TOKEN_SYMBOL, string, position)

    yield Token(TOKEN_END, '', len(expression))


class Renderable(object):
    """
    An interface for renderable objects.
    """

    def render(self, template='{symbol.key}', *args, **kwargs):
        """
        Return a formatted string rendering for this expression using the
        `template` format string to render each symbol. The variable available
        is `symbol` and a custom template can be provided to handle custom HTML
        rendering or similar.

        Note that when render() is called the *args and **kwargs are propagated
        recursively to any Renderable object render() method.
        """
        raise NotImplementedError

    def licenses(self):
        """
        Return a list of license identifiers and references strings used in this
        expression in order of appearance, with duplicates. Exceptions and
        special values are not licenses.
        """
        raise NotImplementedError

    def __str__(self):
        return self.render()


class BaseSymbol(Renderable, boolean.Symbol):
    """
    A base class for all symbols. The rendered string is the boolean.py Symbol
    object used for equality and hashing.
    """

    __bool__ = lambda s: True

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.obj)


class License(BaseSymbol):
    """
    A license identified by its canonical `key`, optionally followed by a "+"
    (`or_later`) and a `exception` identifier.

    For example:
    >>> str(License('GPL-2.0-only', exception='Classpath-exception-2.0'))
    'GPL-2.0-only WITH Classpath-exception-2.0'
    >>> str(License('Apache-2.0', or_later=True))
    'Apache-2.0+'
    """

    def __init__(self, key, or_later=False, exception=None):
        if not key or not isinstance(key, str):
            raise ExpressionError('A license key must be a non-empty string: %(key)r' % locals())
        self.key = key
        self.or_later = bool(or_later)
        self.exception = exception or None
        super(License, self).__init__(self.render())

    def render(self, template='{symbol.key}', *args, **kwargs):
        rendered = template.format(symbol=self)
        if self.or_later:
            rendered += '+'
        if self.exception:
            rendered += ' WITH ' + self.exception
        return rendered

    def licenses(self):
        return [self.key]

    def __repr__(self):
        return '%s(%r, or_later=%r, exception=%r)' % (
            self.__class__.__name__, self.key, self.or_later, self.exception)


class LicenseRef(BaseSymbol):
    """
    A user-defined license reference with an optional document reference, kept
    verbatim and never validated.

    For example:
    >>> str(LicenseRef('my-license'))
    'LicenseRef-my-license'
    >>> str(LicenseRef('my-license', document_ref='spdx-tool-1.2'))
    'DocumentRef-spdx-tool-1.2:LicenseRef-my-license'
    """

    def __init__(self, license_ref, document_ref=None):
        if not license_ref:
            raise ExpressionError('A license reference cannot be empty.')
        self.license_ref = license_ref
        self.document_ref = document_ref or None
        super(LicenseRef, self).__init__(self.key)

    @property
    def key(self):
        key = LICENSEREF_PREFIX + self.license_ref
        if self.document_ref:
            key = DOCUMENTREF_PREFIX + self.document_ref + ':' + key
        return key

    def render(self, template='{symbol.key}', *args, **kwargs):
        return template.format(symbol=self)

    def licenses(self):
        return [self.key]


class SpecialValue(BaseSymbol):
    """
    One of the NONE or NOASSERTION special values. A special value is always a
    whole expression.
    """

    def __init__(self, key):
        key = key.upper()
        if key not in SPECIAL_VALUES:
            raise ExpressionError('Not a special value: %(key)r' % locals())
        self.key = key
        super(SpecialValue, self).__init__(self.key)

    def render(self, template='{symbol.key}', *args, **kwargs):
        return template.format(symbol=self)

    def licenses(self):
        return []


class RenderableFunction(Renderable):
    # derived from the __str__ code in boolean.py

    def render(self, template='{symbol.key}', *args, **kwargs):
        """
        Render an expression as a string, recursively applying the string
        `template` to every symbols and operators. Sub-expressions are wrapped in
        parens only where needed to keep their precedence.
        """
        rendered_items = []
        rendered_items_append = rendered_items.append
        for arg in self.chained_args():
            rendered = arg.render(template, *args, **kwargs)
            if self.needs_parens(arg):
                rendered = '(%s)' % rendered
            rendered_items_append(rendered)
        return self.operator.join(rendered_items)

    def chained_args(self):
        """
        Return a list of the operands of this expression in order, where nested
        operands of the same operator are replaced by their own operands.
        Long chains such as "A OR B OR C ..." are walked without recursion.
        """
        operands = []
        stack = [self]
        while stack:
            expression = stack.pop()
            if isinstance(expression, self.__class__):
                stack.extend(reversed(expression.args))
            else:
                operands.append(expression)
        return operands

    def needs_parens(self, arg):
        raise NotImplementedError

    def licenses(self):
        licenses = []
        for arg in self.chained_args():
            licenses.extend(arg.licenses())
        return licenses


class AND(RenderableFunction, boolean.AND):
    """
    Custom representation for the AND operator to uppercase.
    """

    def __init__(self, *args):
        super(AND, self).__init__(*args)
        self.operator = ' AND '

    def needs_parens(self, arg):
        return isinstance(arg, boolean.OR)


class OR(RenderableFunction, boolean.OR):
    """
    Custom representation for the OR operator to uppercase.
    """

    def __init__(self, *args):
        super(OR, self).__init__(*args)
        self.operator = ' OR '

    def needs_parens(self, arg):
        if isinstance(arg, boolean.AND):
            return True
        return isinstance(arg, License) and bool(arg.exception)


class Parser(object):
    """
    A recursive descent parser building a LicenseExpression from a sequence of
    Token, using this grammar where WITH binds tighter than AND, and AND tighter
    than OR:

        expression := and_term (OR and_term)*
        and_term   := with_term (AND with_term)*
        with_term  := atom (WITH exception)?
        atom       := "(" expression ")" | license "+"? | reference | special
    """

    def __init__(self, licensing, tokens):
        self.licensing = licensing
        self.vocabulary = licensing.vocabulary
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TOKEN_END:
            self.tokens.append(Token(TOKEN_END, '', -1))
        self.index = 0

    @property
    def current(self):
        return self.tokens[self.index]

    def advance(self):
        token = self.current
        if token.type != TOKEN_END:
            self.index += 1
        return token

    def error(self, error_code, token=None):
        token = token or self.current
        return parse_error(
            error_code,
            token_type=token.type,
            token_string=token.string,
            position=token.position,
        )

    def parse(self):
        if self.current.type == TOKEN_END:
            raise self.error(PARSE_EMPTY_EXPRESSION)

        try:
            expression = self.parse_or()
        except RecursionError:
            raise self.error(PARSE_NESTING_TOO_DEEP)

        token = self.current
        if token.type == TOKEN_RPAR:
            raise self.error(PARSE_UNBALANCED_PARENS)
        if token.type != TOKEN_END:
            raise self.error(PARSE_UNEXPECTED_TOKEN)
        return expression

    def parse_or(self):
        left = self.parse_and()
        while self.current.type == TOKEN_OR:
            operator = self.advance()
            right = self.parse_and()
            self.check_operands(operator, left, right)
            left = self.licensing.OR(left, right)
        return left

    def parse_and(self):
        left = self.parse_with()
        while self.current.type == TOKEN_AND:
            operator = self.advance()
            right = self.parse_with()
            self.check_operands(operator, left, right)
            left = self.licensing.AND(left, right)
        return left

    def check_operands(self, operator, *operands):
        if any(isinstance(o, SpecialValue) for o in operands):
            raise self.error(PARSE_INVALID_SPECIAL_VALUE, operator)

    def parse_with(self):
        parenthesized = self.current.type == TOKEN_LPAR
        atom = self.parse_atom()
        if self.current.type != TOKEN_WITH:
            return atom

        operator = self.advance()
        if isinstance(atom, SpecialValue):
            raise self.error(PARSE_INVALID_SPECIAL_VALUE, operator)

        if parenthesized or not isinstance(atom, License) or atom.exception:
            raise self.error(PARSE_UNEXPECTED_TOKEN, operator)

        token = self.current
        if token.type in (TOKEN_LICENSEREF, TOKEN_DOCUMENTREF):
            raise self.error(PARSE_INVALID_EXCEPTION_ID)
        if token.type != TOKEN_SYMBOL:
            raise self.error(PARSE_MISSING_OPERAND)

        exception = self.vocabulary.exception(token.string)
        if not exception:
            raise self.error(PARSE_INVALID_EXCEPTION_ID)
        self.advance()

        return License(atom.key, or_later=atom.or_later, exception=exception)

    def parse_atom(self):
        token = self.current

        if token.type == TOKEN_LPAR:
            self.advance()
            expression = self.parse_or()
            if self.current.type != TOKEN_RPAR:
                raise self.error(PARSE_UNBALANCED_PARENS)
            self.advance()
            return expression

        if token.type == TOKEN_SYMBOL:
            upper = token.string.upper()
            if upper in SPECIAL_VALUES:
                self.advance()
                return SpecialValue(upper)

            key = self.vocabulary.license(token.string)
            if not key:
                raise self.error(PARSE_INVALID_LICENSE_ID)
            self.advance()

            or_later = False
            if self.current.type == TOKEN_PLUS:
                self.advance()
                or_later = True
            return License(key, or_later=or_later)

        if token.type == TOKEN_LICENSEREF:
            license_ref = token.string[len(LICENSEREF_PREFIX):]
            if not license_ref:
                raise self.error(PARSE_UNEXPECTED_TOKEN)
            self.advance()
            return LicenseRef(license_ref)

        if token.type == TOKEN_DOCUMENTREF:
            ref = parse_document_ref(token.string)
            if not ref:
                raise self.error(PARSE_UNEXPECTED_TOKEN)
            self.advance()
            return ref

        if token.type == TOKEN_END:
            raise self.error(PARSE_MISSING_OPERAND)

        raise self.error(PARSE_UNEXPECTED_TOKEN)


def parse_document_ref(string):
    """
    Return a LicenseRef for a "DocumentRef-xxx:LicenseRef-yyy" `string` or None.

    For example:
    >>> parse_document_ref('DocumentRef-spdx-tool:LicenseRef-foo').key
    'DocumentRef-spdx-tool:LicenseRef-foo'
    >>> parse_document_ref('DocumentRef-spdx-tool') is None
    True
    """
    rest = string[len(DOCUMENTREF_PREFIX):]
    separator = ':' + LICENSEREF_PREFIX.upper()
    index = rest.upper().find(separator)
    if index < 1:
        return
    license_ref = rest[index + len(separator):]
    if not license_ref:
        return
    return LicenseRef(license_ref, document_ref=rest[:index])


def join_expression(parts):
    """
    Return an expression string joining `parts` strings with spaces, except
    inside parens.
    """
    expression = ''
    for part in parts:
        if expression and not expression.endswith('(') and part != ')':
            expression += ' '
        expression += part
    return expression


class Licensing(boolean.BooleanAlgebra):
    """
    Define a mini language to parse, normalize and render license expressions
    against a vocabulary of license and exception identifiers.

    For example:

    >>> l = Licensing()
    >>> expr = l.parse(" GPL-2.0-only or LGPL-2.1-only and mit ")
    >>> expected = 'GPL-2.0-only OR (LGPL-2.1-only AND MIT)'
    >>> assert expected == expr.render('{symbol.key}')

    >>> expr = l.parse("Apache 2 OR MIT License")
    >>> str(expr)
    'Apache-2.0 OR MIT'
    >>> l.license_keys(expr)
    ['Apache-2.0', 'MIT']
    """

    def __init__(self, vocabulary=None, rules=None):
        """
        Initialize a Licensing with an optional `vocabulary` Vocabulary and
        `rules` Rules. Both default to the vendored SPDX data.
        """
        super(Licensing, self).__init__(Symbol_class=BaseSymbol, AND_class=AND, OR_class=OR)

        self.vocabulary = vocabulary or get_spdx_vocabulary()
        self.normalizer = Normalizer(vocabulary=self.vocabulary, rules=rules)

    def tokenize(self, expression):
        """
        Return an iterable of Token for an `expression` string.
        """
        tokens = tokenize(expression)
        if TRACE:
            tokens = list(tokens)
            logger_debug('tokenize:', expression, '->', tokens)
        return tokens

    def parse(self, expression, strict=False):
        """
        Return a new LicenseExpression object by parsing a license `expression`
        string or raise an ExpressionError or ParseError on errors. If
        `expression` is already a LicenseExpression it is returned as-is.

        If `strict` is False, informal license names are first normalized to
        canonical identifiers. Otherwise, every license and exception must be an
        exact identifier of the vocabulary, compared case-insensitively.

        For example:
        >>> expression = 'EPL-1.0 and Apache-1.1 OR GPL-2.0-only with Classpath-exception-2.0'
        >>> parsed = Licensing().parse(expression, strict=True)
        >>> expected = '(EPL-1.0 AND Apache-1.1) OR (GPL-2.0-only WITH Classpath-exception-2.0)'
        >>> assert expected == parsed.render(template='{symbol.key}')
        """
        if isinstance(expression, LicenseExpression):
            return expression

        if not isinstance(expression, str):
            ext = type(expression)
            raise ExpressionError('expression must be a string and not: %(ext)r' % locals())

        if not expression.strip():
            raise parse_error(PARSE_EMPTY_EXPRESSION, position=0)

        if not strict:
            expression = self.normalize_expression_string(expression)

        parser = Parser(self, self.tokenize(expression))
        return parser.parse()

    def parse_strict(self, expression):
        return self.parse(expression, strict=True)

    def normalize_expression_string(self, expression):
        """
        Return an expression string where each run of license words is replaced
        by canonical identifiers and each run of exception words after a WITH is
        replaced by a canonical exception identifier. Operators are upper-cased.
        Raise a ParseError if a license or an exception cannot be normalized.

        For example:
        >>> Licensing().normalize_expression_string('(gpl v2+ or mit license)')
        '(GPL-2.0-or-later OR MIT)'
        """
        parts = []
        words = []
        positions = []
        expect_exception = False

        for token in self.tokenize(expression):
            if token.type in WORD_TOKENS:
                words.append(token.string)
                positions.append(token.position)
                continue

            if token.type == TOKEN_PLUS:
                if words:
                    words[-1] += '+'
                continue

            if words:
                if expect_exception:
                    parts.append(self.normalize_exception(words, positions[0]))
                else:
                    parts.append(self.normalizer.normalize_words(words, positions))
                words = []
                positions = []
            expect_exception = token.type == TOKEN_WITH

            if token.type in (TOKEN_AND, TOKEN_OR, TOKEN_WITH):
                parts.append(token.string.upper())
            elif token.type in (TOKEN_LPAR, TOKEN_RPAR):
                parts.append(token.string)

        normalized = join_expression(parts)
        if TRACE:
            logger_debug('normalize_expression_string:', expression, '->', normalized)
        return normalized

    def normalize_exception(self, words, position=-1):
        """
        Return the canonical exception identifier for a list of exception
        `words` starting at `position` or raise an InvalidExceptionError.
        """
        dashed = '-'.join(words)
        exception = self.vocabulary.exception(dashed)
        if not exception:
            spaced = ' '.join(words)
            exception = self.vocabulary.exception(spaced)
        if not exception:
            raise parse_error(
                PARSE_INVALID_EXCEPTION_ID,
                token_type=TOKEN_SYMBOL,
                token_string=' '.join(words),
                position=position,
            )
        return exception

    def normalize(self, license):
        """
        Return the canonical identifier of a single informal `license` name.
        """
        return self.normalizer.normalize(license)

    def normalize_expression(self, expression):
        return str(self.parse(expression))

    def normalize_expression_strict(self, expression):
        return str(self.parse_strict(expression))

    def is_valid(self, expression):
        """
        Return True if `expression` is a valid expression made only of exact
        identifiers.
        """
        try:
            self.parse_strict(expression)
            return True
        except (ParseError, ExpressionError):
            return False

    def is_valid_license(self, license):
        """
        Return True if `license` is an exact license identifier.
        """
        return isinstance(license, str) and self.vocabulary.license(license.strip()) is not None

    def validate_licenses(self, licenses):
        """
        Return a tuple of (True, []) if all the `licenses` identifiers are valid
        or (False, list of invalid identifiers) otherwise.
        """
        invalid = [lic for lic in licenses if not self.is_valid_license(lic)]
        return not invalid, invalid

    def license_keys(self, expression, unique=True, strict=False):
        """
        Return a list of license identifiers and references used in an
        `expression` in order of appearance. Include duplicates unless `unique`
        is True.
        """
        expression = self.parse(expression, strict=strict)
        keys = expression.licenses()
        if unique:
            keys = ordered_unique(keys)
        return keys

    def extract_licenses(self, expression):
        """
        Return a sorted list of the unique license identifiers and references of
        a strict `expression`.

        For example:
        >>> Licensing().extract_licenses('(MIT AND GPL-2.0) OR Apache-2.0')
        ['Apache-2.0', 'GPL-2.0', 'MIT']
        """
        return sorted(set(self.license_keys(expression, strict=True)))

    def is_equivalent(self, expression1, expression2, strict=False):
        """
        Return True if both `expression1` and `expression2` are equivalent once
        simplified with boolean logic.
        """
        expression1 = self.parse(expression1, strict=strict)
        expression2 = self.parse(expression2, strict=strict)
        if isinstance(expression1, SpecialValue) or isinstance(expression2, SpecialValue):
            return expression1 == expression2
        return expression1.simplify() == expression2.simplify()

    def satisfies(self, expression, allowed):
        """
        Return True if a strict license `expression` is satisfied using only the
        `allowed` list of license strings.

        A license is allowed if its rendering is allowed or if its bare key is
        allowed: allowing "Apache-2.0" allows "Apache-2.0+" and allowing
        "GPL-2.0-only" allows "GPL-2.0-only WITH Classpath-exception-2.0".
        """
        expression = self.parse_strict(expression)
        if isinstance(expression, SpecialValue):
            return False

        allowed_keys = set(str(self.parse_strict(a)).lower() for a in allowed)

        def is_allowed(symbol):
            if str(symbol).lower() in allowed_keys:
                return True
            return isinstance(symbol, License) and symbol.key.lower() in allowed_keys

        substitutions = {}
        for symbol in expression.get_literals():
            substitutions[symbol] = is_allowed(symbol) and self.TRUE or self.FALSE

        result = expression.subs(substitutions, simplify=True)
        if TRACE:
            logger_debug('satisfies:', expression, allowed, '->', result)
        return result == self.TRUE


def ordered_unique(seq):
    """
    Return unique items in a sequence seq preserving the original order.
    """
    if not seq:
        return []
    uniques = []
    for item in seq:
        if item in uniques:
            continue
        uniques.append(item)
    return uniques


_default_licensing = None
_default_licensing_lock = threading.Lock()


def get_licensing():
    """
    Return the default Licensing, built once.
    """
    global _default_licensing
    if _default_licensing is None:
        with _default_licensing_lock:
            if _default_licensing is None:
                _default_licensing = Licensing()
    return _default_licensing


def parse(expression):
    """
    Return a LicenseExpression parsed from an `expression` string with informal
    license names.
    """
    return get_licensing().parse(expression)


def parse_strict(expression):
    return get_licensing().parse_strict(expression)


def normalize(license):
    """
    Return the canonical identifier of an informal `license` name.

    For example:
    >>> normalize('Apache License, Version 2.0')
    'Apache-2.0'
    """
    return get_licensing().normalize(license)


def normalize_expression(expression):
    """
    Return a canonical expression string for an `expression` string with
    informal license names.

    For example:
    >>> normalize_expression('mit OR gpl-2.0 AND apache 2')
    'MIT OR (GPL-2.0-only AND Apache-2.0)'
    """
    return get_licensing().normalize_expression(expression)


def normalize_expression_strict(expression):
    return get_licensing().normalize_expression_strict(expression)


def is_valid(expression):
    return get_licensing().is_valid(expression)


def is_valid_license(license):
    return get_licensing().is_valid_license(license)


def validate_licenses(licenses):
    return get_licensing().validate_licenses(licenses)


def extract_licenses(expression):
    return get_licensing().extract_licenses(expression)


def satisfies(expression, allowed):
    return get_licensing().satisfies(expression, allowed)
