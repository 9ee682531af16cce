#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/license-expression for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#
"""
Error codes and exceptions raised when normalizing and parsing license
expressions.

Parsing errors are boolean.py ParseError instances: each carries the type and
string of the offending token, its position and an `error_code`. The error
codes of this library are appended to boolean.py PARSE_ERRORS so that a
ParseError renders a readable message. Each error kind also has its own
ParseError subclass so that callers can catch a kind by type.
"""

from boolean.boolean import PARSE_ERRORS
from boolean.boolean import ParseError

# append new error codes to PARSE_ERRORS by monkey patching
PARSE_EMPTY_EXPRESSION = 200
if PARSE_EMPTY_EXPRESSION not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_EMPTY_EXPRESSION] = 'Empty license expression.'

PARSE_UNEXPECTED_TOKEN = 201
if PARSE_UNEXPECTED_TOKEN not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_UNEXPECTED_TOKEN] = 'Unexpected token.'

PARSE_UNBALANCED_PARENS = 202
if PARSE_UNBALANCED_PARENS not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_UNBALANCED_PARENS] = 'Unbalanced parentheses.'

PARSE_INVALID_LICENSE_ID = 203
if PARSE_INVALID_LICENSE_ID not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_INVALID_LICENSE_ID] = 'Invalid license identifier.'

PARSE_INVALID_EXCEPTION_ID = 204
if PARSE_INVALID_EXCEPTION_ID not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_INVALID_EXCEPTION_ID] = 'Invalid license exception identifier.'

PARSE_MISSING_OPERAND = 205
if PARSE_MISSING_OPERAND not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_MISSING_OPERAND] = 'Missing operand.'

PARSE_INVALID_SPECIAL_VALUE = 206
if PARSE_INVALID_SPECIAL_VALUE not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_INVALID_SPECIAL_VALUE] = (
        'NONE and NOASSERTION must be used alone and not as part of a '
        'larger expression.')

PARSE_NESTING_TOO_DEEP = 207
if PARSE_NESTING_TOO_DEEP not in PARSE_ERRORS:
    PARSE_ERRORS[PARSE_NESTING_TOO_DEEP] = 'Parentheses are nested too deeply.'


class ExpressionError(Exception):
    pass


class EmptyExpressionError(ParseError):
    error_code = PARSE_EMPTY_EXPRESSION


class UnexpectedTokenError(ParseError):
    error_code = PARSE_UNEXPECTED_TOKEN


class UnbalancedParenthesesError(ParseError):
    error_code = PARSE_UNBALANCED_PARENS


class InvalidLicenseError(ParseError):
    error_code = PARSE_INVALID_LICENSE_ID


class InvalidExceptionError(ParseError):
    error_code = PARSE_INVALID_EXCEPTION_ID


class MissingOperandError(ParseError):
    error_code = PARSE_MISSING_OPERAND


class InvalidSpecialValueError(ParseError):
    error_code = PARSE_INVALID_SPECIAL_VALUE


class NestingTooDeepError(ParseError):
    error_code = PARSE_NESTING_TOO_DEEP


ERRORS_BY_CODE = {
    cls.error_code: cls for cls in (
        EmptyExpressionError,
        UnexpectedTokenError,
        UnbalancedParenthesesError,
        InvalidLicenseError,
        InvalidExceptionError,
        MissingOperandError,
        InvalidSpecialValueError,
        NestingTooDeepError,
    )
}


def parse_error(error_code, token_type=None, token_string='', position=-1):
    """
    Return a new ParseError of the subclass matching an `error_code`.
    """
    cls = ERRORS_BY_CODE.get(error_code, ParseError)
    return cls(
        token_type=token_type,
        token_string=token_string,
        position=position,
        error_code=error_code,
    )
