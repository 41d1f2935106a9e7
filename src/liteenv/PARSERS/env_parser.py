# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Parsers for .env files, supporting quotes, multiline values and comments.
"""
import io
import logging
import os
import re
from typing import Iterator, List, Optional, Tuple

from ..errors import EnvFileError, EnvSyntaxError, UnterminatedQuoteError
from ..MODELS.parse_state import KeyValuePair, ParseState, QuoteChar

logger = logging.getLogger(__name__)

# Keys as written in a file. Lookups use the stricter LOOKUP_KEY_PATTERN.
FILE_KEY_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
LOOKUP_KEY_PATTERN = re.compile(r'^[A-Z_][A-Z0-9_]*$')

INLINE_COMMENT_MARKER = ' #'

class EnvParser:
    """
    Line-oriented parser for .env files.

    The parser is a small state machine: every call to ``parse_line`` takes
    the state left by the previous line and returns the new state together
    with a completed pair, if any.
    """
    @staticmethod
    def parse_line(line: str, state: Optional[ParseState] = None) -> Tuple[ParseState, Optional[KeyValuePair]]:
        """
        Parses one physical line.

        :param line: The line, with line endings already normalized to '\\n'.
        :param state: The state returned for the previous line.
        :return: The new state and the completed pair, or None when the line
                 completes nothing (blank, comment or multiline continuation).
        :raises EnvSyntaxError: If the line is not a valid assignment.
        """
        state = state or ParseState()
        if state.in_quotes:
            return EnvParser._continue_quoted(line, state)

        stripped = line.lstrip()
        if not stripped or stripped[0] == '#':
            return ParseState(), None

        equals = line.find('=')
        if equals == -1:
            raise EnvSyntaxError(f"Invalid line: {line.rstrip()}. Missing equals sign in line.", line)

        key = line[:equals].strip()
        if not FILE_KEY_PATTERN.match(key):
            raise EnvSyntaxError(
                f'Invalid key format: "{key}". Keys must start with a letter or underscore '
                f'and can only contain letters, numbers, and underscores.',
                line,
            )

        value = line[equals + 1:].strip()
        if not value:
            return ParseState(), KeyValuePair(key=key, raw_value='')

        if value[0] in ('"', "'"):
            quote = value[0]

            # a lone quote both opens and closes: KEY=" is an empty value
            if value[-1] == quote:
                return ParseState(), KeyValuePair(key=key, raw_value=value[1:-1])

            if INLINE_COMMENT_MARKER in value:
                # KEY="value" # comment: the closing quote sits right before the marker
                end = value.index(INLINE_COMMENT_MARKER)
                # KEY=" #x has no room for a closing quote; only the last character goes
                stop = end - 1 if end > 1 else -1
                return ParseState(), KeyValuePair(key=key, raw_value=value[1:stop])

            opening = line.index(quote, equals + 1)
            return ParseState(
                in_quotes=True,
                quote_char=QuoteChar(quote),
                pending_key=key,
                pending_value=line[opening + 1:],
            ), None

        if INLINE_COMMENT_MARKER in value:
            value = value[:value.index(INLINE_COMMENT_MARKER)]

        return ParseState(), KeyValuePair(key=key, raw_value=value)

    @staticmethod
    def _continue_quoted(line: str, state: ParseState) -> Tuple[ParseState, Optional[KeyValuePair]]:
        """
        Handles a line inside a quoted value that spans several lines.
        """
        trimmed = line.rstrip()
        if not trimmed or trimmed[-1] != state.quote_char.value:
            return state.model_copy(update={'pending_value': state.pending_value + line}), None

        pair = KeyValuePair(key=state.pending_key, raw_value=state.pending_value + trimmed[:-1])
        return ParseState(), pair

    @staticmethod
    def validate_file(env_path: str) -> None:
        """
        Checks that a file exists and is readable.

        :param env_path: Path to the .env file.
        :raises EnvFileError: If the file is missing or cannot be read.
        """
        if not os.path.isfile(env_path):
            raise EnvFileError(f'The file "{env_path}" does not exist', env_path)
        if not os.access(env_path, os.R_OK):
            raise EnvFileError(f'The file "{env_path}" exists but cannot be read', env_path)

    @staticmethod
    def read_lines(env_path: str) -> Iterator[str]:
        """
        Yields the lines of a file with '\\r\\n' and '\\r' normalized to '\\n'.

        :param env_path: Path to the .env file.
        :raises EnvFileError: If the file cannot be opened.
        """
        try:
            f = open(env_path, 'r', encoding='utf-8', newline='')
        except OSError as e:
            raise EnvFileError(f'Failed to open file "{env_path}"', env_path) from e

        with f:
            for line in f:
                yield line.replace('\r\n', '\n').replace('\r', '\n')

    @staticmethod
    def iter_pairs(lines, errors: Optional[List[EnvSyntaxError]] = None,
                   strict: bool = False) -> Iterator[KeyValuePair]:
        """
        Runs the state machine over a sequence of lines.

        Lines that fail to parse are logged and skipped. When ``errors`` is
        given, the skipped errors are also appended to it.

        :param lines: Normalized lines.
        :param errors: Optional list collecting recoverable errors.
        :param strict: Raise UnterminatedQuoteError when a quoted value is still
                       open at the end of input instead of dropping it.
        """
        state = ParseState()
        opened_at = 0
        for line_number, line in enumerate(lines, start=1):
            try:
                was_in_quotes = state.in_quotes
                state, pair = EnvParser.parse_line(line, state)
            except EnvSyntaxError as e:
                e.line_number = line_number
                logger.warning('Syntax error in line %d "%s": %s', line_number, line.rstrip('\n'), e.message)
                if errors is not None:
                    errors.append(e)
                continue

            if state.in_quotes and not was_in_quotes:
                opened_at = line_number
            if pair is not None:
                pair.line_number = line_number
                yield pair

        if state.in_quotes:
            message = f'Unterminated {state.quote_char.value} quote for key "{state.pending_key}"'
            if strict:
                raise UnterminatedQuoteError(message, line_number=opened_at)
            logger.debug('%s opened on line %d; value dropped', message, opened_at)

    @staticmethod
    def parse(env_path: str, strict: bool = False) -> List[KeyValuePair]:
        """
        Parses an .env file from a path.

        Args:
            env_path (str): Path to the .env file.
            strict (bool): Fail on an unterminated quoted value.

        Returns:
            List[KeyValuePair]: Completed pairs in file order.
        """
        EnvParser.validate_file(env_path)
        return list(EnvParser.iter_pairs(EnvParser.read_lines(env_path), strict=strict))

    @staticmethod
    def parse_from_string(content: str, strict: bool = False) -> List[KeyValuePair]:
        """
        Parses .env content from a string.
        """
        content = content.replace("\r\n", "\n").replace("\r", "\n")
        return list(EnvParser.iter_pairs(io.StringIO(content), strict=strict))
