# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import datetime
import re
import textwrap

import changelog.config as ccfg
import changelog.model as cm

_paragraph_separator = re.compile(r'\n[^\S\n]*\n\s*')


def format_date(
    date: datetime.datetime,
    date_format: str=ccfg.DEFAULT_DATE_FORMAT,
) -> str:
    return date.strftime(date_format)


def format_release_tag(
    tag: str | cm.SpecialVersion,
    tag_pattern: re.Pattern,
    current_version: str,
) -> str:
    '''
    returns a human-readable version label for the given tag, using the (first) group captured
    by `tag_pattern` (e.g. `v1.2` -> `version 1.2` for pattern `^v(\\d+\\.\\d+)$`).

    `SpecialVersion.HEAD` is rendered using `current_version`. Tags not matching `tag_pattern`
    are returned unchanged.
    '''
    if tag is cm.SpecialVersion.HEAD:
        return f'version {current_version}'

    return tag_pattern.sub(r'version \g<1>', tag, count=1)


def surround_line(
    fill: str,
    line: str,
) -> str:
    '''
    returns the given line, framed by a rule above and below. Rules consist of `fill`, repeated
    (and truncated) to the length of `line`:

    >>> surround_line('-', 'abc')
    '---\\nabc\\n---\\n'
    '''
    if not fill:
        raise ValueError('fill must not be empty')

    rule = (fill * len(line))[:len(line)]
    return f'{rule}\n{line}\n{rule}\n'


def wrap(
    text: str,
    width: int,
    initial_indent: str='',
    subsequent_indent: str='',
) -> str:
    '''
    reflows the given text to `width` columns (greedily, paragraph by paragraph). Paragraphs are
    separated by blank lines, which are preserved (as a single empty line). Words longer than
    the available width are not broken, but put on a line of their own.

    Each returned line is terminated by a newline; empty text yields an empty string.
    '''
    if not text or not text.strip():
        return ''

    wrapper = textwrap.TextWrapper(
        width=width,
        initial_indent=initial_indent,
        subsequent_indent=subsequent_indent,
        break_long_words=False,
        break_on_hyphens=False,
    )

    lines = []
    for idx, paragraph in enumerate(_paragraph_separator.split(text.strip())):
        if idx > 0:
            lines.append('')
        lines.extend(wrapper.wrap(' '.join(paragraph.split())))

    return ''.join(f'{line}\n' for line in lines)
