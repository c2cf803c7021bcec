# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import functools
import logging
import re

import dacite
import yaml

import changelog.model as cm

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 365 # days
DEFAULT_TAG_REGEXP = r'^v(\d+\.\d+)$'
DEFAULT_FILE_NAME = 'CHANGES'
DEFAULT_WRAP_COLUMN = 74
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S %z'


def compile_pattern(
    pattern: re.Pattern | str | None,
    option: str,
) -> re.Pattern | None:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern

    try:
        return re.compile(pattern)
    except re.error as e:
        raise cm.ConfigurationError(f'{option}: invalid regular expression {pattern!r}: {e}') from e


def compile_tag_pattern(
    pattern: re.Pattern | str,
) -> re.Pattern:
    if pattern is None:
        raise cm.ConfigurationError('tag_regexp must not be None')

    pattern = compile_pattern(pattern, option='tag_regexp')
    if pattern.groups < 1:
        raise cm.ConfigurationError(
            f'tag_regexp {pattern.pattern!r} must contain a capturing group (yielding the version)'
        )
    return pattern


@dataclasses.dataclass(frozen=True, kw_only=True)
class ChangelogCfg:
    '''
    max_age: releases tagged more than `max_age` days ago are omitted
    tag_regexp: tags matching this pattern delimit releases; the first group yields the version
    file_name: name of the file the change log is written to
    wrap_column: column to reflow rendered text to
    debug: if set, log verbosely
    exclude_message: if set, commits w/ matching messages are omitted
    include_message: if set, only commits w/ matching messages are included
    include_head: whether or not to render not-yet-released commits as a separate release
    date_format: strftime-format for rendered dates
    '''
    max_age: int = DEFAULT_MAX_AGE
    tag_regexp: str = DEFAULT_TAG_REGEXP
    file_name: str = DEFAULT_FILE_NAME
    wrap_column: int = DEFAULT_WRAP_COLUMN
    debug: bool = False
    exclude_message: str | None = None
    include_message: str | None = None
    include_head: bool = True
    date_format: str = DEFAULT_DATE_FORMAT

    def __post_init__(self):
        if self.max_age < 0:
            raise cm.ConfigurationError(f'max_age must not be negative: {self.max_age}')
        if self.wrap_column < 1:
            raise cm.ConfigurationError(f'wrap_column must be positive: {self.wrap_column}')
        if not self.file_name:
            raise cm.ConfigurationError('file_name must not be empty')

        # compile once, so malformed patterns are reported before history is read
        self.tag_pattern
        self.exclude_pattern
        self.include_pattern

    @functools.cached_property
    def tag_pattern(self) -> re.Pattern:
        return compile_tag_pattern(self.tag_regexp)

    @functools.cached_property
    def exclude_pattern(self) -> re.Pattern | None:
        return compile_pattern(self.exclude_message, option='exclude_message')

    @functools.cached_property
    def include_pattern(self) -> re.Pattern | None:
        return compile_pattern(self.include_message, option='include_message')


def _normalise_key(key: str) -> str:
    # accept "maxAge" and "max-age" as well as "max_age"
    key = re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', key)
    return key.replace('-', '_').replace(' ', '_').lower()


def cfg_from_dict(raw: dict | None) -> ChangelogCfg:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise cm.ConfigurationError(f'configuration must be a mapping, got: {type(raw)}')

    data = {_normalise_key(k): v for k, v in raw.items()}

    try:
        return dacite.from_dict(
            data_class=ChangelogCfg,
            data=data,
            config=dacite.Config(strict=True),
        )
    except dacite.DaciteError as de:
        raise cm.ConfigurationError(f'invalid configuration: {de}') from de


def load_cfg(path: str) -> ChangelogCfg:
    logger.debug(f'reading configuration from {path=}')
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as oe:
        raise cm.ConfigurationError(f'cannot read configuration from {path=}: {oe}') from oe
    except yaml.YAMLError as ye:
        raise cm.ConfigurationError(f'{path=} does not contain valid YAML: {ye}') from ye

    return cfg_from_dict(raw)
