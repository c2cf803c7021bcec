# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import datetime
import enum


class ChangelogError(RuntimeError):
    pass


class ConfigurationError(ChangelogError):
    '''
    raised for invalid configuration (e.g. malformed regular expressions). Always raised before
    any history is read.
    '''
    pass


class HistorySourceError(ChangelogError):
    '''
    raised if tags or commits cannot be read from the underlying history (e.g. git repository)
    '''
    pass


class SpecialVersion(enum.Enum):
    HEAD = enum.auto()


@dataclasses.dataclass(frozen=True)
class Tag:
    '''
    timestamp: date the tag was created (tagger date, or commit date for lightweight tags)
    commit_timestamp: date of the tagged commit (determines the order of releases)
    '''
    name: str
    timestamp: datetime.datetime
    commit_id: str
    commit_timestamp: datetime.datetime


@dataclasses.dataclass(frozen=True)
class Commit:
    id: str
    author_name: str
    author_email: str
    timestamp: datetime.datetime
    message: str


@dataclasses.dataclass(frozen=True)
class Change:
    id: str
    author_name: str
    author_email: str
    timestamp: datetime.datetime
    message: str

    @staticmethod
    def from_commit(commit: Commit) -> 'Change':
        return Change(
            id=commit.id,
            author_name=commit.author_name,
            author_email=commit.author_email,
            timestamp=commit.timestamp,
            message=commit.message,
        )


@dataclasses.dataclass
class Release:
    '''
    version_label: either the tag name (matching the configured tag-pattern), or
                   `SpecialVersion.HEAD` for commits not yet released
    date: tag date (or time of generation for unreleased head)
    changes: changes in chronological order (oldest first)
    '''
    version_label: str | SpecialVersion
    date: datetime.datetime
    changes: list[Change] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(frozen=True)
class CollectionResult:
    '''
    releases: newest release first
    earliest_date: releases tagged before this date were omitted
    skipped_release_count: number of omitted releases
    '''
    releases: tuple[Release, ...]
    earliest_date: datetime.datetime
    skipped_release_count: int = 0
