# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import datetime
import logging
import re
import typing

import changelog.config as ccfg
import changelog.history as ch
import changelog.model as cm

logger = logging.getLogger(__name__)


def earliest_date(
    now: datetime.datetime,
    max_age: int,
) -> datetime.datetime:
    '''
    returns start-of-day (in `now`'s timezone) `max_age` days before `now`
    '''
    day = now - datetime.timedelta(days=max_age)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)


def message_filter(
    include_message: re.Pattern | None=None,
    exclude_message: re.Pattern | None=None,
) -> typing.Callable[[str], bool]:
    '''
    returns a callable that can be used as a filter for commit messages. Absence of a pattern
    disables the respective filter. Patterns are searched (i.e. they need not match the whole
    message). Exclusion has precedence: an excluded message is never considered for inclusion.
    '''
    def _message_filter(message: str) -> bool:
        if exclude_message and exclude_message.search(message):
            return False
        if include_message and not include_message.search(message):
            return False
        return True

    return _message_filter


def matching_tags(
    tags: collections.abc.Iterable[cm.Tag],
    tag_pattern: re.Pattern,
) -> list[cm.Tag]:
    '''
    returns tags matching the given pattern, ordered by the date of the tagged commit (most recent
    first), so consecutive tags delimit release windows even if tags were created late. Duplicates (by name, or by
    tagged commit) are dropped, keeping the most recent one.

    raises ConfigurationError if the pattern's first group does not participate in a match.
    '''
    seen_names = set()
    seen_commit_ids = set()
    result = []

    # sort is stable, so tags on equally-dated commits keep the order in which they were listed
    for tag in sorted(tags, key=lambda tag: tag.commit_timestamp, reverse=True):
        if not (match := tag_pattern.search(tag.name)):
            logger.debug(f'ignoring non-matching {tag.name=}')
            continue

        if match.group(1) is None:
            raise cm.ConfigurationError(
                f'{tag_pattern.pattern=} matched {tag.name=}, but its first group did not '
                'capture a version'
            )

        if tag.name in seen_names or tag.commit_id in seen_commit_ids:
            logger.debug(f'ignoring duplicate {tag.name=} ({tag.commit_id=})')
            continue

        seen_names.add(tag.name)
        seen_commit_ids.add(tag.commit_id)
        result.append(tag)

    return result


def _release(
    version_label: str | cm.SpecialVersion,
    date: datetime.datetime,
    commits: collections.abc.Iterable[cm.Commit],
    accept_message: typing.Callable[[str], bool],
) -> cm.Release:
    release = cm.Release(
        version_label=version_label,
        date=date,
    )

    # history returns newest commits first; releases list their changes chronologically
    for commit in reversed(list(commits)):
        if not accept_message(commit.message):
            logger.debug(f'{version_label}: dropping {commit.id=} (filtered by message)')
            continue
        release.changes.append(cm.Change.from_commit(commit))

    logger.debug(f'{version_label}: collected {len(release.changes)} change(s)')
    return release


def collect_releases(
    history: ch.HistorySource,
    tag_pattern: re.Pattern | str=ccfg.DEFAULT_TAG_REGEXP,
    max_age: int=ccfg.DEFAULT_MAX_AGE,
    include_message: re.Pattern | str | None=None,
    exclude_message: re.Pattern | str | None=None,
    include_head: bool=True,
    now: datetime.datetime | None=None,
) -> cm.CollectionResult:
    '''
    Collects releases from the given history.

    Releases are delimited by tags matching `tag_pattern`. Each release contains the commits
    reachable from its tag, but not from the next-older matching tag. If `include_head` is set,
    commits newer than the most recent matching tag are collected into a leading release
    labelled `SpecialVersion.HEAD`.

    Releases tagged before start-of-day `max_age` days before `now` are not collected, but
    counted. Note that a release tagged after this cutoff keeps all of its changes, even if some
    of them were committed before the cutoff.

    :param now: time of generation; must be timezone-aware. Defaults to current (local) time.
    :return: the collected releases, newest first
    '''
    # validate all patterns before reading any history
    tag_pattern = ccfg.compile_tag_pattern(tag_pattern)
    include_message = ccfg.compile_pattern(include_message, option='include_message')
    exclude_message = ccfg.compile_pattern(exclude_message, option='exclude_message')
    if max_age < 0:
        raise cm.ConfigurationError(f'{max_age=} must not be negative')

    if now is None:
        now = datetime.datetime.now().astimezone()
    cutoff = earliest_date(now=now, max_age=max_age)
    accept_message = message_filter(
        include_message=include_message,
        exclude_message=exclude_message,
    )

    tags = matching_tags(
        tags=history.tags(),
        tag_pattern=tag_pattern,
    )
    logger.info(f'found {len(tags)} tag(s) matching {tag_pattern.pattern!r}')

    releases = []

    if include_head:
        head_commits = list(history.commits(
            until=ch.HEAD,
            since=tags[0].commit_id if tags else None,
        ))
        if head_commits:
            logger.info(f'found {len(head_commits)} unreleased commit(s)')
            releases.append(_release(
                version_label=cm.SpecialVersion.HEAD,
                date=now,
                commits=head_commits,
                accept_message=accept_message,
            ))

    skipped_release_count = 0
    for idx, tag in enumerate(tags):
        if tag.timestamp < cutoff:
            # tags are ordered by commit date, so a later tag may still follow
            skipped_release_count += 1
            logger.debug(f'skipping {tag.name} (tagged before {cutoff.isoformat()})')
            continue

        if idx + 1 < len(tags):
            previous_commit_id = tags[idx + 1].commit_id
        else:
            previous_commit_id = None # first release - include all commits

        releases.append(_release(
            version_label=tag.name,
            date=tag.timestamp,
            commits=history.commits(
                until=tag.commit_id,
                since=previous_commit_id,
            ),
            accept_message=accept_message,
        ))

    logger.info(
        f'collected {len(releases)} release(s) since {cutoff.isoformat()} '
        f'({skipped_release_count} older release(s) skipped)'
    )

    return cm.CollectionResult(
        releases=tuple(releases),
        earliest_date=cutoff,
        skipped_release_count=skipped_release_count,
    )
