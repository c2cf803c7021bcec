# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging
import typing

import git
import git.exc
import git.objects.util

import changelog.model as cm

logger = logging.getLogger(__name__)

HEAD = 'HEAD'


class HistorySource(typing.Protocol):
    def tags(self) -> collections.abc.Iterable[cm.Tag]:
        ...

    def commits(
        self,
        until: str,
        since: str | None=None,
    ) -> collections.abc.Iterable[cm.Commit]:
        '''
        returns commits reachable from `until`, but not from `since` (newest first). If `since`
        is not given, all commits reachable from `until` are returned.
        '''
        ...


def _tag_timestamp(tag: git.TagReference, commit: git.Commit):
    if (tag_object := tag.tag):
        # annotated tag -> use tagger's date
        return git.objects.util.from_timestamp(
            tag_object.tagged_date,
            tag_object.tagger_tz_offset,
        )
    return commit.committed_datetime


def _as_commit(commit: git.Commit) -> cm.Commit:
    message = commit.message
    if isinstance(message, bytes):
        message = message.decode('utf-8', errors='replace')

    return cm.Commit(
        id=commit.hexsha,
        author_name=commit.author.name or '',
        author_email=commit.author.email or '',
        timestamp=commit.committed_datetime,
        message=message,
    )


class GitHistorySource:
    '''
    HistorySource backed by a local git repository. Both tags and commits are read from local
    refs only (it is left to the caller to fetch tags from remotes beforehand).
    '''
    def __init__(
        self,
        repo: git.Repo | str,
    ):
        if repo is None:
            raise ValueError(repo)
        if isinstance(repo, str):
            try:
                repo = git.Repo(repo)
            except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
                raise cm.HistorySourceError(f'not a git repository: {repo}') from e
        if not isinstance(repo, git.Repo):
            raise ValueError(repo)

        self.repo = repo

    def tags(self) -> collections.abc.Iterable[cm.Tag]:
        try:
            tag_refs = list(self.repo.tags)
        except git.exc.GitError as e:
            raise cm.HistorySourceError(f'failed to list tags: {e}') from e

        for tag in tag_refs:
            try:
                commit = tag.commit
            except ValueError as ve:
                # tags may point to any git object (e.g. trees or blobs)
                logger.warning(f'ignoring {tag.name=}, as it does not point to a commit: {ve}')
                continue
            except git.exc.GitError as e:
                raise cm.HistorySourceError(f'failed to resolve {tag.name=}: {e}') from e

            yield cm.Tag(
                name=tag.name,
                timestamp=_tag_timestamp(tag=tag, commit=commit),
                commit_id=commit.hexsha,
                commit_timestamp=commit.committed_datetime,
            )

    def commits(
        self,
        until: str,
        since: str | None=None,
    ) -> collections.abc.Iterable[cm.Commit]:
        if until == HEAD and not self.repo.head.is_valid():
            logger.debug('HEAD is unborn - repository does not contain any commits')
            return

        if since:
            rev = f'{since}..{until}'
        else:
            rev = until

        logger.debug(f'listing commits in {rev=}')
        try:
            for commit in self.repo.iter_commits(rev):
                yield _as_commit(commit)
        except git.exc.GitError as e:
            raise cm.HistorySourceError(f'failed to list commits in {rev=}: {e}') from e
