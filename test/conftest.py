import datetime

import git
import pytest

import changelog.history as ch
import changelog.model as cm

NOW = datetime.datetime(2026, 10, 17, 12, 0, tzinfo=datetime.timezone.utc)


def days_ago(days: float) -> datetime.datetime:
    return NOW - datetime.timedelta(days=days)


class StaticHistory:
    '''
    linear, in-memory history (commits are passed oldest first)
    '''
    def __init__(self, commits: list[cm.Commit], tags: list[cm.Tag]=()):
        self._commits = list(commits)
        self._tags = list(tags)
        self.requested_ranges = []

    def tags(self):
        return list(self._tags)

    def commits(self, until: str, since: str | None=None):
        self.requested_ranges.append((since, until))
        ids = [commit.id for commit in self._commits]

        if until == ch.HEAD:
            end = len(ids)
        else:
            end = ids.index(until) + 1

        start = ids.index(since) + 1 if since else 0

        return list(reversed(self._commits[start:end]))


def commit(
    id: str,
    days: float,
    message: str | None=None,
) -> cm.Commit:
    return cm.Commit(
        id=id,
        author_name='Jane Doe',
        author_email='jane.doe@example.com',
        timestamp=days_ago(days),
        message=message or f'change {id}',
    )


def tag(
    name: str,
    c: cm.Commit,
    days: float | None=None,
) -> cm.Tag:
    '''
    days: age of the tag itself (defaults to age of tagged commit)
    '''
    return cm.Tag(
        name=name,
        timestamp=days_ago(days) if days is not None else c.timestamp,
        commit_id=c.id,
        commit_timestamp=c.timestamp,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def two_releases():
    '''
    v1.0 tagged 30 days ago, v2.0 tagged 2 days ago, three commits in between
    '''
    commits = [
        commit('c1', 40, 'initial import'),
        commit('c2', 30, 'prepare first release'),
        commit('c3', 10, 'add feature'),
        commit('c4', 5, 'typo: fix documentation'),
        commit('c5', 2, 'fix bug in feature'),
    ]
    tags = [
        tag('v1.0', commits[1]),
        tag('v2.0', commits[4]),
    ]
    return StaticHistory(commits=commits, tags=tags)


class GitRepoBuilder:
    def __init__(self, repo: git.Repo):
        self.repo = repo

    def commit(
        self,
        message: str,
        when: datetime.datetime,
        name: str='Jane Doe',
        email: str='jane.doe@example.com',
    ) -> git.Commit:
        actor = git.Actor(name, email)
        date = f'{int(when.timestamp())} +0000'
        return self.repo.index.commit(
            message,
            author=actor,
            committer=actor,
            author_date=date,
            commit_date=date,
        )

    def tag(
        self,
        name: str,
        commit: git.Commit,
        message: str | None=None,
        when: datetime.datetime | None=None,
    ):
        if not message:
            return self.repo.create_tag(name, ref=commit)

        env = {
            'GIT_COMMITTER_NAME': 'Jane Doe',
            'GIT_COMMITTER_EMAIL': 'jane.doe@example.com',
        }
        if when:
            env['GIT_COMMITTER_DATE'] = f'{int(when.timestamp())} +0000'

        with self.repo.git.custom_environment(**env):
            return self.repo.create_tag(name, ref=commit, message=message)


@pytest.fixture
def git_repo(tmp_path):
    return git.Repo.init(tmp_path)


@pytest.fixture
def git_repo_builder(git_repo):
    return GitRepoBuilder(repo=git_repo)


@pytest.fixture
def make_commit():
    return commit


@pytest.fixture
def make_tag():
    return tag


@pytest.fixture
def make_history():
    return StaticHistory
