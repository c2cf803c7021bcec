# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Renders collected releases into a (plain-text) change log.

Rendering is split into a fixed hierarchy of render steps:

    changelog          = changelog_header + changelog_releases + changelog_footer
    changelog_releases = release(r) for each release (oldest first, empty releases skipped)
    release            = release_header + release_changes + release_footer
    release_changes    = change(r, c) for each change
    change             = change_header + change_message + change_footer

Each step is a plain function, receiving the `RenderPipeline` it is run by as first argument
(so it may call other steps), and returning a string (an empty string contributes nothing).
Any step may be replaced, e.g.:

    pipeline = RenderPipeline(cfg=cfg).with_steps(
        change_footer=lambda pipeline, release, change: '\\n---\\n',
    )
'''

import dataclasses
import logging
import re
import typing

import changelog.config as ccfg
import changelog.formatting as cf
import changelog.model as cm

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, kw_only=True)
class RenderCfg:
    '''
    tag_pattern: pattern used to collect releases (needed to derive version labels from tags)
    current_version: version to render for unreleased head
    wrap_column: column to reflow text to
    '''
    tag_pattern: re.Pattern
    current_version: str = 'HEAD'
    wrap_column: int = ccfg.DEFAULT_WRAP_COLUMN
    date_format: str = ccfg.DEFAULT_DATE_FORMAT

    @staticmethod
    def from_changelog_cfg(
        cfg: ccfg.ChangelogCfg,
        current_version: str='HEAD',
    ) -> 'RenderCfg':
        return RenderCfg(
            tag_pattern=cfg.tag_pattern,
            current_version=current_version,
            wrap_column=cfg.wrap_column,
            date_format=cfg.date_format,
        )


def render_changelog(pipeline, result: cm.CollectionResult) -> str:
    return (
        pipeline.changelog_header(pipeline, result)
        + pipeline.changelog_releases(pipeline, result)
        + pipeline.changelog_footer(pipeline, result)
    )


def render_changelog_header(pipeline, result: cm.CollectionResult) -> str:
    earliest_date = cf.format_date(result.earliest_date, pipeline.cfg.date_format)
    return cf.surround_line('=', f'Changes from {earliest_date} to present.') + '\n'


def render_changelog_releases(pipeline, result: cm.CollectionResult) -> str:
    rendered = []
    # releases are collected newest-first, but rendered in chronological order
    for release in reversed(result.releases):
        if not release.changes:
            logger.debug(f'not rendering {release.version_label} (no changes)')
            continue
        rendered.append(pipeline.release(pipeline, release))

    return ''.join(rendered)


def render_changelog_footer(pipeline, result: cm.CollectionResult) -> str:
    if (skipped := result.skipped_release_count) > 0:
        earliest_date = cf.format_date(result.earliest_date, pipeline.cfg.date_format)
        releases = 'release' if skipped == 1 else 'releases'
        return cf.surround_line('=', f'Plus {skipped} {releases} after {earliest_date}.')

    return cf.surround_line('=', 'End of releases.')


def render_release(pipeline, release: cm.Release) -> str:
    return (
        pipeline.release_header(pipeline, release)
        + pipeline.release_changes(pipeline, release)
        + pipeline.release_footer(pipeline, release)
    )


def render_release_header(pipeline, release: cm.Release) -> str:
    cfg = pipeline.cfg
    version = cf.format_release_tag(
        tag=release.version_label,
        tag_pattern=cfg.tag_pattern,
        current_version=cfg.current_version,
    )
    date = cf.format_date(release.date, cfg.date_format)

    return cf.surround_line('-', f'{version} ({date})') + '\n'


def render_release_changes(pipeline, release: cm.Release) -> str:
    return ''.join(
        pipeline.change(pipeline, release, change)
        for change in release.changes
    )


def render_release_footer(pipeline, release: cm.Release) -> str:
    return ''


def render_change(pipeline, release: cm.Release, change: cm.Change) -> str:
    return (
        pipeline.change_header(pipeline, release, change)
        + pipeline.change_message(pipeline, release, change)
        + pipeline.change_footer(pipeline, release, change)
    )


def render_change_header(pipeline, release: cm.Release, change: cm.Change) -> str:
    cfg = pipeline.cfg
    lines = (
        change.id,
        f'{change.author_name} <{change.author_email}>',
        cf.format_date(change.timestamp, cfg.date_format),
    )
    return ''.join(
        cf.wrap(
            text=line,
            width=cfg.wrap_column,
            initial_indent='  ',
            subsequent_indent='  ',
        ) for line in lines
    ) + '\n'


def render_change_message(pipeline, release: cm.Release, change: cm.Change) -> str:
    message = change.message
    if message[:1].isspace():
        # leading whitespace marks manually formatted messages, which must not be reflowed
        return ''

    return cf.wrap(
        text=message,
        width=pipeline.cfg.wrap_column,
        initial_indent='    ',
        subsequent_indent='    ',
    )


def render_change_footer(pipeline, release: cm.Release, change: cm.Change) -> str:
    return '\n'


ChangelogStep = typing.Callable[['RenderPipeline', cm.CollectionResult], str]
ReleaseStep = typing.Callable[['RenderPipeline', cm.Release], str]
ChangeStep = typing.Callable[['RenderPipeline', cm.Release, cm.Change], str]


@dataclasses.dataclass(frozen=True, kw_only=True)
class RenderPipeline:
    cfg: RenderCfg

    changelog: ChangelogStep = render_changelog
    changelog_header: ChangelogStep = render_changelog_header
    changelog_releases: ChangelogStep = render_changelog_releases
    changelog_footer: ChangelogStep = render_changelog_footer

    release: ReleaseStep = render_release
    release_header: ReleaseStep = render_release_header
    release_changes: ReleaseStep = render_release_changes
    release_footer: ReleaseStep = render_release_footer

    change: ChangeStep = render_change
    change_header: ChangeStep = render_change_header
    change_message: ChangeStep = render_change_message
    change_footer: ChangeStep = render_change_footer

    def with_steps(self, **steps) -> 'RenderPipeline':
        '''
        returns a copy of this pipeline, with the given render steps replaced
        '''
        return dataclasses.replace(self, **steps)

    def render(self, result: cm.CollectionResult) -> str:
        return self.changelog(self, result)
