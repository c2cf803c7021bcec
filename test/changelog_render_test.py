import datetime
import re

import pytest

import changelog.collect as ccol
import changelog.model as cm
import changelog.render as cr

UTC = datetime.timezone.utc
EARLIEST = datetime.datetime(2025, 10, 17, tzinfo=UTC)


def banner(fill: str, line: str) -> str:
    return f'{fill * len(line)}\n{line}\n{fill * len(line)}\n'


@pytest.fixture
def render_cfg():
    return cr.RenderCfg(
        tag_pattern=re.compile(r'^v(\d+\.\d+)$'),
        current_version='2.1.0-dev',
    )


@pytest.fixture
def pipeline(render_cfg):
    return cr.RenderPipeline(cfg=render_cfg)


def _change(id: str, message: str, date: datetime.datetime) -> cm.Change:
    return cm.Change(
        id=id,
        author_name='Jane Doe',
        author_email='jane.doe@example.com',
        timestamp=date,
        message=message,
    )


def _result(*releases, skipped: int=0) -> cm.CollectionResult:
    return cm.CollectionResult(
        releases=tuple(releases),
        earliest_date=EARLIEST,
        skipped_release_count=skipped,
    )


def test_render_empty_changelog(pipeline):
    document = pipeline.render(_result())

    assert document == (
        banner('=', 'Changes from 2025-10-17 00:00:00 +0000 to present.')
        + '\n'
        + banner('=', 'End of releases.')
    )


def test_render_footer_w_skipped_releases(pipeline):
    assert pipeline.changelog_footer(pipeline, _result(skipped=1)) == banner(
        '=', 'Plus 1 release after 2025-10-17 00:00:00 +0000.',
    )
    assert pipeline.changelog_footer(pipeline, _result(skipped=3)) == banner(
        '=', 'Plus 3 releases after 2025-10-17 00:00:00 +0000.',
    )


def test_render_release(pipeline):
    release = cm.Release(
        version_label='v1.0',
        date=datetime.datetime(2026, 9, 17, 12, tzinfo=UTC),
        changes=[
            _change('c1', 'initial import', datetime.datetime(2026, 9, 7, 12, tzinfo=UTC)),
            _change('c2', 'prepare release', datetime.datetime(2026, 9, 17, 12, tzinfo=UTC)),
        ],
    )

    assert pipeline.release(pipeline, release) == (
        banner('-', 'version 1.0 (2026-09-17 12:00:00 +0000)')
        + '\n'
        + '  c1\n'
        + '  Jane Doe <jane.doe@example.com>\n'
        + '  2026-09-07 12:00:00 +0000\n'
        + '\n'
        + '    initial import\n'
        + '\n'
        + '  c2\n'
        + '  Jane Doe <jane.doe@example.com>\n'
        + '  2026-09-17 12:00:00 +0000\n'
        + '\n'
        + '    prepare release\n'
        + '\n'
    )


def test_render_head_release_uses_current_version(pipeline):
    release = cm.Release(
        version_label=cm.SpecialVersion.HEAD,
        date=datetime.datetime(2026, 10, 17, 12, tzinfo=UTC),
    )

    assert pipeline.release_header(pipeline, release) == (
        banner('-', 'version 2.1.0-dev (2026-10-17 12:00:00 +0000)') + '\n'
    )


def test_releases_are_rendered_oldest_first(pipeline):
    v1 = cm.Release(
        version_label='v1.0',
        date=datetime.datetime(2026, 1, 1, tzinfo=UTC),
        changes=[_change('c1', 'one', datetime.datetime(2026, 1, 1, tzinfo=UTC))],
    )
    v2 = cm.Release(
        version_label='v2.0',
        date=datetime.datetime(2026, 2, 1, tzinfo=UTC),
        changes=[_change('c2', 'two', datetime.datetime(2026, 2, 1, tzinfo=UTC))],
    )

    document = pipeline.render(_result(v2, v1))

    assert document.index('version 1.0') < document.index('version 2.0')


def test_releases_wo_changes_are_skipped(pipeline):
    empty = cm.Release(
        version_label='v1.0',
        date=datetime.datetime(2026, 1, 1, tzinfo=UTC),
    )

    assert pipeline.changelog_releases(pipeline, _result(empty)) == ''
    assert 'version 1.0' not in pipeline.render(_result(empty))


def test_change_message_is_reflowed(render_cfg):
    pipeline = cr.RenderPipeline(
        cfg=cr.RenderCfg(tag_pattern=render_cfg.tag_pattern, wrap_column=20),
    )
    change = _change(
        'c1',
        'a rather long commit message\nwith a second line',
        datetime.datetime(2026, 1, 1, tzinfo=UTC),
    )

    rendered = pipeline.change_message(pipeline, None, change)

    assert rendered == (
        '    a rather long\n'
        '    commit message\n'
        '    with a second\n'
        '    line\n'
    )
    assert all(len(line) <= 20 for line in rendered.splitlines())


def test_preformatted_change_message_is_not_rendered(pipeline):
    change = _change(
        'c1',
        '  manually formatted\n  message',
        datetime.datetime(2026, 1, 1, tzinfo=UTC),
    )

    assert pipeline.change_message(pipeline, None, change) == ''


def test_change_header_is_wrapped(render_cfg):
    pipeline = cr.RenderPipeline(
        cfg=cr.RenderCfg(tag_pattern=render_cfg.tag_pattern, wrap_column=12),
    )
    change = _change(
        '0123456789abcdef',
        'msg',
        datetime.datetime(2026, 1, 1, tzinfo=UTC),
    )

    assert pipeline.change_header(pipeline, None, change) == (
        '  0123456789abcdef\n'
        '  Jane Doe\n'
        '  <jane.doe@example.com>\n'
        '  2026-01-01\n'
        '  00:00:00\n'
        '  +0000\n'
        '\n'
    )


def test_steps_can_be_replaced(pipeline):
    release = cm.Release(
        version_label='v1.0',
        date=datetime.datetime(2026, 1, 1, tzinfo=UTC),
        changes=[_change('c1', 'one', datetime.datetime(2026, 1, 1, tzinfo=UTC))],
    )

    customised = pipeline.with_steps(
        release_footer=lambda pipeline, release: f'end of {release.version_label}\n',
        change_header=lambda pipeline, release, change: f'* {change.id}\n',
        change_footer=lambda pipeline, release, change: '',
    )

    assert customised.release_changes(customised, release) == '* c1\n    one\n'
    assert customised.render(_result(release)).count('end of v1.0\n') == 1

    # original pipeline is left untouched
    assert pipeline.release_footer(pipeline, release) == ''
    assert 'end of v1.0' not in pipeline.render(_result(release))


def test_orchestrating_steps_use_replaced_steps(pipeline):
    release = cm.Release(
        version_label='v1.0',
        date=datetime.datetime(2026, 1, 1, tzinfo=UTC),
        changes=[_change('c1', 'one', datetime.datetime(2026, 1, 1, tzinfo=UTC))],
    )

    customised = pipeline.with_steps(
        changelog_header=lambda pipeline, result: '',
        changelog_footer=lambda pipeline, result: '',
        release=lambda pipeline, release: f'[{release.version_label}]',
    )

    assert customised.render(_result(release, release)) == '[v1.0][v1.0]'


def test_render_collected_releases(two_releases, now, render_cfg):
    result = ccol.collect_releases(history=two_releases, now=now)
    pipeline = cr.RenderPipeline(cfg=render_cfg)

    document = pipeline.render(result)

    assert document.index('c1') < document.index('c2') < document.index('c3')
    assert document.endswith(banner('=', 'End of releases.'))
