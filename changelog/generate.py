# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import datetime
import logging
import os

import changelog.collect
import changelog.config as ccfg
import changelog.history as ch
import changelog.render as cr

logger = logging.getLogger(__name__)


def generate_changelog(
    history: ch.HistorySource,
    cfg: ccfg.ChangelogCfg=ccfg.ChangelogCfg(),
    current_version: str='HEAD',
    pipeline: cr.RenderPipeline | None=None,
    now: datetime.datetime | None=None,
) -> str:
    '''
    Collects releases from the given history and renders them into a change log.

    :param current_version: version to use for not-yet-released commits
    :param pipeline: optional (customised) render pipeline; `pipeline.cfg` takes precedence
        over rendering-related values from `cfg`
    '''
    result = changelog.collect.collect_releases(
        history=history,
        tag_pattern=cfg.tag_pattern,
        max_age=cfg.max_age,
        include_message=cfg.include_pattern,
        exclude_message=cfg.exclude_pattern,
        include_head=cfg.include_head,
        now=now,
    )

    if not pipeline:
        pipeline = cr.RenderPipeline(
            cfg=cr.RenderCfg.from_changelog_cfg(
                cfg=cfg,
                current_version=current_version,
            ),
        )

    return pipeline.render(result)


def write_changelog(
    document: str,
    path: str,
):
    parent_dir = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(parent_dir):
        raise ValueError(f'{path} must reside in an existing directory')

    with open(path, 'w') as f:
        f.write(document)

    logger.info(f'wrote change log to {path}')
