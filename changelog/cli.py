#! /usr/bin/env python3
# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import dataclasses
import logging
import sys

import changelog.config as ccfg
import changelog.generate
import changelog.history as ch
import changelog.log
import changelog.model as cm

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    ''' Parses CLI for change log generation '''
    parser = argparse.ArgumentParser(
        description='Generate a change log, grouped by release, from git history',
    )
    parser.add_argument(
        '--repo-path',
        default='.',
        help='path to git repository (default: current directory)',
    )
    parser.add_argument(
        '--cfg-file', '-c',
        help='YAML file to read configuration from',
    )
    parser.add_argument(
        '--current-version',
        default='HEAD',
        help='version to render for not-yet-released commits',
    )
    parser.add_argument(
        '--outfile', '-o',
        help='file to write change log to ("-" for stdout; default: configured file-name)',
    )

    # overwrites for values from cfg-file
    parser.add_argument('--max-age', type=int, help='max age of releases (in days)')
    parser.add_argument('--tag-regexp', help='pattern for release tags (w/ one group)')
    parser.add_argument('--wrap-column', type=int, help='column to reflow text to')
    parser.add_argument('--include-message', help='only include commits w/ matching messages')
    parser.add_argument('--exclude-message', help='exclude commits w/ matching messages')
    parser.add_argument(
        '--no-head',
        dest='include_head',
        action='store_false',
        default=None,
        help='do not render unreleased commits',
    )
    parser.add_argument('--debug', action='store_true', default=None)

    return parser.parse_args(argv)


def _effective_cfg(args: argparse.Namespace) -> ccfg.ChangelogCfg:
    if args.cfg_file:
        cfg = ccfg.load_cfg(args.cfg_file)
    else:
        cfg = ccfg.ChangelogCfg()

    overwrites = {
        name: value
        for name in (
            'max_age',
            'tag_regexp',
            'wrap_column',
            'include_message',
            'exclude_message',
            'include_head',
            'debug',
        )
        if (value := getattr(args, name)) is not None
    }
    if not overwrites:
        return cfg

    return dataclasses.replace(cfg, **overwrites)


def main(argv=None):
    args = parse_args(argv)
    changelog.log.configure_default_logging(
        stdout_level=logging.DEBUG if args.debug else logging.INFO,
    )

    try:
        cfg = _effective_cfg(args)
        if cfg.debug:
            changelog.log.configure_default_logging(stdout_level=logging.DEBUG)

        document = changelog.generate.generate_changelog(
            history=ch.GitHistorySource(args.repo_path),
            cfg=cfg,
            current_version=args.current_version,
        )
    except cm.ChangelogError as ce:
        logger.error(f'failed to generate change log: {ce}')
        sys.exit(1)

    outfile = args.outfile or cfg.file_name
    if outfile == '-':
        sys.stdout.write(document)
        return

    try:
        changelog.generate.write_changelog(
            document=document,
            path=outfile,
        )
    except (OSError, ValueError) as e:
        logger.error(f'failed to write change log: {e}')
        sys.exit(1)


if __name__ == '__main__':
    main()
