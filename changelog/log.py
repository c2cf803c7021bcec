# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

from copy import copy
import logging
import sys


class Bcolors:
    RESET_ALL = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


class ChangelogFormatter(logging.Formatter):
    level_colors = {
        logging.DEBUG: Bcolors.BLUE,
        logging.INFO: Bcolors.GREEN,
        logging.WARNING: Bcolors.YELLOW,
        logging.ERROR: Bcolors.RED,
        logging.CRITICAL: Bcolors.RED,
    }

    def __init__(self, *args, colored: bool | None=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.colored = colored

    def _colored(self) -> bool:
        if self.colored is None:
            return sys.stderr.isatty()
        return self.colored

    def formatMessage(self, record):
        record_copy = copy(record)
        levelname = record_copy.levelname
        if self._colored() and (color := self.level_colors.get(record_copy.levelno)):
            levelname = f'{Bcolors.BOLD}{color}{levelname}{Bcolors.RESET_ALL}'
        record_copy.__dict__['levelprefix'] = levelname
        return super().formatMessage(record_copy)


def default_fmt_string() -> str:
    return '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'


def configure_default_logging(
    stdout_level=None,
    force=True,
    colored: bool | None=None,
):
    '''
    installs a stream handler (writing to stderr, so a change log written to stdout is not
    cluttered) on the root logger.

    :param force: if set, remove (and close) previously installed handlers
    '''
    if not stdout_level:
        stdout_level = logging.INFO

    # make sure to have a clean root logger (in case setup is called multiple times)
    if force:
        for h in list(logging.root.handlers):
            logging.root.removeHandler(h)
            h.close()

    sh = logging.StreamHandler()
    sh.setLevel(stdout_level)
    sh.setFormatter(ChangelogFormatter(fmt=default_fmt_string(), colored=colored))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # too verbose
    logging.getLogger('git').setLevel(logging.WARNING)
