# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Change Log Generator

Renders the commit history of a git repository into a human-readable change log, grouped by
release.

Releases are delimited by tags matching a configurable regular expression (the first capturing
group yields the version label). Each release contains all commits reachable from its tag, but
not from the next-older matching tag. Commits newer than the most recent matching tag form an
"unreleased head" release. Releases tagged before the configured age cutoff are omitted (and
counted).

Rendering is done by a pipeline of small, independently replaceable render steps (see
`changelog.render`), so layout may be customised w/o touching the collection logic.
'''
