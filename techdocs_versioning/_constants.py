"""Common literal values used across techdocs_versioning.

These constants keep the reserved version tokens, URL segments, and session
key layout in one place so the resolver, store, and rewriter cannot drift.
Intended for internal use within the techdocs_versioning package.

Examples
--------
>>> from techdocs_versioning import _constants
>>> _constants.SESSION_KEY_TEMPLATE.format(prefix="techdocs-versioning", uid="abc")
'techdocs-versioning-version-abc'
>>> _constants.DEFAULT_VERSION
'latest'
"""

import re

COMPONENT_PREFIX = "techdocs-versioning"
SESSION_KEY_TEMPLATE = "{prefix}-version-{uid}"

DEFAULT_VERSION = "latest"
VERSIONS_DIRECTORY = "versions"
VERSIONS_MANIFEST = "versions.json"
DEFAULT_BRANCH = "main"

RELEASE_VERSION_PATTERN = re.compile(r"^v(\d+(\.\d+){0,2})$")
MERGE_REQUEST_PATTERN = re.compile(r"MR-\d+-")

EDIT_BUTTON_CLASS = "md-content__button"
EDIT_BUTTON_TITLE = "Edit this page"
RELEASE_NOT_EDITABLE = "This version is a release and cannot be edited."
