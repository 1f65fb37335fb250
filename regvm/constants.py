"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

REGISTER_PREFIX = "%"

# Jump target carried by a placeholder until it is backpatched.
PLACEHOLDER_TARGET = -1

EMPTY_DISPLAY = "[empty]"
TRUE_DISPLAY = "true"
FALSE_DISPLAY = "false"
NAN_DISPLAY = "NaN"
INF_DISPLAY = "inf"

PROCESS_TAG_TEMPLATE = "[Process #{pid}]"
