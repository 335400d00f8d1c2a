"""Diagnostic message templates.

Each label uses ``%(name)s`` placeholders filled from the fields of the
error that triggered it. Pass the mapping as the single logging argument::

    logger.warning(VIEW_NOT_FOUND, fields(exc))
"""

from typing import Any

VIEW_NOT_SET = "No view is set for this route (looked for %(views_path)s)."
VIEW_NOT_FOUND = "The view %(views_path)s does not exist."
VARIATION_NOT_FOUND = "The variation %(variations_path)s does not exist."
VARIATION_SYNTAX_ERROR = "The variation %(variations_path)s is invalid: %(syntax_error)s"
CONTROLLER_FAILED = "Controller %(controller)s.%(hook)s raised: %(cause)s"
HOOK_TIMEOUT = "Controller %(controller)s.%(hook)s did not finish within %(timeout)ss."
STYLESHEET_NOT_FOUND = "The stylesheet %(stylesheet)s cannot be injected: file not found."
POST_PROCESSING_FAILED = "Post-processing task %(task)s failed: %(error)s"


def fields(exc: BaseException) -> dict[str, Any]:
    """Public attributes of *exc*, used to fill a label's placeholders."""
    return {key: value for key, value in vars(exc).items() if not key.startswith("_")}
