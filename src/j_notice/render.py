"""Render resolved licenses into NOTICE text."""

from __future__ import annotations

from collections.abc import Mapping

from j_notice.exceptions import NoticeConfigError, NoticeTemplateError

DEFAULT_MESSAGE = "{0}{1} under {2}"


def generate_notice_lines(
    resolved: Mapping[str, str],
    message: str = DEFAULT_MESSAGE,
    indent: int = 2,
) -> str:
    """Format one line per resolved artifact, in mapping order.

    `message` is a positional format string:
        {0} - indentation
        {1} - artifact name
        {2} - license name

    Raises:
        NoticeConfigError: If `message` is not a usable format string.
    """
    padding = " " * indent
    lines: list[str] = []
    for key, license_label in resolved.items():
        try:
            line = message.format(padding, key, license_label)
        except (IndexError, KeyError, ValueError) as exc:
            raise NoticeConfigError(f"Invalid notice message format {message!r}: {exc}") from exc
        lines.append(line + "\n")
    return "".join(lines)


def render_notice(template: str, placeholder: str, lines: str) -> str:
    """Replace every occurrence of `placeholder` in `template` with `lines`.

    The replacement is literal; `lines` is not interpreted in any way.

    Raises:
        NoticeTemplateError: If the template does not contain the placeholder.
    """
    if placeholder not in template:
        raise NoticeTemplateError(f"NOTICE template does not contain the placeholder '{placeholder}'")
    return template.replace(placeholder, lines)
