"""Markdown parsing helpers: wiki-links, tags and ``## `` sections.

Everything here operates on in-memory text and never touches the filesystem.
"""

import re

from pocketbrain.store.types import WikiLink

_WIKI_LINK_PATTERN = re.compile(r"\[\[([^\[\]\n]+)\]\]")

# Markdown headings (# through ######); their "#" never counts as a tag.
_HEADING_PATTERN = re.compile(r"^#{1,6}\s", re.ASCII)

# "#word" or "#word/sub", not preceded by a word character or "/".
_TAG_PATTERN = re.compile(
    r"(?:^|[^\w/])#([A-Za-z0-9][A-Za-z0-9_\-]*(?:/[A-Za-z0-9][A-Za-z0-9_\-]*)*)",
    re.ASCII,
)


def normalize_line_endings(content: str) -> str:
    """Convert CRLF line endings to LF."""
    return content.replace("\r\n", "\n")


def normalize_wiki_link_target(target: str) -> str:
    """Canonical form of a wiki-link target used for backlink comparisons."""
    return target.strip().lower()


def parse_wiki_links(content: str) -> list[WikiLink]:
    """
    Extract all ``[[...]]`` wiki-links from content.

    The inner text is split on the first ``|`` into target and alias. Links
    with an empty target are dropped.

    Args:
        content: Markdown text

    Returns:
        Parsed links in document order
    """
    links: list[WikiLink] = []
    for match in _WIKI_LINK_PATTERN.finditer(content):
        inner = match.group(1).strip()
        if not inner:
            continue

        target, sep, alias = inner.partition("|")
        target = target.strip()
        if not target:
            continue

        links.append(
            WikiLink(
                raw=f"[[{inner}]]",
                target=target,
                alias=alias.strip() if sep else None,
                normalized_target=normalize_wiki_link_target(target),
            )
        )
    return links


def extract_tags(content: str) -> list[str]:
    """
    Return the sorted, de-duplicated, lower-cased ``#tags`` in content.

    Heading lines are skipped entirely.
    """
    seen: set[str] = set()
    for line in normalize_line_endings(content).split("\n"):
        if _HEADING_PATTERN.match(line):
            continue
        for body in _TAG_PATTERN.findall(line):
            seen.add("#" + body.lower())
    return sorted(seen)


def normalize_tag(tag: str) -> str:
    """Lower-case a tag query and make sure it carries a leading ``#``."""
    trimmed = tag.strip().lower()
    if trimmed.startswith("#"):
        return trimmed
    return "#" + trimmed


# --- Sections ---


def ensure_section(content: str, heading: str) -> str:
    """Append heading (after one blank line) unless a line already equals it."""
    normalized = normalize_line_endings(content)
    for line in normalized.split("\n"):
        if line.strip() == heading:
            return normalized

    trimmed = normalized.rstrip("\n\r\t ")
    if not trimmed:
        return heading + "\n"
    return f"{trimmed}\n\n{heading}\n"


def section_bounds(lines: list[str], heading: str) -> tuple[int, int] | None:
    """
    Locate the section opened by heading.

    Returns:
        (start, end) where start is the heading line and end is the index of
        the next ``## `` heading or len(lines); None if heading is absent.
    """
    start = next(
        (i for i, line in enumerate(lines) if line.strip() == heading), None
    )
    if start is None:
        return None

    end = next(
        (i for i in range(start + 1, len(lines)) if lines[i].startswith("## ")),
        len(lines),
    )
    return start, end


def append_line_to_section(content: str, heading: str, line: str) -> str:
    """Insert line at the end of the section opened by heading."""
    normalized = ensure_section(content, heading)
    lines = normalized.split("\n")
    bounds = section_bounds(lines, heading)
    if bounds is None:
        return normalized

    _, end = bounds
    lines.insert(end, line)
    return "\n".join(lines)


def _tracking_key(line: str) -> str | None:
    """Key of a ``- key: value`` line, or None for any other line."""
    stripped = line.strip()
    if not stripped.startswith("- "):
        return None
    key, sep, _ = stripped[2:].partition(":")
    if not sep:
        return None
    return key.strip()


def upsert_tracking_line(content: str, heading: str, key: str, value: str) -> str:
    """
    Set ``- key: value`` inside the section opened by heading.

    An existing line whose key matches case-insensitively is replaced in
    place; otherwise the line is appended at the end of the section.
    """
    normalized = ensure_section(content, heading)
    lines = normalized.split("\n")
    bounds = section_bounds(lines, heading)
    if bounds is None:
        return normalized

    start, end = bounds
    desired = f"- {key}: {value}"
    target = key.lower()

    for i in range(start + 1, end):
        existing = _tracking_key(lines[i])
        if existing is not None and existing.lower() == target:
            lines[i] = desired
            return "\n".join(lines)

    lines.insert(end, desired)
    return "\n".join(lines)
