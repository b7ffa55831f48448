"""Parsers for Maven ``pom.xml`` and ``maven-metadata.xml`` documents."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from convergence_check.exceptions import PomParseError
from convergence_check.models import ManagedEntry, PomDocument

_PROP_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PROP_PASSES = 5


def _local(tag: object) -> str:
    # Comments and processing instructions have non-string tags.
    if not isinstance(tag, str):
        return ""
    return tag.split("}")[-1] if "}" in tag else tag


def _child(parent: ET.Element | None, name: str) -> ET.Element | None:
    if parent is None:
        return None
    for child in parent:
        if _local(child.tag) == name:
            return child
    return None


def _children(parent: ET.Element | None, name: str) -> list[ET.Element]:
    if parent is None:
        return []
    return [child for child in parent if _local(child.tag) == name]


def _text(element: ET.Element | None) -> str | None:
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


def _fromstring(content: str | bytes) -> ET.Element:
    # expat raises LookupError for an unknown declared encoding and
    # ValueError for multi-byte ones it cannot decode.
    try:
        return ET.fromstring(content)
    except (ET.ParseError, LookupError, ValueError) as exc:
        raise PomParseError(str(exc)) from exc


def _resolve_props(value: str, props: dict[str, str]) -> str:
    """Replace ${property} placeholders; unknown ones are kept as-is."""

    def _replace(m: re.Match) -> str:
        return props.get(m.group(1), m.group(0))

    for _ in range(_MAX_PROP_PASSES):
        resolved = _PROP_RE.sub(_replace, value)
        if resolved == value:
            break
        value = resolved
    return value


def _extract_properties(root: ET.Element) -> dict[str, str]:
    props: dict[str, str] = {}
    props_el = _child(root, "properties")
    if props_el is None:
        return props
    for child in props_el:
        name = _local(child.tag)
        if name and child.text:
            props[name] = child.text.strip()
    return props


def parse_pom(content: str | bytes) -> PomDocument:
    """Parse a POM into a :class:`PomDocument`.

    Works on namespaced and un-namespaced documents. Raises
    :class:`PomParseError` if the content is not well-formed XML.
    """
    root = _fromstring(content)
    if _local(root.tag) != "project":
        raise PomParseError(f"root element is <{_local(root.tag)}>, expected <project>")

    parent = _child(root, "parent")
    group_id = _text(_child(root, "groupId")) or _text(_child(parent, "groupId"))
    artifact_id = _text(_child(root, "artifactId"))
    version = _text(_child(root, "version")) or _text(_child(parent, "version"))

    props = _extract_properties(root)
    builtins = {
        "project.groupId": group_id,
        "project.artifactId": artifact_id,
        "project.version": version,
        "project.parent.groupId": _text(_child(parent, "groupId")),
        "project.parent.version": _text(_child(parent, "version")),
    }
    lookup = {**{k: v for k, v in builtins.items() if v is not None}, **props}

    doc = PomDocument(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        scm_url=_text(_child(_child(root, "scm"), "url")),
    )

    dep_mgmt = _child(root, "dependencyManagement")
    if dep_mgmt is None:
        return doc

    entries: list[ManagedEntry] = []
    for dep_el in _children(_child(dep_mgmt, "dependencies"), "dependency"):
        dep_group = _text(_child(dep_el, "groupId"))
        dep_artifact = _text(_child(dep_el, "artifactId"))
        if not dep_group or not dep_artifact:
            continue
        dep_version = _text(_child(dep_el, "version"))
        entries.append(
            ManagedEntry(
                group_id=_resolve_props(dep_group, lookup),
                artifact_id=_resolve_props(dep_artifact, lookup),
                version=_resolve_props(dep_version, lookup) if dep_version else None,
            )
        )
    doc.managed_dependencies = entries
    return doc


def parse_latest_version(content: str | bytes) -> str | None:
    """Return ``versioning/latest`` (or ``versioning/release``) verbatim."""
    root = _fromstring(content)
    versioning = _child(root, "versioning")
    return _text(_child(versioning, "latest")) or _text(_child(versioning, "release"))
