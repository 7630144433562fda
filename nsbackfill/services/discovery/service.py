"""
Project Discovery Service.

Builds the module graph of an Android Gradle project from the files on disk:
settings includes, per-module build files and, for Flutter hosts, the plugin
modules listed in ``.flutter-plugins-dependencies``.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from ...core.exceptions import ProjectLayoutError
from ...core.logging import get_logger
from ...models.project import AndroidExtension, ExtensionKind, Module

logger = get_logger(__name__)

SETTINGS_FILES = ("settings.gradle.kts", "settings.gradle")
BUILD_FILES = ("build.gradle.kts", "build.gradle")
FLUTTER_PLUGINS_FILE = ".flutter-plugins-dependencies"

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
# "//" only starts a comment at line start or after whitespace, so URLs survive
_LINE_COMMENT = re.compile(r"(^|\s)//.*$", re.MULTILINE)
_QUOTED = re.compile(r"""["']([^"']+)["']""")
_INCLUDE_CALL = re.compile(r"\binclude\s*\(([^)]*)\)", re.DOTALL)
_INCLUDE_BARE = re.compile(r"^\s*include\s+([^(\n].*)$", re.MULTILINE)
_PROJECT_DIR = re.compile(
    r"""project\s*\(\s*["'](:[^"']+)["']\s*\)\s*\.projectDir\s*=\s*"""
    r"""(?:file|new\s+File)\s*\(\s*(?:settingsDir\s*,\s*|rootDir\s*,\s*)?["']([^"']+)["']\s*\)"""
)
_LIBRARY_PLUGIN = re.compile(
    r"""com\.android\.library|["']android-library["']|libs\.plugins\.android\.library"""
)
_APPLICATION_PLUGIN = re.compile(
    r"""com\.android\.application|libs\.plugins\.android\.application"""
)
_NAMESPACE_DECL = re.compile(r"""^\s*namespace\s*(?:=\s*)?["']([^"']+)["']""", re.MULTILINE)


def strip_comments(text: str) -> str:
    """Remove Groovy/Kotlin block and line comments."""
    return _LINE_COMMENT.sub(r"\1", _BLOCK_COMMENT.sub("", text))


def blank_comments(text: str) -> str:
    """Replace comments with spaces, keeping newlines and character offsets."""
    text = _BLOCK_COMMENT.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), text)
    return _LINE_COMMENT.sub(lambda m: m.group(1) + " " * (len(m.group(0)) - len(m.group(1))), text)


def find_first(directory: Path, candidates: tuple[str, ...]) -> Path | None:
    """Return the first existing file among ``candidates`` in ``directory``."""
    for name in candidates:
        path = directory / name
        if path.is_file():
            return path
    return None


def parse_includes(settings_text: str) -> list[str]:
    """Extract included Gradle project paths from a settings script.

    Handles ``include(":a", ":b")`` and Groovy's ``include ':a', ':b'``.
    Paths without a leading colon are normalised to have one.

    Args:
        settings_text: Content of settings.gradle or settings.gradle.kts.

    Returns:
        Project paths in declaration order, without duplicates.
    """
    text = strip_comments(settings_text)
    found: list[str] = []
    for match in _INCLUDE_CALL.finditer(text):
        found.extend(_QUOTED.findall(match.group(1)))
    for match in _INCLUDE_BARE.finditer(text):
        found.extend(_QUOTED.findall(match.group(1)))

    paths: list[str] = []
    for raw in found:
        path = raw if raw.startswith(":") else f":{raw}"
        if path not in paths:
            paths.append(path)
    return paths


def parse_project_dirs(settings_text: str) -> dict[str, str]:
    """Extract ``project(":x").projectDir = file("...")`` overrides."""
    text = strip_comments(settings_text)
    return {m.group(1): m.group(2) for m in _PROJECT_DIR.finditer(text)}


def classify_build_file(build_text: str) -> ExtensionKind | None:
    """Classify the Android plugin a build script applies.

    Returns:
        ExtensionKind.LIBRARY, ExtensionKind.APPLICATION, or None when the
        module applies no Android plugin.
    """
    text = strip_comments(build_text)
    if _LIBRARY_PLUGIN.search(text):
        return ExtensionKind.LIBRARY
    if _APPLICATION_PLUGIN.search(text):
        return ExtensionKind.APPLICATION
    return None


def parse_namespace(build_text: str) -> str | None:
    """Return the namespace a build script declares, if any."""
    match = _NAMESPACE_DECL.search(strip_comments(build_text))
    return match.group(1) if match else None


def read_project_file(path: Path, root: Path) -> str:
    """Read a Gradle script or Flutter metadata file as UTF-8.

    Raises:
        ProjectLayoutError: If the file cannot be read or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectLayoutError(
            message=f"Cannot read project file: {path}",
            context={"path": str(path)},
            cause=e,
            root=str(root),
        ) from e


def load_module(name: str, project_dir: Path) -> Module:
    """Create a Module from its directory, reading its build file if present."""
    build_file = find_first(project_dir, BUILD_FILES)
    extension = None
    if build_file is not None:
        text = read_project_file(build_file, project_dir)
        kind = classify_build_file(text)
        if kind is not None:
            extension = AndroidExtension(kind=kind, namespace=parse_namespace(text))
    return Module(name=name, project_dir=project_dir, extension=extension, build_file=build_file)


def project_path_to_dir(root: Path, path: str) -> Path:
    """Map a Gradle path such as ``:libs:foo`` to ``<root>/libs/foo``."""
    return root.joinpath(*[part for part in path.split(":") if part])


def read_flutter_plugins(flutter_root: Path) -> list[tuple[str, Path]]:
    """List Android plugin modules recorded by the Flutter tool.

    Plugins marked ``"native_build": false`` have no Gradle project and are skipped.

    Args:
        flutter_root: Flutter project root (parent of ``android/``).

    Returns:
        ``(":plugin_name", <plugin>/android)`` pairs; empty when the file is absent.

    Raises:
        ProjectLayoutError: If the file is unreadable or not the expected JSON shape.
    """
    deps_file = flutter_root / FLUTTER_PLUGINS_FILE
    if not deps_file.is_file():
        return []

    text = read_project_file(deps_file, flutter_root)
    try:
        data = json.loads(text)
        plugins = data.get("plugins", {}).get("android", [])
    except (ValueError, AttributeError) as e:
        raise ProjectLayoutError(
            message=f"Malformed {FLUTTER_PLUGINS_FILE}",
            context={"path": str(deps_file)},
            cause=e,
            root=str(flutter_root),
        ) from e
    if not isinstance(plugins, list):
        raise ProjectLayoutError(
            message=f"Malformed {FLUTTER_PLUGINS_FILE}: plugins.android is not a list",
            context={"path": str(deps_file)},
            root=str(flutter_root),
        )

    result = []
    for plugin in plugins:
        if not isinstance(plugin, dict):
            continue
        name = plugin.get("name")
        path = plugin.get("path")
        if not name or not path or plugin.get("native_build") is False:
            continue
        result.append((f":{name}", Path(path) / "android"))
    return result


class ProjectDiscoveryService:
    """Service that turns an Android project directory into a module graph."""

    def __init__(self, include_flutter_plugins: bool = True) -> None:
        self.include_flutter_plugins = include_flutter_plugins

    def discover(self, root: Path) -> list[Module]:
        """Discover the modules of the Gradle project at ``root``.

        Args:
            root: Directory holding settings.gradle(.kts).

        Returns:
            Modules in settings order, followed by Flutter plugin modules.

        Raises:
            ProjectLayoutError: If no settings file exists under ``root`` or a
                project file cannot be read.
        """
        root = root.resolve()
        settings = find_first(root, SETTINGS_FILES)
        if settings is None:
            raise ProjectLayoutError(
                message="No settings.gradle or settings.gradle.kts found",
                root=str(root),
            )

        text = read_project_file(settings, root)
        overrides = parse_project_dirs(text)
        entries = [
            (path, root / overrides[path] if path in overrides else project_path_to_dir(root, path))
            for path in parse_includes(text)
        ]
        if self.include_flutter_plugins:
            known = {path for path, _ in entries}
            entries.extend(
                (path, directory)
                for path, directory in read_flutter_plugins(root.parent)
                if path not in known
            )

        modules = []
        for name, project_dir in entries:
            if not project_dir.is_dir():
                logger.warning("Module directory missing, skipping", module=name, path=str(project_dir))
                continue
            modules.append(load_module(name, project_dir))

        logger.info(
            "Project discovered",
            root=str(root),
            modules=len(modules),
            libraries=sum(1 for m in modules if m.is_library),
        )
        return modules


def discover_project(root: Path, include_flutter_plugins: bool = True) -> list[Module]:
    """Shortcut for ``ProjectDiscoveryService(...).discover(root)``."""
    return ProjectDiscoveryService(include_flutter_plugins).discover(root)
