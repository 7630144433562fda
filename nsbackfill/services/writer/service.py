"""
Build File Writer Service.

Persists backfilled namespaces into module build scripts so later Gradle runs
no longer depend on the manifest ``package`` attribute.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from ...core.config import Config, get_config
from ...core.exceptions import BuildFileError
from ...core.logging import get_logger
from ...models.project import Module
from ..discovery.service import blank_comments, parse_namespace

logger = get_logger(__name__)

_ANDROID_BLOCK = re.compile(r"^([ \t]*)android\s*\{", re.MULTILINE)


def namespace_declaration(build_file: Path, namespace: str) -> str:
    """Render a namespace declaration in the build file's DSL."""
    if build_file.name.endswith(".kts"):
        return f'namespace = "{namespace}"'
    return f'namespace "{namespace}"'


def insert_namespace(text: str, declaration: str, default_indent: str = "    ") -> str:
    """Insert ``declaration`` as the first statement of the ``android {`` block.

    The new line copies the indentation of the block's first line; an empty
    block gets the ``android`` line's indentation plus ``default_indent``.

    Blocks inside comments are ignored.

    Raises:
        ValueError: If the script has no ``android {`` block.
    """
    code = blank_comments(text)
    match = _ANDROID_BLOCK.search(code)
    if match is None:
        raise ValueError("no android block")

    base_indent = match.group(1)
    brace_end = match.end()
    newline = text.find("\n", brace_end)
    if newline == -1 or code[brace_end:newline].strip():
        # block body starts on the brace line
        indent = base_indent + default_indent
        return f"{text[:brace_end]}\n{indent}{declaration}\n{base_indent}{text[brace_end:].lstrip()}"

    next_end = text.find("\n", newline + 1)
    next_line = code[newline + 1 : next_end if next_end != -1 else len(code)]
    stripped = next_line.lstrip()
    if stripped and not stripped.startswith("}"):
        indent = next_line[: len(next_line) - len(stripped)]
    else:
        indent = base_indent + default_indent
    return f"{text[:newline + 1]}{indent}{declaration}\n{text[newline + 1:]}"


class BuildFileWriterService:
    """Writes module namespaces into build.gradle / build.gradle.kts."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def write_namespace(self, module: Module) -> bool:
        """Persist ``module``'s namespace into its build file.

        Args:
            module: A module whose extension holds the namespace to write.

        Returns:
            True if the build file was changed; False when there is no build
            file, no namespace, or the file already declares one.

        Raises:
            BuildFileError: If the build file has no ``android {`` block.
        """
        namespace = module.namespace
        if module.build_file is None or not namespace:
            return False

        text = module.build_file.read_text(encoding="utf-8")
        if parse_namespace(text) is not None:
            logger.debug("Namespace already declared", module=module.name, path=str(module.build_file))
            return False

        declaration = namespace_declaration(module.build_file, namespace)
        try:
            updated = insert_namespace(text, declaration, self.config.writer.indent)
        except ValueError as e:
            raise BuildFileError(
                message="No android { } block to insert the namespace into",
                context={"module": module.name, "namespace": namespace},
                cause=e,
                build_file=str(module.build_file),
            ) from e

        module.build_file.write_text(updated, encoding="utf-8")
        logger.info("Namespace written", module=module.name, namespace=namespace, path=str(module.build_file))
        return True

    def write_all(self, modules: Iterable[Module]) -> list[str]:
        """Write every module's namespace; returns names of modules changed."""
        return [m.name for m in modules if self.write_namespace(m)]
