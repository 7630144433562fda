"""Test configuration for nsbackfill."""

import tempfile
from pathlib import Path

import pytest

from nsbackfill.models.project import AndroidExtension, ExtensionKind, Module

LIBRARY_BUILD_GRADLE = """\
group 'com.example.legacy'

apply plugin: 'com.android.library'

android {
    compileSdkVersion 31

    defaultConfig {
        minSdkVersion 16
    }
}
"""

APP_BUILD_GRADLE_KTS = """\
plugins {
    id("com.android.application")
    id("kotlin-android")
    id("dev.flutter.flutter-gradle-plugin")
}

android {
    namespace = "com.example.host"
    compileSdk = 34
}
"""


def manifest_xml(package: str | None = None, quote: str = '"') -> str:
    """Render a minimal library manifest, optionally with a package attribute."""
    attr = f" package={quote}{package}{quote}" if package else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<manifest xmlns:android="http://schemas.android.com/apk/res/android"{attr}>\n'
        "</manifest>\n"
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_module(temp_dir):
    """Factory building an in-memory Module backed by a real directory.

    Args:
        temp_dir: Pytest fixture providing a temporary directory path.

    Returns:
        Callable taking ``name``, ``kind``, ``namespace`` and ``manifest``
        (manifest text, or None for no manifest file).
    """

    def _make(name="plugin", kind=ExtensionKind.LIBRARY, namespace=None, manifest=None):
        project_dir = temp_dir / name
        project_dir.mkdir(parents=True, exist_ok=True)
        if manifest is not None:
            manifest_path = project_dir / "src" / "main" / "AndroidManifest.xml"
            manifest_path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(manifest, bytes):
                manifest_path.write_bytes(manifest)
            else:
                manifest_path.write_text(manifest, encoding="utf-8")
        extension = AndroidExtension(kind=kind, namespace=namespace) if kind else None
        return Module(name=f":{name}", project_dir=project_dir, extension=extension)

    return _make


@pytest.fixture
def flutter_project(temp_dir):
    """Create a Flutter-style Android host project with a legacy plugin.

    Layout::

        app_root/android/settings.gradle.kts   (include(":app"))
        app_root/android/app/build.gradle.kts  (application, namespaced)
        app_root/.flutter-plugins-dependencies (lists legacy_plugin)
        pub_cache/legacy_plugin/android/...    (library, no namespace)

    Returns:
        Path: The ``android`` directory of the host project.
    """
    android_dir = temp_dir / "app_root" / "android"
    (android_dir / "app").mkdir(parents=True)
    (android_dir / "settings.gradle.kts").write_text('include(":app")\n', encoding="utf-8")
    (android_dir / "app" / "build.gradle.kts").write_text(APP_BUILD_GRADLE_KTS, encoding="utf-8")

    plugin_android = temp_dir / "pub_cache" / "legacy_plugin" / "android"
    (plugin_android / "src" / "main").mkdir(parents=True)
    (plugin_android / "build.gradle").write_text(LIBRARY_BUILD_GRADLE, encoding="utf-8")
    (plugin_android / "src" / "main" / "AndroidManifest.xml").write_text(
        manifest_xml("com.example.legacy"), encoding="utf-8"
    )

    deps = (
        '{"plugins": {"android": [{"name": "legacy_plugin", "path": "%s/", '
        '"dependencies": []}]}}' % (temp_dir / "pub_cache" / "legacy_plugin").as_posix()
    )
    (temp_dir / "app_root" / ".flutter-plugins-dependencies").write_text(deps, encoding="utf-8")
    return android_dir
