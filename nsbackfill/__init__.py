"""
nsbackfill: namespace inference for legacy Android library modules.

Scans an Android Gradle project, finds library modules that do not declare a
``namespace`` and fills it in from the ``package`` attribute of their
AndroidManifest.xml.
"""

__version__ = "1.0.0"
