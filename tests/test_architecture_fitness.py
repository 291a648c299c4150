"""Architectural fitness functions for the package layering.

``core`` holds models, configuration, logging, and errors; ``services`` holds
the import logic; ``adapters`` touch files; ``cli`` is the only layer allowed
to know about typer and rich.
"""

from pathlib import Path

PACKAGE_DIR = Path(__file__).parent.parent / "bible_import"


def _importers(layer: str, needles: tuple[str, ...]) -> list[str]:
    violations = []
    for py_file in (PACKAGE_DIR / layer).rglob("*.py"):
        content = py_file.read_text(encoding="utf-8")
        for needle in needles:
            if f"import {needle}" in content or f"from {needle}" in content:
                violations.append(f"{py_file.relative_to(PACKAGE_DIR)} -> {needle}")
    return violations


def test_no_python_modules_at_root():
    """Only entry points and test configuration may live at the repository root."""
    root = Path(__file__).parent.parent
    allowed = {"conftest.py", "main.py", "__main__.py"}
    violations = [f.name for f in root.glob("*.py") if f.name not in allowed]

    assert not violations, (
        f"Unexpected Python modules at root: {violations}\n"
        "Code must live inside the bible_import/ package."
    )


def test_core_depends_on_nothing_above_it():
    """Core must not reach into services, adapters, or the CLI."""
    violations = _importers(
        "core",
        ("bible_import.services", "bible_import.adapters", "bible_import.cli", "typer", "rich"),
    )
    assert not violations, f"Core layer imports outer layers: {violations}"


def test_services_do_not_import_cli():
    """Services stay usable as a library without the CLI stack."""
    violations = _importers("services", ("bible_import.cli", "typer", "rich"))
    assert not violations, f"Services layer imports CLI code: {violations}"


def test_adapters_do_not_import_services():
    violations = _importers("adapters", ("bible_import.services", "bible_import.cli"))
    assert not violations, f"Adapters layer imports services or CLI: {violations}"
