"""Shared fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def make_files(root: Path, rel_paths: list[str]) -> None:
    """Create empty files (with parent directories) under *root*."""
    for rel in rel_paths:
        f = root / rel
        f.parent.mkdir(parents=True, exist_ok=True)
        f.touch()


def write_file(root: Path, rel: str, content: str) -> None:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


def pom_xml(artifact_id: str, *, packaging: str = "jar", modules: list[str] | None = None) -> str:
    """Render a minimal namespaced ``pom.xml``."""
    module_lines = "".join(f"    <module>{m}</module>\n" for m in modules or [])
    modules_block = f"  <modules>\n{module_lines}  </modules>\n" if modules else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
        "  <modelVersion>4.0.0</modelVersion>\n"
        f"  <artifactId>{artifact_id}</artifactId>\n"
        f"  <packaging>{packaging}</packaging>\n"
        f"{modules_block}"
        "</project>\n"
    )


def jacoco_index(*percentages: str) -> str:
    """Render a JaCoCo ``index.html`` with one package row per percentage."""
    rows = "".join(
        f'<tr><td><a href="pkg{i}/index.html">com.example.pkg{i}</a></td>'
        f'<td class="bar">0 of 10</td><td class="ctr2">{pct}</td></tr>'
        for i, pct in enumerate(percentages)
    )
    return (
        "<html><body><h1>module</h1>"
        '<table class="coverage" cellspacing="0">'
        "<thead><tr><td>Element</td><td>Missed Instructions</td><td>Cov.</td></tr></thead>"
        f"<tbody>{rows}</tbody>"
        "</table></body></html>"
    )


# ── Project scaffolding fixtures ─────────────────────────────────


@pytest.fixture()
def multi_module_project(tmp_path: Path) -> Path:
    """Create a two-level Maven build with reports in some modules.

    Layout::

        shop (pom)
          core (jar)       jacoco-ut 80%, jacoco-it 60%
          services (pom)
            billing (jar)  jacoco-ut 50%/70%
            api (war)      built, no reports
          docs (jar)       not built
    """
    root = tmp_path / "shop"
    write_file(
        root,
        "pom.xml",
        pom_xml("shop", packaging="pom", modules=["core", "services", "docs"]),
    )

    write_file(root, "core/pom.xml", pom_xml("core"))
    write_file(root, "core/target/site/jacoco-ut/index.html", jacoco_index("80%"))
    write_file(root, "core/target/site/jacoco-ut/jacoco.css", "body {}\n")
    write_file(root, "core/target/site/jacoco-it/index.html", jacoco_index("60%"))

    write_file(
        root,
        "services/pom.xml",
        pom_xml("services", packaging="pom", modules=["billing", "api"]),
    )
    write_file(root, "services/billing/pom.xml", pom_xml("billing"))
    write_file(
        root,
        "services/billing/target/site/jacoco-ut/index.html",
        jacoco_index("50%", "70%"),
    )
    write_file(root, "services/api/pom.xml", pom_xml("api", packaging="war"))
    make_files(root, ["services/api/target/classes/App.class"])

    write_file(root, "docs/pom.xml", pom_xml("docs"))
    return root
