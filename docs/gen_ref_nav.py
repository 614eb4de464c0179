"""Generate API reference pages for MkDocs."""

from __future__ import annotations

from pathlib import Path

import mkdocs_gen_files

SRC = Path("src")
PKG = "finforecastlab"

# Collect all modules
modules = []
for path in sorted((SRC / PKG).rglob("*.py")):
    if path.name == "__init__.py":
        continue
    mod = ".".join(path.relative_to(SRC).with_suffix("").parts)
    modules.append(mod)


def write_section(title, section_modules, fd):
    """Write a titled list of module links."""
    if not section_modules:
        return
    print(f"## {title}", file=fd)
    print("", file=fd)
    for mod in section_modules:
        name = mod.split(".")[-1]
        doc_path = f"{mod.replace('.', '/')}.md"
        print(f"- [{name}]({doc_path})", file=fd)
    print("", file=fd)


# Generate the main reference index
with mkdocs_gen_files.open("reference/index.md", "w") as fd:
    print("# Reference", file=fd)
    print("", file=fd)
    print("Browse the API by module. Use the search for quick jumps.", file=fd)
    print("", file=fd)

    # Forecasting operations first, then the records and results they use
    core_modules = [m for m in modules if m.startswith(f"{PKG}.core")]
    engine_modules = [m for m in modules if m not in core_modules]

    write_section("Forecasting", engine_modules, fd)
    write_section("Core Modules", core_modules, fd)

# Generate individual module pages
for mod in modules:
    doc_path = f"reference/{mod.replace('.', '/')}.md"

    with mkdocs_gen_files.open(doc_path, "w") as fd:
        print(f"# {mod}", file=fd)
        print("", file=fd)
        print(f"::: {mod}", file=fd)
