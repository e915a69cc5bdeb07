#!/usr/bin/env python3
from __future__ import annotations

import argparse
import ast
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PACKAGE = "nse_dashboard"

WEB_AND_HTTP_EXTERNAL = {
    "fastapi",
    "starlette",
    "pydantic",
    "pydantic_settings",
    "httpx",
    "uvicorn",
}

DOMAIN_BANNED_EXTERNAL = WEB_AND_HTTP_EXTERNAL
APP_BANNED_EXTERNAL = WEB_AND_HTTP_EXTERNAL
API_BANNED_EXTERNAL = {
    "httpx",
}

LAYER_NAMES = ("api", "application", "domain", "infrastructure")

NO_INTERFACE_IMPORT_RULES = {
    ("typing", "Protocol"),
    ("typing_extensions", "Protocol"),
    ("abc", "ABC"),
    ("abc", "ABCMeta"),
    ("abc", "abstractmethod"),
}
NO_INTERFACE_BASES = {"Protocol", "ABC", "ABCMeta"}

# Allowed internal dependencies per layer; anything else is a violation.
_FORBIDDEN_INTERNAL = {
    "domain": {"api", "application", "infrastructure"},
    "infrastructure": {"api", "application"},
    "application": {"api"},
    "api": {"infrastructure"},
}
_BANNED_EXTERNAL = {
    "domain": DOMAIN_BANNED_EXTERNAL,
    "application": APP_BANNED_EXTERNAL,
    "api": API_BANNED_EXTERNAL,
}


@dataclass(frozen=True)
class ImportRef:
    module: str
    lineno: int


def _classify_layer(py_file: Path, *, pkg_root: Path) -> str | None:
    rel = py_file.relative_to(pkg_root)
    if len(rel.parts) < 2:
        return None
    top = rel.parts[0]
    return top if top in LAYER_NAMES else None


def _normalize_module(module: str, package: str | None) -> str:
    if package and module.startswith(package + "."):
        return module[len(package) + 1 :]
    return module


def _extract_imports(tree: ast.AST) -> list[ImportRef]:
    found: list[ImportRef] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                found.append(ImportRef(module=alias.name, lineno=node.lineno))
        elif isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                found.append(ImportRef(module=node.module, lineno=node.lineno))
    return found


def _extract_no_interface_violations(py_path: Path, tree: ast.AST) -> list[str]:
    violations: list[str] = []
    banned_base_aliases = set(NO_INTERFACE_BASES)

    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            for alias in node.names:
                if (node.module, alias.name) in NO_INTERFACE_IMPORT_RULES:
                    violations.append(
                        f"{py_path}:{node.lineno} no-interfaces rule: forbidden import "
                        f"'{node.module}.{alias.name}'"
                    )
                    if alias.name in NO_INTERFACE_BASES:
                        banned_base_aliases.add(alias.asname or alias.name)

    for node in ast.walk(tree):
        if not isinstance(node, ast.ClassDef):
            continue
        for base in node.bases:
            symbol = _base_symbol(base)
            if symbol is not None and symbol in banned_base_aliases:
                violations.append(
                    f"{py_path}:{node.lineno} no-interfaces rule: class '{node.name}' "
                    f"must not inherit from '{symbol}'"
                )

    return violations


def _base_symbol(node: ast.AST) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Subscript):
        return _base_symbol(node.value)
    return None


def collect_violations(pkg_root: Path, *, package: str | None = DEFAULT_PACKAGE) -> list[str]:
    """Return every layering violation found under ``pkg_root``."""
    violations: list[str] = []
    py_files = sorted(p for p in pkg_root.rglob("*.py") if p.is_file())
    for py_file in py_files:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
        violations.extend(_extract_no_interface_violations(py_file, tree))

        layer = _classify_layer(py_file, pkg_root=pkg_root)
        if layer is None:
            continue

        for imp in _extract_imports(tree):
            normalized = _normalize_module(imp.module, package)
            top = normalized.split(".", 1)[0]

            if top in _BANNED_EXTERNAL.get(layer, set()):
                violations.append(f"{py_file}:{imp.lineno} {layer} imports banned external module: {imp.module}")

            if normalized != imp.module and top in _FORBIDDEN_INTERNAL.get(layer, set()):
                violations.append(f"{py_file}:{imp.lineno} {layer} must not depend on {top}: {imp.module}")

    return violations


def _resolve_package_root(repo_root: Path, package: str) -> Path:
    for candidate in (repo_root / "src" / package, repo_root / package, repo_root / "backend" / package):
        if candidate.is_dir():
            return candidate
    raise SystemExit(f"Package root not found for package '{package}' under {repo_root}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Check layering/import boundaries for API→Application→Infrastructure→Domain."
    )
    parser.add_argument("--root", default=".", help="Repository root (default: current directory).")
    parser.add_argument("--package", default=DEFAULT_PACKAGE, help=f"Package name (default: {DEFAULT_PACKAGE}).")
    args = parser.parse_args()

    repo_root = Path(args.root).resolve()
    pkg_root = _resolve_package_root(repo_root, args.package)

    violations = collect_violations(pkg_root, package=args.package)
    if violations:
        print("Boundary violations found:\n")
        for v in violations:
            print("-", v)
        return 1

    print(f"No boundary violations under {pkg_root} (package={args.package})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
