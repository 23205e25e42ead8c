from pathlib import Path

import pytest
from setuptools import find_namespace_packages

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def test_every_source_directory_is_installed():
    config = tomllib.loads((ROOT / "pyproject.toml").read_text())
    find = config["tool"]["setuptools"]["packages"]["find"]
    assert find["namespaces"] is True

    packages = set(find_namespace_packages(where=str(ROOT), include=find["include"]))
    source_dirs = {
        ".".join(path.parent.relative_to(ROOT).parts)
        for path in (ROOT / "careercatalyst").rglob("*.py")
    }
    assert {"careercatalyst.core", "careercatalyst.services"} <= packages
    assert source_dirs <= packages
