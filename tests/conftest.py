from pathlib import Path
from typing import Callable, Dict, Union

import pytest

Tree = Dict[str, Union[str, bytes, "Tree"]]


def _build(root: Path, tree: Tree) -> None:
    root.mkdir(parents=True, exist_ok=True)
    for name, content in tree.items():
        path = root / name
        if isinstance(content, dict):
            _build(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))


@pytest.fixture
def make_tree() -> Callable[[Path, Tree], Path]:
    """Build a directory tree from nested dicts (str/bytes values are files)."""

    def make(root: Path, tree: Tree) -> Path:
        _build(root, tree)
        return root

    return make


@pytest.fixture
def maven_project(tmp_path: Path, make_tree) -> Path:
    return make_tree(
        tmp_path / "oldproject",
        {
            "pom.xml": "<artifactId>oldproject</artifactId>\n<groupId>com.acme</groupId>\n",
            "mvnw": "#!/bin/sh\necho oldproject\n",
            ".gitignore": "target/\n",
            ".git": {"HEAD": "ref: refs/heads/main\n", "objects": {"ab": "oldproject"}},
            ".idea": {"workspace.xml": "<project/>"},
            "target": {"oldproject.jar": b"\x00\x01\x02"},
            "src": {
                "main": {
                    "java": {
                        "acme": {
                            "oldproject": {
                                "OldprojectApp.java": "package acme.oldproject;\n\nclass App {}\n",
                                "oldproject.properties": "name=oldproject\r\nversion=1\r\n",
                            }
                        }
                    }
                }
            },
        },
    )
