"""Shared test fixtures — fake Description Service, sample projects, configs."""

from __future__ import annotations

import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from cartographer.config.schema import CartographerConfig
from cartographer.service.base import (
    FileContent,
    FileDescription,
    FileExcerpt,
    ServiceError,
)


class FakeService:
    """In-memory DescriptionService that records every request.

    ``fail_batches`` makes every batch call raise; ``fail_paths`` makes deep
    calls (or batches containing one of them) raise for those paths.
    ``delay`` keeps calls in flight long enough to observe concurrency.
    """

    def __init__(
        self,
        *,
        fail_batches: bool = False,
        fail_paths: Optional[set] = None,
        delay: float = 0.0,
        batch_reply: Optional[Callable[[List[FileExcerpt]], List[FileDescription]]] = None,
    ) -> None:
        self.fail_batches = fail_batches
        self.fail_paths = fail_paths or set()
        self.delay = delay
        self.batch_reply = batch_reply
        self.batch_calls: List[List[FileExcerpt]] = []
        self.deep_calls: List[FileContent] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.batch_calls) + len(self.deep_calls)

    def _enter(self) -> None:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)

    def _exit(self) -> None:
        with self._lock:
            self.in_flight -= 1

    def describe_batch(self, files: List[FileExcerpt]) -> List[FileDescription]:
        self._enter()
        try:
            with self._lock:
                self.batch_calls.append(list(files))
            if self.delay:
                time.sleep(self.delay)
            if self.fail_batches or any(f.path in self.fail_paths for f in files):
                raise ServiceError("simulated outage")
            if self.batch_reply is not None:
                return self.batch_reply(files)
            # Reversed on purpose: callers must match by path.
            return [FileDescription(f.path, f"Batch summary of {f.path}") for f in reversed(files)]
        finally:
            self._exit()

    def describe_file(self, file: FileContent) -> FileDescription:
        self._enter()
        try:
            with self._lock:
                self.deep_calls.append(file)
            if self.delay:
                time.sleep(self.delay)
            if file.path in self.fail_paths:
                raise ServiceError("simulated outage")
            return FileDescription(file.path, f"Deep summary of {file.path}")
        finally:
            self._exit()

    def close(self) -> None:
        self.closed = True


def write_files(root: Path, files: Dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def fake_service() -> FakeService:
    return FakeService()


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """The three-file fixture repo: one skip, one deep, one batch file."""
    write_files(tmp_path, {
        "package-lock.json": '{\n  "name": "demo",\n  "lockfileVersion": 3\n}\n',
        "src/index.ts": 'import { slugify } from "./util";\n\nexport function main() {\n  return slugify("Hello");\n}\n',
        "src/util.ts": "export function slugify(s: string) {\n  return s.toLowerCase();\n}\n",
    })
    return tmp_path


@pytest.fixture
def sample_config() -> CartographerConfig:
    cfg = CartographerConfig()
    cfg.tiers.key_entry_points = ["src/index.ts"]
    cfg.llm.rpm_limit = 0
    return cfg


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    write_files(tmp_path, {
        "README.md": "# Test\n",
        "src/app.py": "def run():\n    return 42\n",
    })
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
