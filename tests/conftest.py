"""
Shared fixtures: in-memory git clock, fake translation service, fake OpenAI client.
"""

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from tdocs.errors import NoHistoryError

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Stands in for `git log -1 --format=%at`. Unknown paths have no history."""

    def __init__(self, times=None, default=T0):
        self.times = {Path(k).as_posix(): v for k, v in (times or {}).items()}
        self.default = default
        self.calls = []

    def set(self, path, when):
        self.times[Path(path).as_posix()] = when

    def __call__(self, path):
        key = Path(path).as_posix()
        self.calls.append(key)
        if key in self.times:
            return self.times[key]
        if self.default is None:
            raise NoHistoryError(f"File {path} has no git history")
        return self.default


class FakeService:
    """Translation service double: prefixes text, uppercases labels."""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.texts = []
        self.configs = []
        self.credential_checks = 0

    def require_credentials(self):
        self.credential_checks += 1

    async def translate_text(self, text, lang, context=""):
        if self.fail_on and self.fail_on in text:
            raise RuntimeError("translation backend exploded")
        self.texts.append(text)
        return f"[{lang.name}] {text}"

    async def translate_config(self, config, lang, docs_context=""):
        import copy

        from tdocs.navconfig import find_label_fields, set_label

        self.configs.append(config)
        out = copy.deepcopy(config)
        for f in find_label_fields(out):
            set_label(out, f.path, f"{f.value} ({lang.name})")
        return out


class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        content = self.replies.pop(0)
        if isinstance(content, Exception):
            raise content
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )


class FakeOpenAI:
    def __init__(self, *replies):
        self.completions = FakeCompletions(replies)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run inside tmp_path: `ref` paths and git paths are relative to the repo root."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service():
    return FakeService()


def write(path, text):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
