# src/tdocs/errors.py
"""
Exception hierarchy.

Every failure the tool raises on purpose derives from TranslateDocsError so the
CLI can tell expected failures (bad config, missing credentials, git problems)
from programming errors.

Scope of each failure:
- document level (malformed frontmatter, missing files): logged and skipped
- language level (config translation): aborts the current language only
- run level (no git history, missing credentials): aborts the whole run
"""
from __future__ import annotations


class TranslateDocsError(Exception):
    pass


class ConfigError(TranslateDocsError):
    pass


class MalformedMetadataError(TranslateDocsError):
    """Frontmatter block exists but is not a valid YAML mapping."""


class MissingSourceError(TranslateDocsError):
    pass


class MissingReferenceTargetError(MissingSourceError):
    pass


class ReferenceResolutionError(TranslateDocsError):
    pass


class ChainTooDeepError(ReferenceResolutionError):
    pass


class GitError(RuntimeError, TranslateDocsError):
    pass


class NoHistoryError(GitError):
    """The path was never committed, so it cannot be staleness-checked."""


class TranslationError(TranslateDocsError):
    pass


class CredentialMissingError(TranslationError):
    pass


class TranslationCountMismatchError(TranslationError):
    def __init__(self, expected: int, got: int):
        super().__init__(
            f"Translation count mismatch. Expected {expected}, got {got}. "
            "Please ensure you only translate the exact labels provided."
        )
        self.expected = expected
        self.got = got
