"""Violation Message Rendering

Templates are looked up by (message key, locale) through an injected
MessageSource and interpolated with indexed placeholders: {0} is the field
name, {1}.. are the predicate arguments.

Lookup order for locale "ja_JP": ja_JP -> ja -> root bundle -> the
predicate's built-in default template.

Usage:
    formatter = MessageFormatter(YamlMessageSource("/etc/app/messages"))
    formatter.format("charSequence.notBlank", ("name",), locale="ja")
"""
from __future__ import annotations

import locale as _locale
import re
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

import yaml

from covenant.core.config import get_settings
from covenant.core.logging import message_logger

log = message_logger()

ROOT_LOCALE = ""

DEFAULT_MESSAGES: dict[str, str] = {
    # Object
    "object.notNull": '"{0}" must not be null',
    "object.isNull": '"{0}" must be null',
    "object.equalTo": '"{0}" must be equal to {1}',
    "object.oneOf": '"{0}" must be one of the following values: {1}',
    "object.predicate": '"{0}" must meet the constraint',
    # Size (strings and collections)
    "container.notEmpty": '"{0}" must not be empty',
    "container.fixedSize": 'The size of "{0}" must be {1}. The given size is {2}',
    "container.greaterThan": 'The size of "{0}" must be greater than {1}. The given size is {2}',
    "container.greaterThanOrEqual": 'The size of "{0}" must be greater than or equal to {1}. The given size is {2}',
    "container.lessThan": 'The size of "{0}" must be less than {1}. The given size is {2}',
    "container.lessThanOrEqual": 'The size of "{0}" must be less than or equal to {1}. The given size is {2}',
    # Strings
    "charSequence.notBlank": '"{0}" must not be blank',
    "charSequence.pattern": '"{0}" must match {1}',
    "charSequence.email": '"{0}" must be a valid email address',
    "charSequence.url": '"{0}" must be a valid URL',
    "charSequence.ipv4": '"{0}" must be a valid IPv4',
    "charSequence.ipv6": '"{0}" must be a valid IPv6',
    "charSequence.uuid": '"{0}" must be a valid UUID',
    "charSequence.contains": '"{0}" must contain {1}',
    "charSequence.startsWith": '"{0}" must start with "{1}"',
    "charSequence.endsWith": '"{0}" must end with "{1}"',
    "charSequence.byte": '"{0}" must be a valid representation of a byte',
    "charSequence.short": '"{0}" must be a valid representation of a short',
    "charSequence.integer": '"{0}" must be a valid representation of an integer',
    "charSequence.long": '"{0}" must be a valid representation of a long',
    "charSequence.float": '"{0}" must be a valid representation of a float',
    "charSequence.double": '"{0}" must be a valid representation of a double',
    "charSequence.bigInteger": '"{0}" must be a valid representation of a big integer',
    "charSequence.bigDecimal": '"{0}" must be a valid representation of a big decimal',
    # Numbers
    "numeric.greaterThan": '"{0}" must be greater than {1}',
    "numeric.greaterThanOrEqual": '"{0}" must be greater than or equal to {1}',
    "numeric.lessThan": '"{0}" must be less than {1}',
    "numeric.lessThanOrEqual": '"{0}" must be less than or equal to {1}',
    "numeric.between": '"{0}" must be between {1} and {2}',
    "numeric.positive": '"{0}" must be positive',
    "numeric.positiveOrZero": '"{0}" must be positive or zero',
    "numeric.negative": '"{0}" must be negative',
    "numeric.negativeOrZero": '"{0}" must be negative or zero',
    # Collections
    "collection.contains": '"{0}" must contain {1}',
    "collection.unique": '"{0}" must be unique. {1} is/are duplicated.',
}

_PLACEHOLDER = re.compile(r"\{(\d+)\}")


def _render_arg(arg: Any) -> str:
    if isinstance(arg, (list, tuple, set, frozenset)):
        items = sorted(arg, key=str) if isinstance(arg, (set, frozenset)) else arg
        return "[" + ", ".join(str(a) for a in items) + "]"
    return str(arg)


def interpolate(template: str, args: Sequence[Any]) -> str:
    """Replace {n} placeholders; placeholders without an argument are left as-is."""
    def _sub(m: re.Match) -> str:
        idx = int(m.group(1))
        return _render_arg(args[idx]) if idx < len(args) else m.group(0)
    return _PLACEHOLDER.sub(_sub, template)


def normalize_locale(value: str | None) -> str:
    """'ja-JP' / 'ja_JP.UTF-8' -> 'ja_JP'."""
    if not value: return ROOT_LOCALE
    base = value.split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    parts = base.split("_")
    if len(parts) == 1: return parts[0].lower()
    return f"{parts[0].lower()}_{parts[1].upper()}"


def locale_candidates(value: str | None) -> list[str]:
    """Fallback chain ending with the root bundle: ja_JP -> ja -> ''."""
    normalized = normalize_locale(value)
    candidates: list[str] = []
    while normalized:
        candidates.append(normalized)
        normalized = normalized.rpartition("_")[0]
    candidates.append(ROOT_LOCALE)
    return candidates


def default_locale() -> str:
    """Locale used when a validate call does not pass one."""
    if configured := get_settings().DEFAULT_LOCALE: return normalize_locale(configured)
    return normalize_locale(_locale.getlocale()[0]) or "en"


# ============================================================================
# Message Sources
# ============================================================================

@runtime_checkable
class MessageSource(Protocol):
    """Resolves a template for one exact locale (no fallback); None if absent."""

    def get_template(self, key: str, locale: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class DictMessageSource:
    """In-memory bundles: {locale: {key: template}}; '' is the root bundle."""
    bundles: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def get_template(self, key: str, locale: str) -> str | None:
        return self.bundles.get(locale, {}).get(key)


@lru_cache(maxsize=128)
def _load_bundle(directory: str, basename: str, locale: str) -> Mapping[str, str]:
    name = f"{basename}_{locale}.yaml" if locale else f"{basename}.yaml"
    path = Path(directory) / name
    if not path.is_file(): return {}
    with path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Message bundle {path} must be a mapping of key to template")
    log.debug("message_bundle_loaded", path=str(path), locale=locale or "root", keys=len(data))
    return {str(k): str(v) for k, v in data.items()}


@dataclass(frozen=True, slots=True)
class YamlMessageSource:
    """Directory of YAML bundles: messages.yaml, messages_ja.yaml, messages_ja_JP.yaml.

    Bundles are read once per (directory, locale) and cached for the life of
    the process.
    """
    directory: str | Path
    basename: str = "messages"

    def get_template(self, key: str, locale: str) -> str | None:
        return _load_bundle(str(self.directory), self.basename, locale).get(key)


@dataclass(frozen=True, slots=True)
class ChainedMessageSource:
    """First source that resolves the key wins."""
    sources: tuple[MessageSource, ...]

    def __init__(self, *sources: MessageSource):
        object.__setattr__(self, "sources", tuple(sources))

    def get_template(self, key: str, locale: str) -> str | None:
        for source in self.sources:
            if (template := source.get_template(key, locale)) is not None: return template
        return None


def bundled_message_source() -> YamlMessageSource:
    """Bundles shipped with the library (covenant/locales)."""
    return YamlMessageSource(str(resources.files("covenant") / "locales"))


def default_message_source() -> MessageSource:
    """COVENANT_MESSAGES_DIR bundles (if configured) in front of the shipped bundles."""
    if messages_dir := get_settings().MESSAGES_DIR:
        return ChainedMessageSource(YamlMessageSource(messages_dir), bundled_message_source())
    return bundled_message_source()


# ============================================================================
# Formatter
# ============================================================================

@dataclass(frozen=True, slots=True)
class MessageFormatter:
    """Renders violation messages from a MessageSource with locale fallback."""
    source: MessageSource = field(default_factory=default_message_source)

    def template(self, key: str, locale: str | None, default_message: str | None = None) -> str:
        for candidate in locale_candidates(locale):
            if (template := self.source.get_template(key, candidate)) is not None: return template
        return default_message or DEFAULT_MESSAGES.get(key, key)

    def format(self, key: str, args: Sequence[Any], locale: str | None = None,
               default_message: str | None = None) -> str:
        return interpolate(self.template(key, locale, default_message), args)


def default_message(key: str) -> str:
    return DEFAULT_MESSAGES.get(key, key)
