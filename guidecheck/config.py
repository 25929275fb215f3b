"""
Defaults and config loading for guidecheck.

A collection can override any default by dropping a `guidecheck.yaml`
next to its Markdown files:

    languages: [promql, rego]
    correct_markers: ["✅", "(correct)"]
    kinds:
      interview-guide: [interview-questions]
      roadmap: [roadmaps]
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

CONFIG_FILENAME = "guidecheck.yaml"

HTTP_TIMEOUT = 10.0
MAX_WORKERS = 20

# Some sites block headless requests, so we send a common User-Agent
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

KNOWN_LANGUAGES = {
    "bash", "c", "console", "cpp", "css", "csv", "diff", "dockerfile",
    "go", "graphql", "groovy", "hcl", "html", "ini", "java", "javascript",
    "js", "json", "jsonc", "makefile", "markdown", "md", "mermaid", "nginx",
    "plaintext", "powershell", "promql", "protobuf", "python", "py", "r",
    "rego", "rust", "scala", "sh", "shell", "sql", "terraform", "text",
    "toml", "ts", "typescript", "txt", "xml", "yaml", "yml", "zsh",
}

BLOCK_TAGS = {"details", "summary", "JuniorVsSenior"}

CORRECT_MARKERS = ["✅", "[x]", "[X]", "(correct)", "(Correct)"]

QUESTION_PATTERN = r"^(?:\*\*|__)?\s*(?:Q\d*|Question\s*\d*|\d+)\s*(?:\*\*|__)?\s*(?:[:.)]|$)"

ANSWER_SUMMARY = "see answer"

KINDS = {
    "interview-guide": ["interview-questions"],
    "roadmap": ["roadmaps"],
}

REQUIRED_SECTIONS = {
    "interview-guide": ["Scenario", "Challenge", "Quick Check"],
    "roadmap": [],
}

PHASE_PATTERN = r"\b(?:Month|Phase|Week|Stage)\s*\d+"

ENTRY_POINTS = ["README.md"]

IGNORE = [".git/**", "node_modules/**"]


class ConfigError(Exception):
    """Raised for an unusable collection root or config file."""


@dataclass
class Config:
    languages: set = field(default_factory=lambda: set(KNOWN_LANGUAGES))
    block_tags: set = field(default_factory=lambda: set(BLOCK_TAGS))
    correct_markers: list = field(default_factory=lambda: list(CORRECT_MARKERS))
    question_pattern: str = QUESTION_PATTERN
    min_options: int = 2
    kinds: dict = field(default_factory=lambda: {k: list(v) for k, v in KINDS.items()})
    required_sections: dict = field(
        default_factory=lambda: {k: list(v) for k, v in REQUIRED_SECTIONS.items()}
    )
    phase_pattern: str = PHASE_PATTERN
    entry_points: list = field(default_factory=lambda: list(ENTRY_POINTS))
    ignore: list = field(default_factory=lambda: list(IGNORE))
    answer_summary: str = ANSWER_SUMMARY
    http_timeout: float = HTTP_TIMEOUT
    max_workers: int = MAX_WORKERS

    @property
    def question_re(self) -> re.Pattern:
        return re.compile(self.question_pattern, re.IGNORECASE)

    @property
    def phase_re(self) -> re.Pattern:
        return re.compile(self.phase_pattern, re.IGNORECASE)


# key -> (expected type, merge into defaults instead of replacing)
_SCHEMA = {
    "languages": (list, True),
    "block_tags": (list, True),
    "correct_markers": (list, False),
    "question_pattern": (str, False),
    "answer_summary": (str, False),
    "min_options": (int, False),
    "kinds": (dict, False),
    "required_sections": (dict, True),
    "phase_pattern": (str, False),
    "entry_points": (list, False),
    "ignore": (list, True),
}

# env var -> (Config attribute, converter, minimum)
_ENV = {
    "GUIDECHECK_HTTP_TIMEOUT": ("http_timeout", float, 0.1),
    "GUIDECHECK_MAX_WORKERS": ("max_workers", int, 1),
}


def _check_value(path: Path, key: str, value) -> None:
    """Raise ConfigError unless `value` has the shape `_SCHEMA` asks for."""
    expected, _ = _SCHEMA[key]
    if not isinstance(value, expected) or isinstance(value, bool):
        raise ConfigError(f"{path}: '{key}' should be {expected.__name__}, got {type(value).__name__}")

    if expected is list:
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(f"{path}: '{key}' items should be str, got {type(item).__name__}")
    elif expected is dict:
        # kind -> list of str
        for name, items in value.items():
            if not isinstance(items, list):
                raise ConfigError(
                    f"{path}: '{key}.{name}' should be list, got {type(items).__name__}"
                )
            for item in items:
                if not isinstance(item, str):
                    raise ConfigError(
                        f"{path}: '{key}.{name}' items should be str, got {type(item).__name__}"
                    )
    elif key == "answer_summary" and not value.strip():
        raise ConfigError(f"{path}: 'answer_summary' must not be empty")


def apply_env(config: Config) -> Config:
    for name, (attr, convert, minimum) in _ENV.items():
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            value = convert(raw)
        except ValueError as e:
            raise ConfigError(f"{name}: expected {convert.__name__}, got '{raw}'") from e
        if value < minimum:
            raise ConfigError(f"{name}: must be >= {minimum}, got {raw}")
        setattr(config, attr, value)
    return config


def load_config(root: Path, path: Optional[Path] = None) -> Config:
    """Build a Config from defaults, `guidecheck.yaml` (if any) and GUIDECHECK_* env vars."""
    config = apply_env(Config())
    if path is None:
        path = root / CONFIG_FILENAME
        if not path.exists():
            return config
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    for key, value in data.items():
        if key not in _SCHEMA:
            raise ConfigError(f"{path}: unknown key '{key}'")
        _check_value(path, key, value)

        _, merge = _SCHEMA[key]
        current = getattr(config, key)
        if merge and isinstance(current, set):
            current.update(value)
        elif merge and isinstance(current, list):
            current.extend(value)
        elif merge and isinstance(current, dict):
            current.update(value)
        else:
            setattr(config, key, value)

    for attr in ("question_pattern", "phase_pattern"):
        try:
            re.compile(getattr(config, attr))
        except re.error as e:
            raise ConfigError(f"{path}: bad regex for '{attr}': {e}") from e

    config.languages = {lang.lower() for lang in config.languages}
    return config
