"""Engine configuration — loads, validates, and layers tangle settings."""

from __future__ import annotations

import string
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

DEFAULT_LINE_TEMPLATE = '#line {line} "{file}"'

# Host document attributes understood by the engine
OUTDIR_ATTRIBUTE = "litprog-outdir"
LINE_TEMPLATE_ATTRIBUTE = "litprog-line-template"
DOCDIR_ATTRIBUTE = "docdir"

TEMPLATE_FIELDS = {"line", "file"}


@dataclass(frozen=True)
class LitprogConfig:
    """Settings consumed by the tangle phase."""
    outdir: str = ""
    line_template: str = DEFAULT_LINE_TEMPLATE
    docdir: str = "."

    @property
    def output_dir(self) -> Path:
        """Directory that tangled files are written to."""
        if self.outdir:
            return Path(self.docdir) / self.outdir
        return Path(self.docdir)

    def with_attributes(self, attributes: dict[str, Any]) -> LitprogConfig:
        """Return a copy overridden by host document attributes.

        An attribute that is present overrides the setting even when empty,
        so ``litprog-line-template: ""`` turns directives off.
        """
        changes: dict[str, str] = {}
        if attributes.get(DOCDIR_ATTRIBUTE):
            changes["docdir"] = str(attributes[DOCDIR_ATTRIBUTE])
        if attributes.get(OUTDIR_ATTRIBUTE) is not None:
            changes["outdir"] = str(attributes[OUTDIR_ATTRIBUTE])
        if attributes.get(LINE_TEMPLATE_ATTRIBUTE) is not None:
            changes["line_template"] = str(attributes[LINE_TEMPLATE_ATTRIBUTE])
        return replace(self, **changes)


def load_config(path: str | Path) -> LitprogConfig:
    """Load engine settings from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        A LitprogConfig, with defaults for missing keys.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the file is not a mapping or holds unknown keys.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Config YAML must be a mapping at the top level.")

    unknown = set(data) - {"outdir", "line_template"}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    config = LitprogConfig()
    if data.get("outdir") is not None:
        config = replace(config, outdir=str(data["outdir"]))
    if data.get("line_template") is not None:
        config = replace(config, line_template=str(data["line_template"]))
    return config


def validate_config(config: LitprogConfig) -> list[str]:
    """Validate a config for correctness.

    Returns a list of validation error messages. Empty list means valid.
    """
    errors: list[str] = []

    if config.line_template:
        try:
            fields = [
                name for _, name, _, _ in string.Formatter().parse(config.line_template)
                if name is not None
            ]
        except ValueError as e:
            errors.append(f"line_template '{config.line_template}' is malformed: {e}")
        else:
            for name in fields:
                if name not in TEMPLATE_FIELDS:
                    errors.append(
                        f"line_template field '{{{name}}}' is not valid. "
                        f"Must be one of: {', '.join(sorted(TEMPLATE_FIELDS))}."
                    )

    if Path(config.outdir).is_absolute():
        errors.append(f"outdir '{config.outdir}' must be relative to the document directory.")

    return errors
