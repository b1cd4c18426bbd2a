"""Configuration models for a scan run."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..rules.base import FindingKind

DEFAULT_EXCLUDES = (
    "node_modules",
    "dist",
    "build",
    ".next",
    "coverage",
    ".git",
    "vendor",
    "*.min.js",
    "*.map",
)

DEFAULT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".go", ".rs", ".java")


class FileSizeLimits(BaseModel):
    """Line-count limits for the size rule."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    warning: int = Field(default=300, ge=1)
    critical: int = Field(default=500, ge=1)

    @model_validator(mode="after")
    def check_order(self) -> "FileSizeLimits":
        if self.critical <= self.warning:
            raise ValueError(
                f"critical limit ({self.critical}) must be greater than "
                f"warning limit ({self.warning})"
            )
        return self


class FunctionSizeLimits(BaseModel):
    """Advisory function-size limit. No rule enforces it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    warning: int = Field(default=50, ge=1)


class AutoFixConfig(BaseModel):
    """Which external fixers `--fix` may invoke."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    eslint: bool = True
    prettier: bool = True
    ruff: bool = False


class ScanConfig(BaseModel):
    """Resolved thresholds and switches for one scan run.

    Keys in `.techdebt.json` use camelCase aliases; Python callers may use
    the field names directly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    file_size: FileSizeLimits = Field(default_factory=FileSizeLimits, alias="fileSize")
    function_size: FunctionSizeLimits = Field(
        default_factory=FunctionSizeLimits, alias="functionSize"
    )
    duplicate_threshold: int = Field(default=10, ge=2, alias="duplicateThreshold")
    comment_block_threshold: int = Field(
        default=10, ge=1, alias="commentBlockThreshold"
    )
    unreachable_cap: int = Field(default=20, ge=0, alias="unreachableCap")
    any_type_cap: int = Field(default=50, ge=0, alias="anyTypeCap")
    missing_return_type_cap: int = Field(
        default=20, ge=0, alias="missingReturnTypeCap"
    )
    exclude: tuple[str, ...] = Field(default=DEFAULT_EXCLUDES)
    extensions: tuple[str, ...] = Field(default=DEFAULT_EXTENSIONS)
    enabled_rules: frozenset[FindingKind] = Field(
        default_factory=lambda: frozenset(FindingKind), alias="rules"
    )
    auto_fix: AutoFixConfig = Field(default_factory=AutoFixConfig, alias="autoFix")
    workers: int = Field(default=4, ge=1, le=32)
    external_timeout: float = Field(default=60.0, gt=0, alias="externalTimeout")

    @field_validator("exclude")
    @classmethod
    def validate_patterns(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in v:
            if not pattern.strip():
                raise ValueError("Exclude patterns must be non-empty strings")
        return tuple(pattern.strip() for pattern in v)

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("Extensions must be non-empty strings")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(dict.fromkeys(normalized))

    @field_validator("enabled_rules", mode="before")
    @classmethod
    def parse_rule_names(cls, v: Any) -> Any:
        if isinstance(v, list | tuple | set | frozenset):
            parsed = []
            for item in v:
                if isinstance(item, FindingKind):
                    parsed.append(item)
                    continue
                try:
                    parsed.append(FindingKind[str(item).upper()])
                except KeyError:
                    valid = ", ".join(kind.name.lower() for kind in FindingKind)
                    raise ValueError(
                        f"Unknown rule '{item}' (valid: {valid})"
                    ) from None
            return frozenset(parsed)
        return v

    @property
    def file_size_warning(self) -> int:
        return self.file_size.warning

    @property
    def file_size_critical(self) -> int:
        return self.file_size.critical

    @property
    def function_size_warning(self) -> int:
        return self.function_size.warning

    def is_enabled(self, kind: FindingKind) -> bool:
        """Check whether a rule kind is enabled by configuration."""
        return kind in self.enabled_rules
