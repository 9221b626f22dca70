"""
Declarative descriptions of every user-facing setting.

Each descriptor carries what a settings panel needs to render one control (name,
description, kind, constraints, section) and where the value lives in
`PluginSettings`. Reading and writing go through `get_setting_value` and
`set_setting_value`; there is no per-setting class.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Literal, Optional, Sequence, Tuple

from vault_formatter.settings.models import (
    ArrowParens,
    EmbeddedLanguageFormatting,
    EndOfLine,
    HtmlWhitespaceSensitivity,
    LogLevel,
    PluginSettings,
    ProseWrap,
    QuoteProps,
    TrailingComma,
)

SettingKind = Literal["slider", "toggle", "dropdown", "number", "list"]
SettingTarget = Literal["prettier", "plugin"]

PRETTIER_DOCS_URL = "https://prettier.io/docs/en/options.html"


@dataclass(frozen=True, slots=True)
class Choice:
    value: str
    label: str


@dataclass(frozen=True, slots=True)
class SettingDescriptor:
    key: str
    name: str
    description: str
    default: Any
    kind: SettingKind
    section: str
    target: SettingTarget = "prettier"
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    choices: Tuple[Choice, ...] = ()
    doc_anchor: Optional[str] = None

    @property
    def doc_url(self) -> Optional[str]:
        if self.doc_anchor is None:
            return None
        return f"{PRETTIER_DOCS_URL}#{self.doc_anchor}"


def _choices(enum_type: type[Enum], labels: Optional[Dict[str, str]] = None) -> Tuple[Choice, ...]:
    labels = labels or {}
    return tuple(Choice(value=m.value, label=labels.get(m.value, m.value)) for m in enum_type)


SECTION_FORMATTING = "Formatting"
SECTION_MARKDOWN = "Markdown"
SECTION_CODE_BLOCKS = "Code Blocks"
SECTION_FILE = "File Options"
SECTION_PLUGIN = "Plugin"

SECTIONS: Tuple[str, ...] = (
    SECTION_FORMATTING,
    SECTION_MARKDOWN,
    SECTION_CODE_BLOCKS,
    SECTION_FILE,
    SECTION_PLUGIN,
)

DESCRIPTORS: Tuple[SettingDescriptor, ...] = (
    # Formatting
    SettingDescriptor(
        key="tabWidth",
        name="Tab width",
        description="Specify the number of spaces per indentation-level.",
        default=2,
        kind="slider",
        section=SECTION_FORMATTING,
        minimum=1,
        maximum=8,
        step=1,
        doc_anchor="tab-width",
    ),
    SettingDescriptor(
        key="useTabs",
        name="Use tabs",
        description="Indent lines with tabs instead of spaces.",
        default=False,
        kind="toggle",
        section=SECTION_FORMATTING,
        doc_anchor="tabs",
    ),
    SettingDescriptor(
        key="printWidth",
        name="Print width",
        description="Specify the line length that the printer will wrap on.",
        default=80,
        kind="slider",
        section=SECTION_FORMATTING,
        minimum=1,
        maximum=200,
        step=1,
        doc_anchor="print-width",
    ),
    SettingDescriptor(
        key="singleQuote",
        name="Single quotes",
        description="Use single quotes instead of double quotes.",
        default=False,
        kind="toggle",
        section=SECTION_FORMATTING,
        doc_anchor="quotes",
    ),
    SettingDescriptor(
        key="bracketSpacing",
        name="Bracket spacing",
        description="Print spaces between brackets in object literals.",
        default=True,
        kind="toggle",
        section=SECTION_FORMATTING,
        doc_anchor="bracket-spacing",
    ),
    # Markdown
    SettingDescriptor(
        key="proseWrap",
        name="Prose wrap",
        description="How to wrap prose (markdown text).",
        default=ProseWrap.PRESERVE.value,
        kind="dropdown",
        section=SECTION_MARKDOWN,
        choices=_choices(ProseWrap),
        doc_anchor="prose-wrap",
    ),
    SettingDescriptor(
        key="embeddedLanguageFormatting",
        name="Embedded language formatting",
        description="Control whether Prettier formats quoted code embedded in markdown code blocks.",
        default=EmbeddedLanguageFormatting.AUTO.value,
        kind="dropdown",
        section=SECTION_MARKDOWN,
        choices=_choices(
            EmbeddedLanguageFormatting,
            {"auto": "Auto (Format when detected)", "off": "Off (Never format embedded code)"},
        ),
        doc_anchor="embedded-language-formatting",
    ),
    SettingDescriptor(
        key="htmlWhitespaceSensitivity",
        name="HTML whitespace sensitivity",
        description="Specify how to handle whitespace around HTML tags in markdown.",
        default=HtmlWhitespaceSensitivity.CSS.value,
        kind="dropdown",
        section=SECTION_MARKDOWN,
        choices=_choices(
            HtmlWhitespaceSensitivity,
            {
                "css": "CSS (Respect CSS display property)",
                "strict": "Strict (All whitespace significant)",
                "ignore": "Ignore (All whitespace insignificant)",
            },
        ),
        doc_anchor="html-whitespace-sensitivity",
    ),
    SettingDescriptor(
        key="requirePragma",
        name="Require pragma",
        description="Only format files that contain a special @prettier or @format comment.",
        default=False,
        kind="toggle",
        section=SECTION_MARKDOWN,
        doc_anchor="require-pragma",
    ),
    SettingDescriptor(
        key="insertPragma",
        name="Insert pragma",
        description="Insert a @format marker at the top of formatted files.",
        default=False,
        kind="toggle",
        section=SECTION_MARKDOWN,
        doc_anchor="insert-pragma",
    ),
    # Code blocks
    SettingDescriptor(
        key="trailingComma",
        name="Trailing comma",
        description="Print trailing commas wherever possible in multi-line code blocks.",
        default=TrailingComma.ALL.value,
        kind="dropdown",
        section=SECTION_CODE_BLOCKS,
        choices=_choices(TrailingComma, {"none": "None", "es5": "ES5", "all": "All"}),
        doc_anchor="trailing-commas",
    ),
    SettingDescriptor(
        key="arrowParens",
        name="Arrow parens",
        description="Include parentheses around a sole arrow function parameter in code blocks.",
        default=ArrowParens.ALWAYS.value,
        kind="dropdown",
        section=SECTION_CODE_BLOCKS,
        choices=_choices(ArrowParens, {"always": "Always", "avoid": "Avoid"}),
        doc_anchor="arrow-function-parentheses",
    ),
    SettingDescriptor(
        key="quoteProps",
        name="Quote props",
        description="Change when properties in objects are quoted in code blocks.",
        default=QuoteProps.AS_NEEDED.value,
        kind="dropdown",
        section=SECTION_CODE_BLOCKS,
        choices=_choices(
            QuoteProps,
            {"as-needed": "As Needed", "consistent": "Consistent", "preserve": "Preserve"},
        ),
        doc_anchor="quote-props",
    ),
    SettingDescriptor(
        key="semi",
        name="Semicolons",
        description="Print semicolons at the ends of statements in code blocks.",
        default=True,
        kind="toggle",
        section=SECTION_CODE_BLOCKS,
        doc_anchor="semicolons",
    ),
    # File
    SettingDescriptor(
        key="endOfLine",
        name="End of line",
        description="Specify the line ending style to use.",
        default=EndOfLine.LF.value,
        kind="dropdown",
        section=SECTION_FILE,
        choices=_choices(
            EndOfLine,
            {
                "lf": "LF (Unix/Linux/macOS)",
                "crlf": "CRLF (Windows)",
                "cr": "CR (Classic Mac)",
                "auto": "Auto (Maintain existing)",
            },
        ),
        doc_anchor="end-of-line",
    ),
    # Plugin
    SettingDescriptor(
        key="auto_format",
        name="Auto format",
        description="Format a document shortly after you switch away from it.",
        default=False,
        kind="toggle",
        section=SECTION_PLUGIN,
        target="plugin",
    ),
    SettingDescriptor(
        key="auto_format_debounce_ms",
        name="Auto format delay",
        description="Milliseconds to wait after leaving a document before formatting it.",
        default=1000,
        kind="number",
        section=SECTION_PLUGIN,
        target="plugin",
        minimum=0,
    ),
    SettingDescriptor(
        key="auto_format_extensions",
        name="Auto format file types",
        description="File extensions eligible for auto format, comma separated.",
        default=("md",),
        kind="list",
        section=SECTION_PLUGIN,
        target="plugin",
    ),
    SettingDescriptor(
        key="show_notices",
        name="Show notices",
        description="Display notices after formatting. When disabled, notices are only shown for errors.",
        default=True,
        kind="toggle",
        section=SECTION_PLUGIN,
        target="plugin",
    ),
    SettingDescriptor(
        key="log_level",
        name="Log level",
        description="Set the logging level for console output.",
        default=LogLevel.ERROR.value,
        kind="dropdown",
        section=SECTION_PLUGIN,
        target="plugin",
        choices=_choices(
            LogLevel,
            {"debug": "Debug", "info": "Info", "warn": "Warn", "error": "Error", "silent": "Silent"},
        ),
    ),
)

_BY_KEY: Dict[str, SettingDescriptor] = {d.key: d for d in DESCRIPTORS}


def get_descriptor(key: str) -> SettingDescriptor:
    try:
        return _BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown setting: {key}") from None


def descriptors_for_section(section: str) -> Sequence[SettingDescriptor]:
    return [d for d in DESCRIPTORS if d.section == section]


def get_setting_value(settings: PluginSettings, descriptor: SettingDescriptor) -> Any:
    if descriptor.target == "prettier":
        return settings.prettier_options.get(descriptor.key, descriptor.default)
    value = getattr(settings, descriptor.key)
    if isinstance(value, Enum):
        return value.value
    return value


def _coerce(descriptor: SettingDescriptor, value: Any) -> Any:
    if descriptor.kind == "toggle":
        if not isinstance(value, bool):
            raise ValueError(f"{descriptor.key} expects a boolean, got {value!r}")
        return value

    if descriptor.kind in ("slider", "number"):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{descriptor.key} expects a number, got {value!r}")
        if descriptor.minimum is not None and value < descriptor.minimum:
            raise ValueError(f"{descriptor.key} must be >= {descriptor.minimum}, got {value}")
        if descriptor.maximum is not None and value > descriptor.maximum:
            raise ValueError(f"{descriptor.key} must be <= {descriptor.maximum}, got {value}")
        if descriptor.kind == "slider" and descriptor.step is not None:
            base = descriptor.minimum or 0
            if (value - base) % descriptor.step:
                raise ValueError(f"{descriptor.key} must be a multiple of {descriptor.step}")
        return int(value) if float(value).is_integer() else value

    if descriptor.kind == "dropdown":
        raw = value.value if isinstance(value, Enum) else value
        allowed = [c.value for c in descriptor.choices]
        if raw not in allowed:
            raise ValueError(f"{descriptor.key} must be one of {allowed}, got {raw!r}")
        return raw

    if descriptor.kind == "list":
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, Iterable):
            raise ValueError(f"{descriptor.key} expects a list, got {value!r}")
        return tuple(str(v) for v in value)

    raise ValueError(f"Unsupported setting kind: {descriptor.kind}")


def set_setting_value(settings: PluginSettings, descriptor: SettingDescriptor, value: Any) -> PluginSettings:
    """Return a copy of `settings` with one setting changed. Raises ValueError on constraint violations."""
    coerced = _coerce(descriptor, value)
    data = settings.model_dump(mode="python")
    if descriptor.target == "prettier":
        options = dict(data.get("prettier_options") or {})
        options[descriptor.key] = coerced
        data["prettier_options"] = options
    else:
        data[descriptor.key] = coerced
    return PluginSettings.model_validate(data)


def baseline_options(settings: PluginSettings) -> dict[str, Any]:
    """Formatting options used when no vault configuration file overrides them."""
    options: dict[str, Any] = {d.key: d.default for d in DESCRIPTORS if d.target == "prettier"}
    options.update(settings.prettier_options)
    return options
