"""Persisted plugin settings, their descriptors, and storage."""

from vault_formatter.settings.descriptors import (
    DESCRIPTORS,
    SECTIONS,
    SettingDescriptor,
    baseline_options,
    descriptors_for_section,
    get_descriptor,
    get_setting_value,
    set_setting_value,
)
from vault_formatter.settings.models import LogLevel, PluginSettings
from vault_formatter.settings.store import (
    JsonSettingsStore,
    MemorySettingsStore,
    SettingsStore,
    load_plugin_settings,
    save_plugin_settings,
)

__all__ = [
    "DESCRIPTORS",
    "JsonSettingsStore",
    "LogLevel",
    "MemorySettingsStore",
    "PluginSettings",
    "SECTIONS",
    "SettingDescriptor",
    "SettingsStore",
    "baseline_options",
    "descriptors_for_section",
    "get_descriptor",
    "get_setting_value",
    "load_plugin_settings",
    "save_plugin_settings",
    "set_setting_value",
]
