# config_manager.py - Settings dataclass + JSON config manager

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List

from complement_engine.utils.logger_utils import Log


@dataclass(frozen=True)
class Settings:
    # general
    strategy: str = "default"
    match_strategy: str = "prefix"
    max_number_of_suggestions: int = 5
    max_number_of_words_as_phrase: int = 3
    min_number_of_characters_triggered: int = 0
    min_number_of_words_triggered_phrase: int = 1
    complement_automatically: bool = True
    delay_milli_seconds: int = 0
    disable_suggestions_during_ime_on: bool = False
    insert_after_completion: bool = True
    first_characters_disable_suggestions: str = ":/^"

    # key customization
    select_suggestion_keys: str = "Enter"
    additional_cycle_through_suggestions_keys: str = "None"
    propagate_esc: bool = False

    # current file complement
    enable_current_file_complement: bool = True
    only_complement_english_on_current_file_complement: bool = False

    # custom dictionary complement
    enable_custom_dictionary_complement: bool = False
    custom_dictionary_paths: str = ""
    column_delimiter: str = "Tab"
    delimiter_to_hide_suggestion: str = ""
    caret_location_symbol_after_complement: str = ""

    # internal link complement
    enable_internal_link_complement: bool = True
    suggest_internal_link_with_alias: bool = False

    # debug
    show_log_about_performance_in_console: bool = False

    def dictionary_paths(self) -> List[str]:
        return [p for p in self.custom_dictionary_paths.split("\n") if p]


DEFAULTS: Dict[str, Any] = asdict(Settings())


def _coerce(key: str, val: Any) -> Any:
    default = DEFAULTS[key]
    if isinstance(default, bool):
        if isinstance(val, str):
            return val.strip().lower() in ("1", "true", "yes", "on")
        return bool(val)
    return type(default)(val)


class Config:
    """JSON-backed settings. Missing file is created with defaults."""

    def __init__(self, path="config.json"):
        self.path = path
        self.data: Dict[str, Any] = dict(DEFAULTS)
        self._load()

    def _load(self):
        if not os.path.exists(self.path):
            self.save()
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            Log.error(f"[Config] could not read {self.path}, using defaults: {e}")
            return
        for k, v in raw.items():
            if k not in DEFAULTS:
                Log.warning(f"[Config] unknown option ignored: {k}")
                continue
            try:
                self.data[k] = _coerce(k, v)
            except (TypeError, ValueError):
                Log.warning(f"[Config] bad value for {k}: {v!r}")

    def save(self):
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def show(self):
        for k, v in self.data.items():
            print(f"{k:50} = {v}")

    def set(self, key, val):
        if key not in self.data:
            raise KeyError(f"No such option: {key}")
        self.data[key] = _coerce(key, val)
        self.save()

    def settings(self) -> Settings:
        names = {f.name for f in fields(Settings)}
        return replace(Settings(), **{k: v for k, v in self.data.items() if k in names})
