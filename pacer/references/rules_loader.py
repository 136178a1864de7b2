"""
Speech Rules Configuration Loader

Loads book-name correction tables for speech-to-text input from YAML config.
"""

import os
import yaml
from typing import Dict, Any
from functools import lru_cache

from ..core.config import RULES_FILE
from ..utils.errors import RulesError

RULE_SECTIONS = ("transcription_errors", "homophones", "typos")


@lru_cache(maxsize=1)
def load_speech_rules(path: str = None) -> Dict[str, Any]:
    """Load speech correction rules from YAML config."""
    config_path = path or RULES_FILE
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Speech rules not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        rules = yaml.safe_load(f) or {}

    if not isinstance(rules, dict):
        raise RulesError(f"Speech rules must be a mapping: {config_path}")

    for section in RULE_SECTIONS:
        table = rules.get(section) or {}
        if not isinstance(table, dict):
            raise RulesError(f"Section '{section}' must be a mapping in {config_path}")
        rules[section] = {str(k).lower(): str(v) for k, v in table.items()}

    return rules


def reload_speech_rules(path: str = None):
    """Clear cache and reload rules."""
    load_speech_rules.cache_clear()
    return load_speech_rules(path)


def get_transcription_errors(path: str = None) -> Dict[str, str]:
    """Get misheard phrase -> book name corrections."""
    rules = load_speech_rules(path)
    return rules.get('transcription_errors', {})


def get_homophones(path: str = None) -> Dict[str, str]:
    """Get word -> book name homophones that need a "chapter" cue."""
    rules = load_speech_rules(path)
    return rules.get('homophones', {})


def get_typos(path: str = None) -> Dict[str, str]:
    """Get plain word-level typo fixes."""
    rules = load_speech_rules(path)
    return rules.get('typos', {})
