"""
Provides the `KeywordMapper` class for managing keyword aliases in the Coem language.

Coem already spells its operators and statements as English words (`say`, `know`,
`is`, `be`, ...). This module lets a user add further spellings for those keywords,
for instance another natural language, without touching the lexer.

Classes:
    - KeywordMapper: Maps surface words to keyword token types.

Features:
    - Preloaded with the built-in keyword table via `from_canonical()`
    - Dict-mode configuration (alias or alias group -> token type name)
    - Conflict detection across the existing and the new configuration
    - Loads alias files from JSON
    - Generates alias reports

Usage:
    >>> mapper = KeywordMapper.from_canonical()
    >>> mapper.configure({("shout", "yell"): "SAY"})
    >>> mapper.get_type("yell")
    <TokenType.SAY: 'SAY'>

Raises:
    MappingError: For unknown token names, non-keyword targets and alias collisions.
"""

import json
from typing import Any

from coem.coem_constants import CANONICAL_KEYWORDS, KEYWORD_TYPES, TokenType
from coem.coem_errors import MappingError


class KeywordMapper:
    """Maps user-visible words to keyword token types.

    Attributes:
        token_map (dict[str, TokenType]): Every known spelling and its token type.
        alias_report (dict[str, TokenType]): Spellings added through `configure`, for reporting.
    """

    def __init__(self) -> None:
        self.token_map: dict[str, TokenType] = {}
        self.alias_report: dict[str, TokenType] = {}

    @classmethod
    def from_canonical(cls) -> "KeywordMapper":
        """Constructs a mapper preloaded with the built-in keyword spellings."""
        instance = cls()
        instance.configure({word: sym.value for word, sym in CANONICAL_KEYWORDS.items()})
        return instance

    def get_type(self, word: str) -> TokenType | None:
        return self.token_map.get(word)

    def report(self) -> str:
        """Returns one `alias → TOKEN` line per configured spelling, sorted by alias."""
        return "\n".join(
            f"{alias:>12} → {sym.value}" for alias, sym in sorted(self.alias_report.items())
        )

    def summary(self) -> dict[str, str]:
        return {alias: sym.value for alias, sym in self.alias_report.items()}

    def _extract_aliases(self, entry: Any) -> list[str]:
        if entry is None:
            return []
        if isinstance(entry, str):
            return [entry]
        if isinstance(entry, (list, tuple, set, frozenset)):
            aliases: list[str] = []
            for item in entry:
                aliases.extend(self._extract_aliases(item))
            return aliases
        return []

    def _resolve(self, sym: Any) -> TokenType:
        try:
            token_type = TokenType(sym)
        except (ValueError, TypeError):
            raise MappingError(f"Unknown token type name: {sym}") from None
        if token_type not in KEYWORD_TYPES:
            raise MappingError(f"Token type {token_type.value} cannot be spelled by a keyword")
        return token_type

    def load_from_json(self, path: str) -> None:
        """
        Loads aliases from a JSON file and applies them via `configure`.

        Each key is a comma-separated group of aliases, each value a keyword token
        type name:

            {
                "dire,decir": "SAY",
                "sea": "BE"
            }

        Args:
            path: Path to the JSON alias file.

        Raises:
            MappingError: If the file cannot be read or its content is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
            if not isinstance(raw_cfg, dict):
                raise MappingError("Alias file must contain a JSON object")

            parsed_cfg: dict[tuple[str, ...], Any] = {}
            for key, value in raw_cfg.items():
                aliases = tuple(alias.strip() for alias in key.split(",") if alias.strip())
                parsed_cfg[aliases] = value

            self.configure(parsed_cfg)
        except MappingError:
            raise
        except (OSError, ValueError) as e:
            raise MappingError(f"Failed to load keyword file: {e}") from e

    def configure(self, cfg: dict[Any, Any]) -> None:
        """
        Applies a new alias configuration.

        Keys are a single alias or a group of aliases (list, tuple or set); values are
        keyword token type names such as ``"SAY"``. Nothing is applied if any entry is
        rejected.

        Raises:
            MappingError: If the configuration is not a dict, a target is not a keyword
                token type, or an alias would map to two different token types.
        """
        if not isinstance(cfg, dict):
            raise MappingError("Configuration must be a dict")

        new_token_map: dict[str, TokenType] = {}
        conflicts: list[str] = []

        for alias_group, sym in cfg.items():
            token_type = self._resolve(sym)
            for alias in self._extract_aliases(alias_group):
                existing = self.token_map.get(alias) or new_token_map.get(alias)
                if existing is not None and existing != token_type:
                    conflicts.append(
                        f"'{alias}' → conflict between {existing.value} and {token_type.value}"
                    )
                else:
                    new_token_map[alias] = token_type

        if conflicts:
            raise MappingError("Alias collision(s) detected", conflicts)

        self.token_map.update(new_token_map)
        self.alias_report.update(new_token_map)

    def session_diff(self) -> dict[str, str]:
        """Returns only the aliases that are not part of the built-in keyword table."""
        return {
            alias: sym.value
            for alias, sym in self.token_map.items()
            if CANONICAL_KEYWORDS.get(alias) != sym
        }
