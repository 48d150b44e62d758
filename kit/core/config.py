"""Configuration management for Kit.

The repository config is an INI file, similar to Git's .git/config.
Sections are exposed as nested string-keyed dicts:

    {'core': {'repositoryformatversion': '0', 'filemode': 'false', ...}}

Keys are case-insensitive, as in Git, and are normalized to lowercase.
"""

import configparser
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from .errors import ConfigInvalid, IoFailure, NotFound, WrongShape

logger = logging.getLogger(__name__)

Sections = Dict[str, Dict[str, str]]

# Required [core] values for the only repository format this version reads
DEFAULT_CORE = {
    'repositoryformatversion': '0',
    'filemode': 'false',
    'bare': 'false',
}


def _parser() -> configparser.ConfigParser:
    # Git values may legitimately contain '%'
    return configparser.ConfigParser(interpolation=None)


class Config:
    """
    Reads and writes one INI config file.

    Nothing is cached between calls; every load re-reads the file.
    """

    def __init__(self, path: Path):
        """
        Initialize Config.

        Args:
            path: Path to the config file
        """
        self.path = Path(path)

    def load(self) -> Sections:
        """
        Load all sections from the config file.

        Returns:
            Dict of section name to key-value dict

        Raises:
            NotFound: If the file does not exist
            WrongShape: If the path is not a regular file
            ConfigInvalid: If the file cannot be parsed
            IoFailure: On any other OS error
        """
        parser = _parser()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                parser.read_file(f, source=str(self.path))
        except FileNotFoundError as e:
            raise NotFound(self.path) from e
        except IsADirectoryError as e:
            raise WrongShape(self.path, 'file') from e
        except UnicodeDecodeError as e:
            raise ConfigInvalid(None, path=self.path, reason=f"not valid UTF-8 ({e.reason})") from e
        except configparser.Error as e:
            raise ConfigInvalid(None, path=self.path, reason=e.message) from e
        except OSError as e:
            raise IoFailure("Error while reading config", self.path, reason=e.strerror) from e

        logger.debug("Loaded config %s (%d sections)", self.path, len(parser.sections()))
        return {section: dict(parser.items(section)) for section in parser.sections()}

    def write(self, sections: Mapping[str, Mapping[str, str]]) -> None:
        """
        Write sections to the config file, replacing its contents.

        Args:
            sections: Dict of section name to key-value dict

        Raises:
            IoFailure: If the file cannot be written
        """
        parser = _parser()
        for section, values in sections.items():
            parser.add_section(section)
            for key, value in values.items():
                parser.set(section, key, str(value))

        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                parser.write(f)
        except OSError as e:
            raise IoFailure("Error while writing config", self.path, reason=e.strerror) from e

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a single configuration value.

        Args:
            section: Config section (e.g. 'core')
            key: Config key (e.g. 'bare')
            fallback: Default value if not found

        Returns:
            Configuration value or fallback
        """
        return self.load().get(section, {}).get(key.lower(), fallback)


def check_core(sections: Mapping[str, Mapping[str, str]], path: Optional[Path] = None) -> None:
    """
    Verify the [core] section carries the required values.

    Keys are checked in DEFAULT_CORE order and compared by exact string
    equality; the first failure is raised.

    Args:
        sections: Loaded config sections
        path: Config file path, for error context

    Raises:
        ConfigInvalid: Naming the missing section or the offending key
    """
    core = sections.get('core')
    if core is None:
        raise ConfigInvalid('core', path=path, reason="missing section [core]")

    for key, expected in DEFAULT_CORE.items():
        actual = core.get(key)
        if actual != expected:
            raise ConfigInvalid(key, expected, actual, path=path)
