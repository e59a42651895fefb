"""
Configuration management for reelpress.
"""
import os
import copy
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Values in a local .env become REELPRESS_* overrides below
load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = 'REELPRESS_'

# Built-in settings, grouped by pipeline stage
DEFAULT_CONFIG = {
    "extraction": {
        "max_attempts": 3,
        "backoff_base_seconds": 1.0,
        "timeout_seconds": 15,
        "max_concurrent": 5,
        "requests_per_second": 1,
        "user_agent": "reelpress content bot 0.1",
        "default_author": "Editorial Team",
        "default_category": "Study",
        "min_image_size": 50
    },
    "summary": {
        "max_sentences": 3,
        "max_chars": 300
    },
    "analysis": {
        "study_areas": {
            "Computer Science": ["computer science", "informatics", "programming", "software", "algorithm"],
            "Business": ["business", "economics", "management", "marketing", "finance", "accounting"],
            "Law": ["law", "legal", "jurisprudence", "court"],
            "Medicine": ["medicine", "medical", "clinical", "anatomy", "physician"],
            "Engineering": ["engineering", "mechanical", "electrical", "civil engineering"],
            "Humanities": ["humanities", "history", "philosophy", "literature", "linguistics"]
        }
    },
    "social": {
        "base_hashtags": ["#study", "#university", "#learning", "#uni", "#student"],
        "hashtag_keywords": [
            "exam", "semester", "bachelor", "master", "lecture",
            "seminar", "essay", "thesis", "internship", "motivation"
        ],
        "max_hashtags": 15,
        "max_quotes": 5,
        "importance_markers": ["important", "note", "remember", "tip"],
        "key_point_markers": ["conclusion"]
    },
    "adaptation": {
        "max_length": 2200,
        "tone": "casual",
        "target_audience": "students",
        "max_images": 10
    },
    "reels": {
        "output_format": "mp4",
        "resolution": "1080p",
        "aspect_ratio": "9:16",
        "quality": 90
    },
    "branding": {
        "logo_url": "https://reelpress.example.com/static/logo.png",
        "brand_name": "reelpress",
        "brand_color": "#a4c63a",
        "website": "reelpress.example.com"
    }
}


class Config:
    """
    Settings built from DEFAULT_CONFIG with file and environment overrides applied.
    """
    def __init__(self, config_path: Optional[str] = None, env_prefix: str = ENV_PREFIX):
        """
        Build the effective settings.

        Args:
            config_path: Path to a YAML or JSON configuration file
            env_prefix: Prefix of environment variables that override settings
        """
        self.config_path = config_path
        self.env_prefix = env_prefix
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Start from the defaults and apply the settings file and the environment in turn.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            path = Path(self.config_path)
            if path.exists():
                try:
                    user_config = self._read_file(path)
                except (OSError, ValueError, yaml.YAMLError) as e:
                    logger.warning(f"Error loading config from {self.config_path}: {e}. Using defaults")
                else:
                    if isinstance(user_config, dict):
                        self._update_dict(config, user_config)
            else:
                logger.warning(f"Config file {self.config_path} not found, using defaults")

        self._override_from_env(config)

        return config

    @staticmethod
    def _read_file(path: Path) -> Any:
        suffix = path.suffix.lower()
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f)
            if suffix == '.json':
                return json.load(f)
        raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """
        Merge ``source`` into ``target``, descending into nested sections.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _override_from_env(self, config: Dict) -> None:
        """
        Apply REELPRESS_* environment variables on top of ``config``.

        ``REELPRESS_EXTRACTION__MAX_ATTEMPTS=5`` sets ``extraction.max_attempts``;
        a double underscore separates nesting levels so keys may contain
        single underscores.

        Args:
            config: Configuration dictionary to update
        """
        for key, value in os.environ.items():
            if not key.startswith(self.env_prefix) or key == f"{self.env_prefix}CONFIG_PATH":
                continue

            parts = key[len(self.env_prefix):].lower().split('__')

            current = config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            try:
                current[parts[-1]] = json.loads(value)
            except json.JSONDecodeError:
                current[parts[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a setting by dotted path.

        Args:
            key: Dot-separated key path (e.g., 'extraction.max_attempts')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        current = self.config

        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def save(self, path: Optional[str] = None) -> bool:
        """
        Write the effective settings as YAML or JSON.

        Args:
            path: Path to save the configuration to

        Returns:
            True if successful, False otherwise
        """
        save_path = path or self.config_path
        if not save_path:
            logger.error("No path specified for saving configuration")
            return False

        target = Path(save_path)
        try:
            with open(target, 'w', encoding='utf-8') as f:
                if target.suffix.lower() in ['.yaml', '.yml']:
                    yaml.safe_dump(self.config, f, default_flow_style=False, sort_keys=False)
                elif target.suffix.lower() == '.json':
                    json.dump(self.config, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {target.suffix}")
        except (OSError, ValueError) as e:
            logger.error(f"Error saving config to {save_path}: {e}")
            return False

        return True


# Process-wide settings read by get_config()
config = Config(os.getenv(f'{ENV_PREFIX}CONFIG_PATH'))


def get_config(key: str, default: Any = None) -> Any:
    """
    Dotted lookup in the process-wide settings.

    Args:
        key: Dot-separated key path (e.g., 'reels.resolution')
        default: Default value if key not found

    Returns:
        Configuration value
    """
    return config.get(key, default)
