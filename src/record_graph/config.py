"""
Settings

Defaults come from the environment (a .env file in the working directory or
one of its parents is honoured); command line flags override them.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_RATE_LIMIT = 1.5
DEFAULT_API_GROUP = 'Visualizer'
DEFAULT_PER_PAGE = 250


@dataclass
class Settings:
    base_url: str = ''
    api_key: str = ''
    rate_limit: float = DEFAULT_RATE_LIMIT
    api_group: str = DEFAULT_API_GROUP
    per_page: int = DEFAULT_PER_PAGE

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'Settings':
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        return cls(
            base_url=os.getenv('XANO_BASE_URL', '').rstrip('/'),
            api_key=os.getenv('XANO_API_KEY', ''),
            rate_limit=float(os.getenv('XANO_RATE_LIMIT', DEFAULT_RATE_LIMIT)),
            api_group=os.getenv('XANO_API_GROUP', DEFAULT_API_GROUP),
            per_page=int(os.getenv('XANO_PER_PAGE', DEFAULT_PER_PAGE)),
        )

    def override(self, **values) -> 'Settings':
        """Copy with every non-None value applied."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})
