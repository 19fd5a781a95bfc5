"""cardstack: spaced-repetition study sessions with pluggable schedulers."""

from cardstack.consts import VERSION

__version__ = VERSION
