"""ANSI color codes for terminal output."""

import os


class Colors:
    """ANSI color helpers; disabled when NO_COLOR is set."""

    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    enabled = 'NO_COLOR' not in os.environ

    @classmethod
    def paint(cls, code: str, text: str) -> str:
        """Wrap text in an ANSI code (no-op when colors are disabled)."""
        if not cls.enabled:
            return text
        return f"{code}{text}{cls.ENDC}"

    @classmethod
    def success(cls, text: str) -> str:
        return cls.paint(cls.OKGREEN, text)

    @classmethod
    def error(cls, text: str) -> str:
        return cls.paint(cls.FAIL, text)

    @classmethod
    def warning(cls, text: str) -> str:
        return cls.paint(cls.WARNING, text)

    @classmethod
    def info(cls, text: str) -> str:
        return cls.paint(cls.OKCYAN, text)

    @classmethod
    def bold(cls, text: str) -> str:
        return cls.paint(cls.BOLD, text)

    @classmethod
    def dim(cls, text: str) -> str:
        return cls.paint(cls.DIM, text)
