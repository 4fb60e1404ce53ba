DEFAULT_MODEL = "openai:gpt-5"

__version__ = "0.1.0"
__author__ = "PsiACE"
__author_email__ = "psiace@apache.org"
__copyright__ = f"Copyright (c) 2026, {__author__}."
__homepage__ = "https://github.com/psiace/turnwire"
__docs__ = "Turn request composer and ordered response event streams for the Responses API."

__all__ = [
    "DEFAULT_MODEL",
    "__author__",
    "__author_email__",
    "__copyright__",
    "__docs__",
    "__homepage__",
    "__version__",
]
