"""NCAA tournament tracker.

Fetches tournament games, derives upsets, close games and scoring stats, and
publishes the result as a whole-document replace into a shared document.
Subpackages: ``api`` (provider client, fallback data, Q&A), ``compute``,
``report`` (models, normalizer, snapshot assembly, formatters), ``sync``
(controller, document stores) and ``cli``.
"""

__version__ = "0.1.0"

__all__ = ["api", "compute", "report", "sync", "cli", "config", "errors"]
