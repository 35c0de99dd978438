# ==============================================
# SmartzProd Core
# ==============================================
#
# Package Structure (5 Topics + Orchestrator):
#
# smartzprod/
# ├── validation/     # Topic 1: Check raw form input (predicates + field rules)
# ├── calculation/    # Topic 2: Build records, productivity / match factor math
# ├── analysis/       # Topic 3: Statistics, status tiers, filters
# ├── persistence/    # Topic 4: Record collections on durable key-value storage
# ├── backup/         # Topic 5: Snapshot export / restore
# ├── timing.py       # Debounce / throttle for field validation
# ├── config.py       # Configuration management
# ├── errors.py       # Exception hierarchy
# ├── tracker.py      # Final orchestrator class
# └── cli.py          # Command line entry point
#
# ==============================================

__version__ = "2.0.12"
