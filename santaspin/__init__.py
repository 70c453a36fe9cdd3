"""
Santaspin - Gift exchange assignment engine

Each participant spins once to learn who they give a gift to. The engine:
- Keeps a ledger of giver -> receiver pairs (each participant gives once, receives once)
- Lists eligible receivers for a giver
- Commits pairs atomically, folding concurrent duplicate submissions into one
- Exposes the ledger over a REST API and a CLI
"""

__version__ = "0.1.0"
