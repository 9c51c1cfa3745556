"""trainready: daily recovery, sleep and strain scoring for endurance athletes."""

__version__ = "0.1.0"
