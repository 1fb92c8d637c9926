"""Strategy feedback engine for the Pine Genie strategy builder."""

__version__ = "0.1.0"
