"""ChainRisk: impact and path analysis for multi-tier supply chain graphs."""

__version__ = "1.0.0"
