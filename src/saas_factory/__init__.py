"""SaaS Factory - generate, share and deploy scaffolded projects."""

__version__ = "0.1.0"
