"""monodeploy: dependency consistency checks and service bundling for pnpm workspaces."""

__version__ = "0.1.0"
