"""monoboot: bootstrap interdependent packages in a monorepo."""

__version__ = "0.1.0"
