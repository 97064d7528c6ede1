"""ts-express-init -- interactive TypeScript + Express starter scaffolder."""

__version__ = "0.1.0"
