"""hubgen: TypeScript declarations for strongly-typed hub interfaces."""

__version__ = "0.3.0"
