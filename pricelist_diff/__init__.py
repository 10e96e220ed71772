"""Price list reconciler: canonical transform of new price sheets and key-based diff against a base sheet."""

__version__ = "0.1.0"
