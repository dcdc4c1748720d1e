"""modelbridge — reconcile benchmark model slugs with marketplace model ids."""

__version__ = "0.1.0"
