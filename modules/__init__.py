"""Feature modules: each subpackage exposes a Flask blueprint as ``bp``."""
