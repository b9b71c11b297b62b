"""Independently versioned document repositories backed by Git

Each repository consists of a durable, bare "origin" repository, and a
disposable working copy that is used to materialize file changes before they
are committed and pushed back to the origin as an atomic revision.

The main entrypoint is :class:`~revstore.store.DocumentStore`, which is
created from an explicit :class:`~revstore.config.StoreSettings` value.
"""

__version__ = '0.1.0'
