"""Workspace discovery — member manifests, package descriptors, and the deep member set.

Provides Workspace for resolving the members a root Cargo.toml declares,
and members_deep() for extending them with path-dependency targets.
"""
