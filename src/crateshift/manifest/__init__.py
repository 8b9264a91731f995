"""Manifest editing — format-preserving Cargo.toml rewrites.

Provides edit_each() for loading, mutating, and saving each package's
manifest as a tomlkit document, and the dependency walkers that visit
every dependency entry of a document.
"""
