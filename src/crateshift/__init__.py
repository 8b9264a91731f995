"""crateshift - rename Cargo workspace members and follow the rename everywhere.

Renames selected packages in a Cargo workspace and rewrites every local
(path-based) dependency that pointed at them, editing each Cargo.toml in
place without disturbing its formatting.

Package entry point. Exports the version string only; the CLI lives in
main.py and imports the rest lazily.
"""

__version__ = "0.1.0"
