"""
Built-in directory exclusions and classification patterns.

Name patterns are case-insensitive substrings of the file name, extension
patterns include the leading dot, and path patterns are shell globs matched
against any suffix of the relative path (so `.ssh/*` matches at any depth).
"""

from __future__ import annotations

from secretscan.scanner.types import ClassificationRules, ExclusionSet

# Directories that hold dependencies, build output, or tool state rather than
# project sources. Pruned during traversal by exact base name.
DEFAULT_EXCLUDE_DIR_NAMES: list[str] = [
    # Version control
    ".git",
    # Dependencies
    "node_modules",
    "vendor",
    ".bundle",
    # Temporary, cache and log output
    "tmp",
    "cache",
    "log",
    "logs",
    # Coverage and build output
    "coverage",
    "dist",
    "build",
    # Build tools
    ".gradle",
    # IDE/Editor
    ".idea",
    ".vscode",
    # Python
    "__pycache__",
    ".pytest_cache",
]

DEFAULT_EXCLUDE_DIRS: ExclusionSet = ExclusionSet.of(DEFAULT_EXCLUDE_DIR_NAMES)

# Templates and public halves of key pairs are not secrets.
DEFAULT_EXCLUDE_NAMES: list[str] = [
    "example",
    "sample",
    "template",
    # This tool's own config and ignore files
    "secretscan.toml",
    ".secretscanignore",
]

DEFAULT_EXCLUDE_EXTENSIONS: list[str] = [
    ".pub",
    ".md",
]

DEFAULT_EXCLUDE_PATHS: list[str] = []

DEFAULT_INCLUDE_NAMES: list[str] = [
    # Environment files
    ".env",
    # SSH private keys
    "id_rsa",
    "id_dsa",
    "id_ecdsa",
    "id_ed25519",
    # Credential stores
    "credentials",
    "secret",
    ".netrc",
    ".pgpass",
    ".htpasswd",
    ".npmrc",
    ".pypirc",
    # Framework keys
    "master.key",
]

DEFAULT_INCLUDE_EXTENSIONS: list[str] = [
    ".pem",
    ".key",
    ".p12",
    ".pfx",
    ".jks",
    ".keystore",
    ".ppk",
    ".asc",
    ".gpg",
    ".tfvars",
    ".tfstate",
]

DEFAULT_INCLUDE_PATHS: list[str] = [
    ".kamal/*",
    ".ssh/*",
    ".aws/*",
    ".docker/config.json",
    ".kube/config",
]

DEFAULT_RULES: ClassificationRules = ClassificationRules.build(
    exclude_names=DEFAULT_EXCLUDE_NAMES,
    exclude_extensions=DEFAULT_EXCLUDE_EXTENSIONS,
    exclude_paths=DEFAULT_EXCLUDE_PATHS,
    include_names=DEFAULT_INCLUDE_NAMES,
    include_extensions=DEFAULT_INCLUDE_EXTENSIONS,
    include_paths=DEFAULT_INCLUDE_PATHS,
)
