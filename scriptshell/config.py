#!/usr/bin/env python3
"""Configuration for a scriptshell session."""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ShellConfig:
    """Configuration for a Shell session."""
    start_folder: Optional[str] = None  # Default: the process working directory
    throw_on_error: bool = True  # Raise CommandFailed from as_string/as_json/as_xml
    echo: bool = False  # Print each command line before it is launched
    encoding: str = 'utf-8'  # Used to decode captured output and encode stdin
    decode_errors: str = 'replace'  # Codec error handler for captured output; 'surrogateescape' keeps raw bytes
    environment: Dict[str, str] = field(default_factory=dict)  # Overrides for spawned processes
    inherit_environment: bool = True  # Seed the session environment from os.environ
