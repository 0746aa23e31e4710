"""
Changelog Generator - turn release notes or GitHub commit ranges into a polished changelog.
"""

from .models import ChangelogRecord, CommitRecord, GenerationResult, OutputFormat, SourceType, Template
from .errors import (
    ChangelogError,
    EmptyInputError,
    GenerationBackendError,
    MissingRepoIdentityError,
    UpstreamFetchError,
    ValidationError,
)
from .fetcher import GitHubFetcher, render_commits
from .prompt import DEFAULT_INSTRUCTIONS, build_prompt
from .generator import FALLBACK_TEXT, ChangelogWriter, package_result
from .schemas import parse_generation_request
from .pipeline import ChangelogPipeline, resolve_raw_material
from .main import main

__all__ = [
    'ChangelogRecord',
    'CommitRecord',
    'GenerationResult',
    'OutputFormat',
    'SourceType',
    'Template',
    'ChangelogError',
    'EmptyInputError',
    'GenerationBackendError',
    'MissingRepoIdentityError',
    'UpstreamFetchError',
    'ValidationError',
    'GitHubFetcher',
    'render_commits',
    'DEFAULT_INSTRUCTIONS',
    'build_prompt',
    'FALLBACK_TEXT',
    'ChangelogWriter',
    'package_result',
    'parse_generation_request',
    'ChangelogPipeline',
    'resolve_raw_material',
    'main',
]
